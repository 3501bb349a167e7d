"""Policies — colony-wide foraging rules every ant follows.

Policies gather the knobs that shape individual decisions but are not
per-ant state: how much food one trip can haul, how far an ant can see,
and how strong a trail mark is.  The engine builds them once from the
save-file environment and the tuning config.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Policies:
    """Foraging rules shared by the whole colony.

    Attributes:
        haul_amount: Food units taken from a food cell per harvest.
        visual_range: Chebyshev radius within which food or home is seen.
        deposit_amount: Pheromone laid on the cell an ant just left.
    """

    haul_amount: int = 1
    visual_range: int = 3
    deposit_amount: float = 65534.0

"""Colony — the ant population and its food tally.

A Colony owns its ants in a fixed order (the order they act in each
tick) and counts what they bring home.  The population never grows or
shrinks once a run starts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from antsim.colony.ant import Ant, AntState

if TYPE_CHECKING:
    from numpy.random import Generator


@dataclass
class Colony:
    """Top-level state for the ant colony.

    Attributes:
        ants: Ant population in acting order.
        food_collected: Food units delivered home so far.
        deliveries: Completed food-to-home round trips.
    """

    ants: list[Ant] = field(default_factory=list)
    food_collected: int = 0
    deliveries: int = 0

    def spawn_ant(
        self,
        home: int,
        rng: Generator,
        exploration_range: tuple[float, float] = (0.3, 0.6),
    ) -> Ant:
        """Create a forager on a home cell with a random exploration factor.

        Args:
            home: Board index of the home cell to start on.
            rng: Seeded random generator.
            exploration_range: (min, max) exploration factor.

        Returns:
            The newly created Ant (also appended to ``self.ants``).
        """
        lo, hi = exploration_range
        ant = Ant.at(home, float(rng.uniform(lo, hi)))
        self.ants.append(ant)
        return ant

    def credit(self, amount: int) -> None:
        """Record one delivery of ``amount`` food units."""
        self.food_collected += amount
        self.deliveries += 1

    def in_transit(self) -> int:
        """Food currently carried by returning ants."""
        return sum(a.carrying for a in self.ants if a.state is AntState.RETURNING)

"""Cell — the classification and read-only view of a single board tile.

The board stores cell types as a compact NumPy array of ``CellType``
codes; pheromone concentrations live in the ``PheromoneField`` layers
and food quantities in the board's ``foods`` mapping.  ``Cell`` bundles
all of that for one index when a caller wants to look at it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class CellType(IntEnum):
    """Exclusive classification of a cell."""

    PATH = 0
    FOOD = 1
    BLOCKER = 2
    HOME = 3


@dataclass(frozen=True)
class Cell:
    """A snapshot of one tile.

    Attributes:
        index: Linear board index.
        kind: Cell classification.
        home_pheromone: Home-trail concentration (0 unless a path).
        food_pheromone: Food-trail concentration (0 unless a path).
        food: Remaining food units (0 unless a food cell).
    """

    index: int
    kind: CellType = CellType.PATH
    home_pheromone: float = 0.0
    food_pheromone: float = 0.0
    food: int = 0

    @property
    def is_passable(self) -> bool:
        """Return True if an ant may stand on this cell."""
        return self.kind is not CellType.BLOCKER

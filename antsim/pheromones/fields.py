"""PheromoneField — the two trail channels laid over the board.

Each channel (home, food) is a flat NumPy array indexed like the board.
Alongside the dense arrays the field keeps a sparse ``active`` set of
indices whose concentration is non-negligible, so decay and
serialisation never have to scan the whole board.  Decay itself lives in
``decay.py``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

import numpy as np
from numpy.typing import NDArray


class PheromoneType(Enum):
    """Distinct pheromone channels, each with its own layer."""

    HOME = auto()
    FOOD = auto()


@dataclass
class PheromoneLayer:
    """A single pheromone channel stored as a flat NumPy array.

    Attributes:
        ptype: Which pheromone this layer represents.
        grid: Concentration values (≥ 0), one per board index.
    """

    ptype: PheromoneType
    grid: NDArray[np.float64]


@dataclass
class PheromoneField:
    """Both pheromone layers for a board.

    Attributes:
        size: Number of board cells (must match the Board).
        maximum: Cap applied on every deposit.
        floor: Concentrations below this are treated as zero.
        layers: Mapping from PheromoneType to its layer.
        active: Indices where at least one channel is non-zero.
    """

    size: int
    maximum: float = 65534.0
    floor: float = 1.0
    layers: dict[PheromoneType, PheromoneLayer] = field(init=False, repr=False)
    active: set[int] = field(init=False, default_factory=set)

    def __post_init__(self) -> None:
        """Create one zeroed layer per pheromone type."""
        self.layers = {
            ptype: PheromoneLayer(
                ptype=ptype,
                grid=np.zeros(self.size, dtype=np.float64),
            )
            for ptype in PheromoneType
        }

    def deposit(self, ptype: PheromoneType, index: int, amount: float) -> None:
        """Add pheromone at a cell, capping at ``maximum``.

        A total still below ``floor`` is too faint to register and leaves
        the cell unchanged.

        Args:
            ptype: Which pheromone to deposit.
            index: Board index.
            amount: Quantity to add (must be ≥ 0).
        """
        grid = self.layers[ptype].grid
        value = min(self.maximum, float(grid[index]) + amount)
        if value < self.floor:
            return
        grid[index] = value
        self.active.add(index)

    def set(self, index: int, home: float, food: float) -> None:
        """Overwrite both channels at a cell (used when loading saves)."""
        self.layers[PheromoneType.HOME].grid[index] = home
        self.layers[PheromoneType.FOOD].grid[index] = food
        if home > 0 or food > 0:
            self.active.add(index)
        else:
            self.active.discard(index)

    def clear(self, index: int) -> None:
        """Zero both channels at a cell and drop it from the sparse index."""
        self.set(index, 0.0, 0.0)

    def read(self, ptype: PheromoneType, index: int) -> float:
        """Read pheromone concentration at a cell.

        Args:
            ptype: Which pheromone to read.
            index: Board index.

        Returns:
            Current concentration value.
        """
        return float(self.layers[ptype].grid[index])

    def get_layer(self, ptype: PheromoneType) -> NDArray[np.float64]:
        """Return the raw NumPy array for a pheromone layer.

        Args:
            ptype: Which pheromone type.

        Returns:
            Flat array of concentration values.
        """
        return self.layers[ptype].grid

    def active_indices(self) -> NDArray[np.intp]:
        """Return the sparse index as a sorted NumPy array."""
        return np.fromiter(sorted(self.active), dtype=np.intp, count=len(self.active))

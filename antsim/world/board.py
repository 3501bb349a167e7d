"""Board — the shared cellular world every ant reads and writes.

The Board owns the authoritative per-cell classification plus three
fast-lookup indices kept consistent with it (``homes``, ``foods``,
``blockers``) and the pheromone field.  Only Path cells carry
pheromone: reclassifying a cell clears its trail and depositing on a
non-path cell does nothing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from antsim.pheromones.fields import PheromoneField, PheromoneType
from antsim.world.cell import Cell, CellType
from antsim.world.grid import Grid

if TYPE_CHECKING:
    from numpy.random import Generator


@dataclass
class Board:
    """A flat-indexed grid of cells.

    Attributes:
        grid: Geometry (dimensions and movement directions).
        pheromones: Home/food pheromone layers with their sparse index.
        kinds: ``CellType`` code per index.
        homes: Indices of Home cells.
        foods: Food cell index to remaining quantity.
        blockers: Indices of impassable cells.
    """

    grid: Grid
    pheromones: PheromoneField
    kinds: NDArray[np.uint8] = field(init=False, repr=False)
    homes: set[int] = field(init=False, default_factory=set)
    foods: dict[int, int] = field(init=False, default_factory=dict)
    blockers: set[int] = field(init=False, default_factory=set)

    def __post_init__(self) -> None:
        """Start with every cell an empty path."""
        if self.pheromones.size != self.grid.size:
            msg = (
                f"pheromone field size {self.pheromones.size} does not match "
                f"{self.grid.width}x{self.grid.height} board"
            )
            raise ValueError(msg)
        self.kinds = np.full(self.grid.size, CellType.PATH, dtype=np.uint8)

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.grid.size

    # -- Reads -------------------------------------------------------------

    def kind_at(self, index: int) -> CellType:
        """Return the classification of the cell at ``index``."""
        return CellType(int(self.kinds[index]))

    def is_passable(self, index: int) -> bool:
        """Return True if the cell is not a blocker."""
        return index not in self.blockers

    def cell(self, index: int) -> Cell:
        """Return a read-only view of the cell at ``index``.

        Raises:
            IndexError: If the index is outside the board.
        """
        if not 0 <= index < self.size:
            msg = f"index {index} out of bounds for board of {self.size} cells"
            raise IndexError(msg)
        return Cell(
            index=index,
            kind=self.kind_at(index),
            home_pheromone=self.pheromones.read(PheromoneType.HOME, index),
            food_pheromone=self.pheromones.read(PheromoneType.FOOD, index),
            food=self.foods.get(index, 0),
        )

    def legal_neighbours(self, index: int) -> list[int]:
        """Return non-blocker neighbours of ``index`` in direction order."""
        return [n for n in self.grid.neighbours(index) if n not in self.blockers]

    def total_food(self) -> int:
        """Sum of remaining food across all food cells."""
        return sum(self.foods.values())

    # -- Classification ----------------------------------------------------

    def _reclassify(self, index: int, kind: CellType) -> None:
        if not 0 <= index < self.size:
            msg = f"index {index} out of bounds for board of {self.size} cells"
            raise IndexError(msg)
        self.homes.discard(index)
        self.blockers.discard(index)
        self.foods.pop(index, None)
        if kind is not CellType.PATH:
            self.pheromones.clear(index)
        self.kinds[index] = kind

    def set_path(self, index: int) -> None:
        """Turn a cell back into an empty path."""
        self._reclassify(index, CellType.PATH)

    def set_home(self, index: int) -> None:
        """Mark a cell as part of the colony's home."""
        self._reclassify(index, CellType.HOME)
        self.homes.add(index)

    def set_blocker(self, index: int) -> None:
        """Make a cell impassable."""
        self._reclassify(index, CellType.BLOCKER)
        self.blockers.add(index)

    def set_food(self, index: int, amount: int) -> None:
        """Place a food source holding ``amount`` units."""
        self._reclassify(index, CellType.FOOD)
        self.foods[index] = amount

    # -- Mutation during a tick --------------------------------------------

    def deposit(self, ptype: PheromoneType, index: int, amount: float) -> None:
        """Deposit pheromone on a path cell; other cell types ignore it."""
        if self.kinds[index] == CellType.PATH:
            self.pheromones.deposit(ptype, index, amount)

    def take_food(self, index: int, amount: int) -> int:
        """Remove up to ``amount`` units from a food cell.

        The cell keeps its Food type even when emptied.

        Returns:
            Units actually removed (0 if the cell is not food or is empty).
        """
        remaining = self.foods.get(index, 0)
        taken = min(remaining, amount)
        if taken > 0:
            self.foods[index] = remaining - taken
        return taken

    # -- Scenario construction ---------------------------------------------

    def mark_home(self, cx: int, cy: int, radius: int = 1) -> None:
        """Mark a square of cells around ``(cx, cy)`` as home.

        Args:
            cx: Centre column of the home.
            cy: Centre row of the home.
            radius: How many cells outward to mark.
        """
        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                nx, ny = cx + dx, cy + dy
                if self.grid.contains(nx, ny):
                    self.set_home(self.grid.index_of(nx, ny))

    def populate(
        self,
        rng: Generator,
        *,
        num_patches: int = 6,
        patch_radius: int = 3,
        food_per_cell: int = 255,
    ) -> None:
        """Place circular food patches at random across the grid.

        Cells already classified as home or blocker are left alone, and
        food thins out toward the rim of each patch.

        Args:
            rng: Seeded random generator.
            num_patches: Number of food patches to place.
            patch_radius: Radius of each patch in cells.
            food_per_cell: Food placed at a patch centre.
        """
        for _ in range(num_patches):
            cx = int(rng.integers(0, self.grid.width))
            cy = int(rng.integers(0, self.grid.height))
            for dy in range(-patch_radius, patch_radius + 1):
                for dx in range(-patch_radius, patch_radius + 1):
                    nx, ny = cx + dx, cy + dy
                    if not self.grid.contains(nx, ny):
                        continue
                    dist = math.hypot(dx, dy)
                    if dist > patch_radius:
                        continue
                    index = self.grid.index_of(nx, ny)
                    if self.kinds[index] in (CellType.HOME, CellType.BLOCKER):
                        continue
                    # Circular falloff: cells near centre get more food
                    amount = int(food_per_cell * (1.0 - dist / (patch_radius + 1)))
                    self.set_food(index, self.foods.get(index, 0) + max(1, amount))

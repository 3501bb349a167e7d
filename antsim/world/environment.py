"""Environment — the fixed physical parameters of one world.

This is the ``env`` block of a save document: seed, pheromone decay
rate, haul size, movement directions, sensing radius and board size.
Only ``seed`` changes during a run (it advances once per tick).
"""

from __future__ import annotations

from dataclasses import dataclass

from antsim.errors import InvalidConfigurationError
from antsim.world.grid import DEFAULT_POINTS, Grid, offsets_from_points

SEED_MODULUS = 2**64

# Largest board (in cells) a world may describe.
MAX_CELLS = 2**24


@dataclass
class Environment:
    """World parameters shared by board and ants.

    Attributes:
        width: Number of grid columns.
        height: Number of grid rows.
        seed: Current RNG seed (unsigned 64-bit).
        decay_rate: Integer pheromone decay rate (larger = slower).
        haul_amount: Food units taken per harvest.
        points: Ordered unit vectors defining movement directions.
        ant_visual_range: Sensing radius in cells.
    """

    width: int
    height: int
    seed: int = 0
    decay_rate: int = 2
    haul_amount: int = 1
    points: tuple[tuple[float, float], ...] = DEFAULT_POINTS
    ant_visual_range: int = 3

    def validate(
        self,
        max_visual_range: int = 20,
        max_cells: int = MAX_CELLS,
    ) -> None:
        """Reject parameters no simulation can run with.

        Args:
            max_visual_range: Largest permitted sensing radius.
            max_cells: Largest permitted ``width * height``.

        Raises:
            InvalidConfigurationError: On a zero-size or oversized board,
                an invalid direction set, or out-of-range rates.
        """
        if self.width <= 0 or self.height <= 0:
            msg = f"board must be non-empty, got {self.width}x{self.height}"
            raise InvalidConfigurationError(msg)
        if self.width * self.height > max_cells:
            msg = (
                f"board of {self.width}x{self.height} exceeds the limit of "
                f"{max_cells} cells"
            )
            raise InvalidConfigurationError(msg)
        offsets_from_points(self.points)
        if self.decay_rate < 1:
            msg = f"decay_rate must be >= 1, got {self.decay_rate}"
            raise InvalidConfigurationError(msg)
        if self.haul_amount < 1:
            msg = f"haul_amount must be >= 1, got {self.haul_amount}"
            raise InvalidConfigurationError(msg)
        if not 0 <= self.ant_visual_range <= max_visual_range:
            msg = (
                f"ant_visual_range must be within 0..{max_visual_range}, "
                f"got {self.ant_visual_range}"
            )
            raise InvalidConfigurationError(msg)
        if not 0 <= self.seed < SEED_MODULUS:
            msg = f"seed must be an unsigned 64-bit integer, got {self.seed}"
            raise InvalidConfigurationError(msg)

    def make_grid(self) -> Grid:
        """Build the board geometry for these dimensions and directions."""
        return Grid(
            width=self.width,
            height=self.height,
            offsets=offsets_from_points(self.points),
        )

    def advance_seed(self) -> None:
        """Move to the next tick's seed, wrapping at 2**64."""
        self.seed = (self.seed + 1) % SEED_MODULUS

"""Grid — flat-indexed geometry for the board.

Cells are addressed by a single linear index ``y * width + x``.  The
grid converts between the two forms and answers the spatial queries
ants need: neighbours along the configured movement directions and
every cell inside a square sensing window.  There is no wraparound.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from antsim.errors import InvalidConfigurationError

# Compass order used when no direction set is supplied.
DEFAULT_POINTS: tuple[tuple[float, float], ...] = (
    (1.0, 0.0),
    (0.7071067811865476, 0.7071067811865476),
    (0.0, 1.0),
    (-0.7071067811865476, 0.7071067811865476),
    (-1.0, 0.0),
    (-0.7071067811865476, -0.7071067811865476),
    (-0.0, -1.0),
    (0.7071067811865476, -0.7071067811865476),
)


def offsets_from_points(
    points: Sequence[Sequence[float]],
) -> tuple[tuple[int, int], ...]:
    """Convert unit direction vectors into ``(dx, dy)`` cell offsets.

    Each vector is rounded component-wise, so ``(0.707, 0.707)`` becomes
    the diagonal step ``(1, 1)``.

    Args:
        points: Ordered 2D direction vectors.

    Returns:
        One offset per point, in the same order.

    Raises:
        InvalidConfigurationError: If the set is empty, a vector rounds to
            the null move or a non-adjacent step, or two vectors round to
            the same offset.
    """
    if not points:
        msg = "movement direction set is empty"
        raise InvalidConfigurationError(msg)

    offsets: list[tuple[int, int]] = []
    for i, (px, py) in enumerate(points):
        dx, dy = round(px), round(py)
        if (dx, dy) == (0, 0) or abs(dx) > 1 or abs(dy) > 1:
            msg = f"points[{i}] = ({px}, {py}) is not a unit step direction"
            raise InvalidConfigurationError(msg)
        if (dx, dy) in offsets:
            msg = f"points[{i}] duplicates direction ({dx}, {dy})"
            raise InvalidConfigurationError(msg)
        offsets.append((dx, dy))
    return tuple(offsets)


@dataclass(frozen=True)
class Grid:
    """Rectangular board geometry.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        offsets: Movement steps ``(dx, dy)`` in direction order.
    """

    width: int
    height: int
    offsets: tuple[tuple[int, int], ...] = field(
        default_factory=lambda: offsets_from_points(DEFAULT_POINTS),
    )

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            msg = f"board must be non-empty, got {self.width}x{self.height}"
            raise InvalidConfigurationError(msg)

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.width * self.height

    def contains(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` lies on the board."""
        return 0 <= x < self.width and 0 <= y < self.height

    def index_of(self, x: int, y: int) -> int:
        """Return the linear index of column ``x``, row ``y``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not self.contains(x, y):
            msg = f"({x}, {y}) out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        return y * self.width + x

    def coords_of(self, index: int) -> tuple[int, int]:
        """Return ``(x, y)`` for a linear index.

        Raises:
            IndexError: If the index is outside the board.
        """
        if not 0 <= index < self.size:
            msg = f"index {index} out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        y, x = divmod(index, self.width)
        return x, y

    def neighbours(self, index: int) -> list[int]:
        """Return in-bounds neighbour indices in direction order."""
        x, y = self.coords_of(index)
        result: list[int] = []
        for dx, dy in self.offsets:
            nx, ny = x + dx, y + dy
            if self.contains(nx, ny):
                result.append(ny * self.width + nx)
        return result

    def within_radius(self, index: int, radius: int) -> list[int]:
        """Return every in-bounds index at Chebyshev distance 1..radius.

        The window is clipped to the board and listed in row-major order;
        the centre cell itself is excluded.
        """
        if radius <= 0:
            return []
        x, y = self.coords_of(index)
        x0, x1 = max(0, x - radius), min(self.width - 1, x + radius)
        y0, y1 = max(0, y - radius), min(self.height - 1, y + radius)
        return [
            ny * self.width + nx
            for ny in range(y0, y1 + 1)
            for nx in range(x0, x1 + 1)
            if (nx, ny) != (x, y)
        ]

    def distance(self, a: int, b: int) -> int:
        """Chebyshev (king-move) distance between two indices."""
        ax, ay = self.coords_of(a)
        bx, by = self.coords_of(b)
        return max(abs(ax - bx), abs(ay - by))

    def squared_distance(self, a: int, b: int) -> int:
        """Squared Euclidean distance between two indices."""
        ax, ay = self.coords_of(a)
        bx, by = self.coords_of(b)
        return (ax - bx) ** 2 + (ay - by) ** 2

"""Integer coordinates and extents in N-dimensional grid space.

A Coordinate is both a point and an extent (the size of a grid along each
axis). All grids in the package use a single flat-index convention: the first
axis varies fastest. The cartesian iterator walks coordinates in exactly that
order, so storage order, scan order and match order always agree.
"""

from dataclasses import dataclass
import operator
from typing import Iterator, Optional, Tuple, Union
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinate:
    """Ordered tuple of signed integer axes.

    Attributes:
        axes: One integer per dimension (axis 0 first)
    """
    axes: Tuple[int, ...]

    def __post_init__(self):
        # operator.index rejects floats instead of truncating them
        axes = tuple(operator.index(a) for a in self.axes)
        if not axes:
            raise ValueError("Coordinate must have at least one axis")
        object.__setattr__(self, 'axes', axes)

    @classmethod
    def of(cls, *axes: int) -> 'Coordinate':
        """Build a coordinate from positional axes: Coordinate.of(x, y)."""
        return cls(axes)

    @classmethod
    def zero(cls, dimension: int) -> 'Coordinate':
        return cls((0,) * dimension)

    @classmethod
    def one(cls, dimension: int) -> 'Coordinate':
        return cls((1,) * dimension)

    @property
    def dimension(self) -> int:
        return len(self.axes)

    def _check_dimension(self, other: 'Coordinate') -> None:
        if other.dimension != self.dimension:
            raise ValueError(
                f"Dimension mismatch: {self.dimension}D coordinate combined with "
                f"{other.dimension}D coordinate")

    def __add__(self, other: 'Coordinate') -> 'Coordinate':
        other = as_coordinate(other)
        self._check_dimension(other)
        return Coordinate(tuple(a + b for a, b in zip(self.axes, other.axes)))

    def __sub__(self, other: 'Coordinate') -> 'Coordinate':
        other = as_coordinate(other)
        self._check_dimension(other)
        return Coordinate(tuple(a - b for a, b in zip(self.axes, other.axes)))

    def __iter__(self) -> Iterator[int]:
        return iter(self.axes)

    def __len__(self) -> int:
        return len(self.axes)

    def __getitem__(self, axis: int) -> int:
        return self.axes[axis]

    def __repr__(self) -> str:
        return f"Coordinate{self.axes}"

    def volume(self) -> int:
        """Number of cells in a grid of this extent (product of axes)."""
        return volume(self)

    def is_extent(self) -> bool:
        """True if every axis is non-negative."""
        return all(a >= 0 for a in self.axes)

    def within(self, extent: 'Coordinate') -> bool:
        """Check 0 <= axis < extent.axis on every axis."""
        extent = as_coordinate(extent)
        self._check_dimension(extent)
        return all(0 <= a < e for a, e in zip(self.axes, extent.axes))

    def to_flat(self, extent: 'Coordinate') -> int:
        """Convert to a flat buffer index within extent (first axis fastest).

        Raises:
            IndexError: If the coordinate lies outside extent
        """
        extent = as_coordinate(extent)
        if not self.within(extent):
            raise IndexError(f"{self} out of bounds for extent {extent.axes}")

        return sum(a * s for a, s in zip(self.axes, strides(extent)))

    def rotated(self, times: int, extent: 'Coordinate') -> 'Coordinate':
        """Rotate about the centre of a grid of the given extent.

        Args:
            times: Rotation index (reduced modulo the number of rotations)
            extent: Bounding box the rotation keeps the result inside

        Returns:
            Rotated coordinate, inside rotated_extent(extent, times)
        """
        from .rotation import rotation_group
        return rotation_group(self.dimension).rotate(self, times, extent)

    def cartesian_iter(self, begin: Optional['Coordinate'] = None) -> Iterator['Coordinate']:
        """Iterate every coordinate inside this extent."""
        return cartesian_iter(self, begin)


CoordinateLike = Union[Coordinate, Tuple[int, ...], int]


def as_coordinate(value: CoordinateLike) -> Coordinate:
    """Accept a Coordinate, a sequence of ints or a bare integer (1D).

    Any integer type (including numpy integers) counts as a scalar.

    Raises:
        TypeError: If an axis is not an integer
    """
    if isinstance(value, Coordinate):
        return value
    try:
        scalar = operator.index(value)
    except TypeError:
        return Coordinate(tuple(value))
    return Coordinate((scalar,))


def strides(extent: CoordinateLike) -> Tuple[int, ...]:
    """Flat-index step for each axis (stride[0] == 1, first axis fastest)."""
    extent = as_coordinate(extent)
    out = []
    stride = 1
    for e in extent.axes:
        out.append(stride)
        stride *= e
    return tuple(out)


def volume(extent: CoordinateLike) -> int:
    """Product of the extent's axes."""
    extent = as_coordinate(extent)
    total = 1
    for a in extent.axes:
        total *= a
    return total


def cartesian_iter(extent: CoordinateLike,
                   begin: Optional[CoordinateLike] = None) -> Iterator[Coordinate]:
    """Yield every coordinate in [begin, begin + extent).

    Scan order: axis 0 advances fastest; when an axis reaches its bound it
    resets and carries into the next axis. For 2D this is the familiar
    "x inner loop, y outer loop". Each call returns a fresh generator.

    Args:
        extent: Size along each axis (an empty axis yields nothing)
        begin: Corner to start from (defaults to the origin; may be negative)
    """
    extent = as_coordinate(extent)
    begin = Coordinate.zero(extent.dimension) if begin is None else as_coordinate(begin)
    if begin.dimension != extent.dimension:
        raise ValueError(
            f"Dimension mismatch: begin is {begin.dimension}D, extent is {extent.dimension}D")

    if any(e <= 0 for e in extent.axes):
        return

    end = [b + e for b, e in zip(begin.axes, extent.axes)]
    current = list(begin.axes)
    while True:
        yield Coordinate(tuple(current))

        for axis in range(len(current)):
            current[axis] += 1
            if current[axis] < end[axis]:
                break
            # carry
            current[axis] = begin.axes[axis]
        else:
            return

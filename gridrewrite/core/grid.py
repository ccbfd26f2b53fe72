"""N-dimensional grid of typed cells.

The grid is the spatial substrate that rewrite rules operate on. Cells live in
a flat list sized to the product of the extent's axes and are addressed
through Coordinate.to_flat (first axis fastest). Rotated access goes through
RotatedView, which re-indexes on every read and never copies cell data.
"""

from typing import Any, Dict, Generic, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar
import logging

import numpy as np

from .coord import Coordinate, CoordinateLike, as_coordinate, cartesian_iter, volume
from .rotation import rotation_group

logger = logging.getLogger(__name__)

Cell = TypeVar('Cell')


class StaleViewError(RuntimeError):
    """A RotatedView was used after its grid was mutated."""


def default_symbol(cell: Any) -> str:
    """One-character text symbol for a cell value (wildcards print as '.')."""
    if cell is None:
        return '.'
    name = getattr(cell, 'name', None)
    text = str(name if name is not None else cell)
    return text[0] if text else '?'


class Grid(Generic[Cell]):
    """Fixed-extent N-dimensional grid backed by a flat cell list.

    Attributes:
        extent: Size along each axis
        dimension: Number of axes
    """

    def __init__(self, extent: CoordinateLike, cells: Iterable[Cell]):
        """Initialize grid from an extent and cells in flat-index order.

        Args:
            extent: Size along each axis (all axes non-negative)
            cells: Exactly volume(extent) cell values, first axis fastest

        Raises:
            ValueError: If the extent is negative or the cell count doesn't match
        """
        extent = as_coordinate(extent)
        if not extent.is_extent():
            raise ValueError(f"Grid extent must be non-negative, got {extent.axes}")

        cells = list(cells)
        if len(cells) != volume(extent):
            raise ValueError(
                f"Cell count {len(cells)} doesn't match extent volume {volume(extent)} "
                f"for extent {extent.axes}")

        self._extent = extent
        self._cells: List[Cell] = cells
        self._version = 0

    @classmethod
    def filled(cls, extent: CoordinateLike, value: Cell) -> 'Grid[Cell]':
        """Create grid with every cell set to value."""
        return cls(extent, [value] * volume(extent))

    @classmethod
    def from_nested(cls, nested: Sequence) -> 'Grid':
        """Create grid from nested sequences; axis 0 is the outermost level.

        nested[i][j] becomes the cell at Coordinate.of(i, j).

        Raises:
            ValueError: If the nesting is ragged
        """
        shape = []
        level = nested
        while isinstance(level, (list, tuple)):
            shape.append(len(level))
            if not level:
                break
            level = level[0]

        array = np.empty(tuple(shape), dtype=object)
        for index in np.ndindex(*shape):
            value = nested
            try:
                for i in index:
                    value = value[i]
            except (IndexError, TypeError) as exc:
                raise ValueError(f"Ragged nested grid data at {index}") from exc
            if isinstance(value, (list, tuple)):
                raise ValueError(f"Ragged nested grid data at {index}")
            array[index] = value
        return cls.from_array(array)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'Grid':
        """Create grid from a numpy array; array axis k is grid axis k."""
        array = np.asarray(array)
        if array.ndim == 0:
            raise ValueError("Grid array must have at least one axis")
        # Fortran order ravels with axis 0 fastest, matching to_flat
        return cls(Coordinate(array.shape), array.ravel(order='F').tolist())

    @property
    def extent(self) -> Coordinate:
        return self._extent

    @property
    def dimension(self) -> int:
        return self._extent.dimension

    @property
    def version(self) -> int:
        """Mutation counter, bumped once per write operation."""
        return self._version

    def is_square(self) -> bool:
        """True if every axis has the same length."""
        return len(set(self._extent.axes)) <= 1

    def copy(self) -> 'Grid[Cell]':
        """Create an independent copy of the grid."""
        return Grid(self._extent, self._cells)

    def contains(self, coord: CoordinateLike) -> bool:
        coord = as_coordinate(coord)
        return coord.dimension == self.dimension and coord.within(self._extent)

    def _flat(self, coord: CoordinateLike) -> int:
        coord = as_coordinate(coord)
        if coord.dimension != self.dimension:
            raise ValueError(
                f"Dimension mismatch: {coord.dimension}D coordinate on {self.dimension}D grid")
        return coord.to_flat(self._extent)

    def cell_at(self, coord: CoordinateLike) -> Cell:
        """Get cell value at coordinate.

        Raises:
            IndexError: If coordinate is out of bounds
        """
        return self._cells[self._flat(coord)]

    get = cell_at

    def set(self, coord: CoordinateLike, value: Cell) -> None:
        """Set cell value at coordinate.

        Raises:
            IndexError: If coordinate is out of bounds
        """
        self._cells[self._flat(coord)] = value
        self._version += 1

    def write_cells(self, writes: Iterable[Tuple[CoordinateLike, Cell]]) -> int:
        """Write several cells as one operation.

        Every target is bounds-checked before the first write, so either all
        writes happen or none do.

        Returns:
            Number of cells written

        Raises:
            IndexError: If any target is out of bounds (grid left untouched)
        """
        resolved = [(self._flat(coord), value) for coord, value in writes]
        for index, value in resolved:
            self._cells[index] = value
        self._version += 1
        return len(resolved)

    def fill(self, value: Cell) -> None:
        """Set every cell to value."""
        self._cells = [value] * len(self._cells)
        self._version += 1

    def cells(self) -> List[Cell]:
        """Cell values in flat-index order (a copy)."""
        return list(self._cells)

    def cartesian_iter(self) -> Iterator[Tuple[Coordinate, Cell]]:
        """Iterate (coordinate, cell) pairs in scan order."""
        for coord in cartesian_iter(self._extent):
            yield coord, self._cells[coord.to_flat(self._extent)]

    def count(self, value: Cell) -> int:
        """Count cells equal to value."""
        return sum(1 for cell in self._cells if cell == value)

    def rotated(self, times: int) -> 'Grid[Cell]':
        """Materialize a rotated copy: result[rotate(c)] == self[c]."""
        config = rotation_group(self.dimension)[times]
        # output axis i is source axis permutation[i], reversed where negated
        negated = tuple(i for i, axis in enumerate(config.axes) if axis.negated)
        rotated = np.flip(np.transpose(self.to_array(), config.permutation), negated)
        return Grid.from_array(rotated)

    def with_rotation(self, times: int) -> 'RotatedView[Cell]':
        """Rotated read-only view sharing this grid's cells."""
        return RotatedView(self, times)

    def to_array(self) -> np.ndarray:
        """Cells as a numpy object array of shape extent (array[c] == grid[c])."""
        flat = np.empty(len(self._cells), dtype=object)
        for i, cell in enumerate(self._cells):
            flat[i] = cell
        return flat.reshape(self._extent.axes, order='F')

    def to_text(self, symbols: Optional[Dict[Any, str]] = None,
                max_width: int = 80, max_height: int = 40) -> str:
        """Text preview of a 1D or 2D grid (axis 0 across, axis 1 down)."""
        if self.dimension > 2:
            return repr(self)

        def symbol(cell):
            if symbols is not None and cell in symbols:
                return symbols[cell]
            return default_symbol(cell)

        width = self._extent[0]
        height = self._extent[1] if self.dimension == 2 else 1
        lines = []
        for y in range(min(height, max_height)):
            line = ''
            for x in range(min(width, max_width)):
                coord = Coordinate((x, y)) if self.dimension == 2 else Coordinate((x,))
                line += symbol(self.cell_at(coord))
            if width > max_width:
                line += '...'
            lines.append(line)
        if height > max_height:
            lines.append('...')
        return '\n'.join(lines)

    def __getitem__(self, coord: CoordinateLike) -> Cell:
        """Access cell using grid[x, y] or grid[Coordinate] syntax."""
        return self.cell_at(coord)

    def __setitem__(self, coord: CoordinateLike, value: Cell) -> None:
        self.set(coord, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return False
        return self._extent == other._extent and self._cells == other._cells

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        extent = 'x'.join(str(a) for a in self._extent.axes)
        return f"Grid({extent}, cells={len(self._cells)})"


class RotatedView(Generic[Cell]):
    """Read-only rotated window onto a Grid.

    view[c] equals grid.rotated(rotation)[c] without copying. The view records
    the grid's mutation counter when created; reading after the grid changes
    raises StaleViewError.

    Attributes:
        rotation: Canonical rotation index
        extent: Extent of the rotated grid
    """

    def __init__(self, grid: Grid[Cell], times: int):
        group = rotation_group(grid.dimension)
        self._grid = grid
        self._version = grid.version
        self.rotation = group.canonical(times)
        self.extent = group.rotated_extent(grid.extent, self.rotation)
        self._inverse = group[group.inverse(self.rotation)]

    @property
    def grid(self) -> Grid[Cell]:
        return self._grid

    @property
    def dimension(self) -> int:
        return self._grid.dimension

    def is_stale(self) -> bool:
        return self._grid.version != self._version

    def _check_fresh(self) -> None:
        if self.is_stale():
            raise StaleViewError(
                f"Grid changed since rotated view (rotation={self.rotation}) was created")

    def cell_at(self, coord: CoordinateLike) -> Cell:
        """Get cell at coordinate in rotated space.

        Raises:
            IndexError: If coordinate is outside the rotated extent
            StaleViewError: If the grid was mutated after the view was created
        """
        self._check_fresh()
        coord = as_coordinate(coord)
        if not coord.within(self.extent):
            raise IndexError(f"{coord} out of bounds for rotated extent {self.extent.axes}")
        return self._grid.cell_at(self._inverse.apply(coord, self.extent))

    def __getitem__(self, coord: CoordinateLike) -> Cell:
        return self.cell_at(coord)

    def cartesian_iter(self) -> Iterator[Tuple[Coordinate, Cell]]:
        for coord in cartesian_iter(self.extent):
            yield coord, self.cell_at(coord)

    def materialize(self) -> Grid[Cell]:
        """Copy the view into a new Grid."""
        self._check_fresh()
        return self._grid.rotated(self.rotation)

    def __repr__(self) -> str:
        return f"RotatedView(rotation={self.rotation}, grid={self._grid!r})"

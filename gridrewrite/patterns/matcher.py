"""Wildcard patch matching and replacement under grid rotations.

Scans a grid for every (rotation, offset) at which a find patch agrees with
the grid, and commits a chosen match by writing a replace patch. Offsets may
be negative: a patch may hang off the border as long as only wildcard cells
fall outside the grid.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple
import logging

from ..core.coord import Coordinate, CoordinateLike, as_coordinate, cartesian_iter, strides, volume
from ..core.grid import Grid
from ..core.rotation import num_rotations
from .patch import concrete_cells

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatchMatch:
    """Where a find patch matched.

    Attributes:
        rotation: Rotation index applied to the patch
        position: Grid coordinate of the rotated patch's origin (may be negative)
    """
    rotation: int
    position: Coordinate


def _check_dimensions(grid: Grid, patch) -> None:
    if grid.dimension != patch.dimension:
        raise ValueError(
            f"Dimension mismatch: {patch.dimension}D patch on {grid.dimension}D grid")


def _concrete_fits(cells: Sequence[Any], extent: Tuple[int, ...], steps: Tuple[int, ...],
                   concrete: Sequence[Tuple[Tuple[int, ...], Any]],
                   offset: Tuple[int, ...]) -> bool:
    for coord, required in concrete:
        index = 0
        for c, o, e, s in zip(coord, offset, extent, steps):
            target = c + o
            # a concrete cell off the grid is a failure, not a wildcard
            if target < 0 or target >= e:
                return False
            index += target * s
        if cells[index] != required:
            return False
    return True


def _concrete_axes(patch) -> List[Tuple[Tuple[int, ...], Any]]:
    return [(coord.axes, cell) for coord, cell in concrete_cells(patch)]


def check_patch_at(grid: Grid, patch, offset: CoordinateLike) -> bool:
    """Check whether a patch agrees with the grid at an offset.

    Args:
        grid: Grid being searched
        patch: Patch grid or RotatedView of a patch
        offset: Grid coordinate of the patch origin

    Returns:
        True if every non-wildcard patch cell lands in bounds on an equal cell
    """
    _check_dimensions(grid, patch)
    offset = as_coordinate(offset)
    if offset.dimension != grid.dimension:
        raise ValueError(
            f"Dimension mismatch: {offset.dimension}D offset on {grid.dimension}D grid")
    return _concrete_fits(grid.cells(), grid.extent.axes, strides(grid.extent),
                          _concrete_axes(patch), offset.axes)


def get_patch_matches(grid: Grid, patch: Grid,
                      rotations: Optional[Iterable[int]] = None) -> List[PatchMatch]:
    """Find every (rotation, offset) at which a patch matches.

    Order is rotation-major, then offsets in cartesian scan order, from
    -(patch_extent - 1) up to grid_extent - 1 on each axis. An empty grid or
    an empty patch has no overlapping offsets and so no matches.

    Args:
        grid: Grid being searched
        patch: Find patch (WILDCARD cells match anything)
        rotations: Rotation indices to try (all rotations if None)

    Returns:
        List of PatchMatch, possibly empty
    """
    _check_dimensions(grid, patch)
    if rotations is None:
        rotations = range(num_rotations(grid.dimension))
    if volume(grid.extent) == 0 or volume(patch.extent) == 0:
        return []

    cells = grid.cells()
    extent = grid.extent.axes
    steps = strides(grid.extent)
    matches = []
    for rotation in rotations:
        view = patch.with_rotation(rotation)
        concrete = _concrete_axes(view)
        begin = Coordinate(tuple(1 - e for e in view.extent))
        span = Coordinate(tuple(g + e - 1 for g, e in zip(extent, view.extent)))
        for offset in cartesian_iter(span, begin):
            if _concrete_fits(cells, extent, steps, concrete, offset.axes):
                matches.append(PatchMatch(view.rotation, offset))

    logger.debug(f"Found {len(matches)} matches for {patch!r} on {grid!r}")
    return matches


def replace_at(grid: Grid, replace_patch: Grid, match: PatchMatch) -> int:
    """Write a replace patch at a match, rotated by the match's rotation.

    WILDCARD cells leave the grid untouched. All targets are checked before
    any cell is written.

    Returns:
        Number of cells written

    Raises:
        IndexError: If a concrete cell would land outside the grid
    """
    _check_dimensions(grid, replace_patch)
    view = replace_patch.with_rotation(match.rotation)
    writes = [(coord + match.position, value) for coord, value in concrete_cells(view)]
    return grid.write_cells(writes)

"""Find/replace patches: small grids of optional cells.

A patch cell of WILDCARD (None) matches anything when finding and leaves the
target untouched when replacing. Any other value must be equal to match and
is written on replace.
"""

from typing import Any, Dict, Iterator, Sequence, Tuple

from ..core.coord import Coordinate
from ..core.grid import Grid

WILDCARD = None

# Patch[Cell] is Grid[Optional[Cell]]
Patch = Grid

WILDCARD_CHARS = '.'


def patch_from_rows(rows: Sequence[str], legend: Dict[str, Any],
                    wildcard_chars: str = WILDCARD_CHARS) -> Grid:
    """Build a 2D patch from text rows, one character per cell.

    Character x of row y becomes the cell at Coordinate.of(x, y), so the rows
    read the way they are drawn.

    Args:
        rows: Equal-length strings, top row first
        legend: Character to cell value mapping
        wildcard_chars: Characters that mean WILDCARD

    Raises:
        ValueError: If rows are ragged or a character is not in the legend
    """
    if not rows:
        raise ValueError("Patch needs at least one row")
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise ValueError(f"Patch rows must have equal length: {list(rows)}")

    cells = []
    for row in rows:
        for char in row:
            if char in wildcard_chars:
                cells.append(WILDCARD)
            elif char in legend:
                cells.append(legend[char])
            else:
                raise ValueError(f"Unknown patch character {char!r}")

    # reading order (x within y) is already flat order
    return Grid(Coordinate.of(width, len(rows)), cells)


def concrete_cells(patch) -> Iterator[Tuple[Coordinate, Any]]:
    """Yield (coordinate, value) for every non-wildcard cell of a patch or view."""
    for coord, cell in patch.cartesian_iter():
        if cell is not WILDCARD:
            yield coord, cell


def is_degenerate(patch: Grid) -> bool:
    """True if every cell is a wildcard (matches everywhere)."""
    return all(cell is WILDCARD for cell in patch.cells())

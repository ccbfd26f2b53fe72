"""Tile palette and the stock rule set for the rewrite demo.

The demo grows a red walker across a black board: it lays a white trail,
occasionally branches into green/orange pairs, and orange/white/green
junctions spawn blue walkers that eat trail and turn back into red.
Colors are the renderer's business; tiles here are plain names.
"""

from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from ..core.coord import Coordinate
from ..core.grid import Grid
from ..patterns.patch import patch_from_rows
from .engine import EngineConfig, RuleEngine
from .rule import ReplacementRule


class Tile(Enum):
    """Cell values of the demo board (16-entry palette)."""
    BLACK = 0
    DARK_BLUE = 1
    DARK_PURPLE = 2
    DARK_GREEN = 3
    BROWN = 4
    DARK_GREY = 5
    LIGHT_GREY = 6
    WHITE = 7
    RED = 8
    ORANGE = 9
    YELLOW = 10
    GREEN = 11
    BLUE = 12
    LAVENDER = 13
    PINK = 14
    LIGHT_PEACH = 15

    @classmethod
    def default(cls) -> 'Tile':
        return cls.BLACK


# One character per tile, used for rule authoring and text previews
TILE_SYMBOLS: Dict[Tile, str] = {
    Tile.BLACK: 'K',
    Tile.DARK_BLUE: 'b',
    Tile.DARK_PURPLE: 'p',
    Tile.DARK_GREEN: 'g',
    Tile.BROWN: 'n',
    Tile.DARK_GREY: 'd',
    Tile.LIGHT_GREY: 'l',
    Tile.WHITE: 'W',
    Tile.RED: 'R',
    Tile.ORANGE: 'O',
    Tile.YELLOW: 'Y',
    Tile.GREEN: 'G',
    Tile.BLUE: 'B',
    Tile.LAVENDER: 'v',
    Tile.PINK: 'P',
    Tile.LIGHT_PEACH: 'e',
}

TILE_LEGEND: Dict[str, Tile] = {symbol: tile for tile, symbol in TILE_SYMBOLS.items()}

# (name, find rows, replace rows), highest priority first
DEMO_RULE_ROWS = [
    ("walk", ["RKK", "...", "..."], ["WWR", "...", "..."]),
    ("branch", ["RKW", "...", "..."], ["GWO", "...", "..."]),
    ("spawn", ["OWG", "...", "..."], ["OKB", "...", "..."]),
    ("eat", ["BWW", "...", "..."], ["KKB", "...", "..."]),
    ("reignite", ["BWO", "...", "..."], ["KKR", "...", "..."]),
]


def make_rule(name: str, find_rows: List[str], replace_rows: List[str]) -> ReplacementRule:
    """Build a 2D tile rule from text rows (see TILE_SYMBOLS, '.' = wildcard)."""
    return ReplacementRule(
        find=patch_from_rows(find_rows, TILE_LEGEND),
        replace=patch_from_rows(replace_rows, TILE_LEGEND),
        name=name,
    )


def get_demo_rules() -> List[ReplacementRule]:
    """Fresh list of the demo rules in priority order."""
    return [make_rule(name, find, replace) for name, find, replace in DEMO_RULE_ROWS]


DEMO_RULES: List[ReplacementRule] = get_demo_rules()


def create_demo_grid(size: int = 64) -> Grid:
    """Square black board with a single red seed at the centre."""
    if size < 1:
        raise ValueError("Board size must be positive")
    grid = Grid.filled(Coordinate.of(size, size), Tile.default())
    grid[size // 2, size // 2] = Tile.RED
    return grid


def create_demo_engine(seed: Optional[int] = None,
                       config: Optional[EngineConfig] = None) -> RuleEngine:
    """Rule engine over the demo rules."""
    config = config.copy() if config is not None else EngineConfig()
    if seed is not None:
        config.seed = seed
    return RuleEngine(get_demo_rules(), config)


def tile_counts(grid: Grid) -> Dict[Tile, int]:
    """Number of cells of each tile present on the board."""
    values, counts = np.unique([tile.value for tile in grid.cells()], return_counts=True)
    return {Tile(int(value)): int(count) for value, count in zip(values, counts)}

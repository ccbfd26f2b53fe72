"""
gridrewrite: rotation-aware pattern rewriting on N-dimensional grids.

A grid of typed cells is rewritten one step at a time by an ordered list of
find/replace rules. Patches match in every right-angle rotation of the grid's
dimension; the first rule with a match fires at a uniformly chosen match.
"""

from .core.coord import Coordinate, cartesian_iter
from .core.rotation import enumerate_rotations, rotation_group
from .core.grid import Grid, RotatedView, StaleViewError
from .patterns.patch import WILDCARD, patch_from_rows
from .patterns.matcher import PatchMatch, check_patch_at, get_patch_matches, replace_at
from .rules.rule import ReplacementRule
from .rules.engine import EngineConfig, RuleEngine, apply_one_step

__version__ = "0.1.0"

__all__ = [
    'Coordinate',
    'Grid',
    'RotatedView',
    'StaleViewError',
    'cartesian_iter',
    'enumerate_rotations',
    'rotation_group',
    'WILDCARD',
    'PatchMatch',
    'check_patch_at',
    'get_patch_matches',
    'patch_from_rows',
    'replace_at',
    'EngineConfig',
    'ReplacementRule',
    'RuleEngine',
    'apply_one_step',
]

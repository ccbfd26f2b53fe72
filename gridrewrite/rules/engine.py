"""Priority rewrite engine.

Each step walks the rules in list order. The first rule with at least one
match fires: one of its matches is picked uniformly at random and its replace
patch is written there. Lower-priority rules are not evaluated that step.
This is not a global best-match search across rules.
"""

from typing import Iterable, List, Optional, Sequence
import logging

import numpy as np

from ..core.grid import Grid
from ..core.rotation import num_rotations
from ..patterns.matcher import PatchMatch, get_patch_matches, replace_at
from .rule import ReplacementRule

logger = logging.getLogger(__name__)


class EngineConfig:
    """Configuration for a rewrite session."""

    def __init__(self,
                 seed: Optional[int] = None,
                 max_steps: int = 1000,
                 allow_rotations: bool = True,
                 warn_degenerate: bool = True):
        """Initialize engine configuration.

        Args:
            seed: Seed for the match-picking generator (None = OS entropy)
            max_steps: Step limit for RuleEngine.run (0+)
            allow_rotations: Match patches in every rotation, or only as authored
            warn_degenerate: Log rule validation warnings when the engine is built
        """
        self.seed = seed
        self.max_steps = max(0, int(max_steps))
        self.allow_rotations = bool(allow_rotations)
        self.warn_degenerate = bool(warn_degenerate)

    def make_rng(self) -> np.random.Generator:
        return np.random.default_rng(self.seed)

    def copy(self) -> 'EngineConfig':
        """Create a deep copy of the configuration."""
        return EngineConfig(
            seed=self.seed,
            max_steps=self.max_steps,
            allow_rotations=self.allow_rotations,
            warn_degenerate=self.warn_degenerate
        )

    def __repr__(self) -> str:
        return (f"EngineConfig(seed={self.seed}, max_steps={self.max_steps}, "
                f"allow_rotations={self.allow_rotations}, warn_degenerate={self.warn_degenerate})")


def pick_match(matches: Sequence[PatchMatch], rng: np.random.Generator) -> PatchMatch:
    """Choose one match uniformly at random."""
    return matches[int(rng.integers(len(matches)))]


def single_random_replace(grid: Grid, rule: ReplacementRule, rng: np.random.Generator,
                          rotations: Optional[Iterable[int]] = None) -> bool:
    """Apply one rule at a uniformly chosen match.

    Returns:
        True if the rule matched and was applied, False if it had no match
    """
    matches = get_patch_matches(grid, rule.find, rotations)
    if not matches:
        return False

    chosen = pick_match(matches, rng)
    written = replace_at(grid, rule.replace, chosen)
    logger.debug(f"Rule {rule.label} fired at {chosen.position.axes} "
                 f"(rotation {chosen.rotation}, {len(matches)} candidates, {written} cells)")
    return True


def apply_one_step(grid: Grid, rules: Sequence[ReplacementRule], rng: np.random.Generator,
                   rotations: Optional[Iterable[int]] = None) -> bool:
    """Fire the first rule (in list order) that has any match.

    Args:
        grid: Grid to rewrite in place
        rules: Rules in priority order
        rng: Source of randomness for the pick among one rule's matches
        rotations: Rotation indices to try (all if None)

    Returns:
        True if a rule fired, False if no rule matched anywhere
    """
    rotations = None if rotations is None else list(rotations)
    for rule in rules:
        if single_random_replace(grid, rule, rng, rotations):
            return True
    return False


class RuleEngine:
    """Rewrite engine holding an ordered rule list for a session.

    The engine keeps no state between steps besides its random generator.
    """

    def __init__(self, rules: Iterable[ReplacementRule],
                 config: Optional[EngineConfig] = None,
                 rng: Optional[np.random.Generator] = None):
        """Initialize engine.

        Args:
            rules: Replacement rules, highest priority first
            config: Engine configuration (defaults if None)
            rng: Random generator (built from config.seed if None)

        Raises:
            ValueError: If the rules don't share one dimension
        """
        self.rules = tuple(rules)
        self.config = config or EngineConfig()
        self.rng = rng if rng is not None else self.config.make_rng()

        dimensions = {rule.dimension for rule in self.rules}
        if len(dimensions) > 1:
            raise ValueError(f"Rules mix dimensions {sorted(dimensions)}")

        if self.config.warn_degenerate:
            for rule in self.rules:
                for warning in rule.validation_warnings():
                    logger.warning(warning)

        logger.debug(f"Created rule engine with {len(self.rules)} rules, {self.config!r}")

    def _rotations(self, grid: Grid) -> List[int]:
        if self.config.allow_rotations:
            return list(range(num_rotations(grid.dimension)))
        return [0]

    def step(self, grid: Grid) -> bool:
        """Advance the rewrite by one step.

        Returns:
            True if a rule fired, False if nothing matched
        """
        return apply_one_step(grid, self.rules, self.rng, self._rotations(grid))

    def run(self, grid: Grid, max_steps: Optional[int] = None,
            log_interval: Optional[int] = None) -> int:
        """Step repeatedly until no rule matches or the step limit is hit.

        Args:
            grid: Grid to rewrite in place
            max_steps: Step limit (config.max_steps if None)
            log_interval: If provided, log progress every this many steps

        Returns:
            Number of steps in which a rule fired
        """
        limit = self.config.max_steps if max_steps is None else max(0, max_steps)
        applied = 0
        for _ in range(limit):
            if not self.step(grid):
                logger.info(f"No rule matched after {applied} steps")
                break
            applied += 1
            if log_interval and applied % log_interval == 0:
                logger.info(f"Step {applied}: {len(self.rules)} rules, grid {grid!r}")
        return applied

    def matches_by_rule(self, grid: Grid) -> List[int]:
        """Count current matches for each rule (diagnostic, no mutation)."""
        rotations = self._rotations(grid)
        return [len(get_patch_matches(grid, rule.find, rotations)) for rule in self.rules]

    def __repr__(self) -> str:
        return f"RuleEngine(rules={len(self.rules)}, config={self.config!r})"

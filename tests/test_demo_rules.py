"""Tests for the demo tile palette, rule set and board."""

import pytest
from gridrewrite.core.coord import Coordinate
from gridrewrite.patterns.patch import WILDCARD
from gridrewrite.rules.engine import EngineConfig
from gridrewrite.rules.library import (
    DEMO_RULES, TILE_LEGEND, TILE_SYMBOLS, Tile,
    create_demo_engine, create_demo_grid, get_demo_rules, make_rule, tile_counts
)


class TestPalette:

    def test_sixteen_tiles(self):
        assert len(Tile) == 16
        assert Tile.default() is Tile.BLACK

    def test_symbols_unique(self):
        assert len(TILE_SYMBOLS) == 16
        assert len(TILE_LEGEND) == 16
        assert all(TILE_LEGEND[TILE_SYMBOLS[tile]] is tile for tile in Tile)


class TestDemoRules:

    def test_priority_order(self):
        assert [rule.name for rule in DEMO_RULES] == ["walk", "branch", "spawn", "eat", "reignite"]

    def test_walk_rule_shape(self):
        walk = get_demo_rules()[0]
        assert walk.find.extent == Coordinate.of(3, 3)
        assert [walk.find[x, 0] for x in range(3)] == [Tile.RED, Tile.BLACK, Tile.BLACK]
        assert [walk.replace[x, 0] for x in range(3)] == [Tile.WHITE, Tile.WHITE, Tile.RED]
        assert walk.find[1, 1] is WILDCARD

    def test_rules_are_clean(self):
        for rule in get_demo_rules():
            assert rule.validation_warnings() == []

    def test_fresh_rule_lists(self):
        assert get_demo_rules()[0] is not get_demo_rules()[0]

    def test_make_rule_rejects_unknown_symbol(self):
        with pytest.raises(ValueError, match="Unknown patch character"):
            make_rule("bad", ["RZ"], ["KK"])


class TestDemoBoard:

    def test_single_red_seed(self):
        grid = create_demo_grid(64)
        assert grid.extent == Coordinate.of(64, 64)
        assert grid[32, 32] is Tile.RED
        assert tile_counts(grid) == {Tile.BLACK: 64 * 64 - 1, Tile.RED: 1}

    def test_invalid_size(self):
        with pytest.raises(ValueError, match="positive"):
            create_demo_grid(0)


class TestDemoEngine:

    def test_first_step_walks(self):
        """From a lone seed only the walk rule can fire."""
        grid = create_demo_grid(16)
        engine = create_demo_engine(seed=0)

        assert engine.step(grid)
        assert tile_counts(grid) == {Tile.BLACK: 16 * 16 - 3, Tile.WHITE: 2, Tile.RED: 1}

    def test_seeded_demo_repeats(self):
        first, second = create_demo_grid(16), create_demo_grid(16)
        create_demo_engine(seed=11).run(first, max_steps=40)
        create_demo_engine(seed=11).run(second, max_steps=40)
        assert first == second

    def test_config_not_mutated(self):
        config = EngineConfig(max_steps=5)
        engine = create_demo_engine(seed=4, config=config)
        assert engine.config.seed == 4
        assert engine.config.max_steps == 5
        assert config.seed is None

    def test_run_terminates(self):
        grid = create_demo_grid(12)
        applied = create_demo_engine(seed=2).run(grid, max_steps=200)
        assert 0 < applied <= 200
        assert sum(tile_counts(grid).values()) == 144

"""Tests for entropy: config normalization, random walls, spawn jitter."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging
from itertools import combinations

import pytest

from squadsim.config import SimulationConfig
from squadsim.core.enums import Team
from squadsim.core.models import Actor, Vector2
from squadsim.core.terrain import Terrain
from squadsim.engine.combat_engine import CombatEngine
from squadsim.systems.entropy import (
    EntropyConfig,
    RandomWallsConfig,
    SpawnJitterConfig,
    apply_spawn_jitter,
    normalize_entropy,
    place_random_walls,
)
from squadsim.systems.rng import DeterministicRNG


# =========================================================================
# Normalization
# =========================================================================

class TestNormalizeEntropy:
    @pytest.mark.parametrize("value", [None, False, 0, -3])
    def test_disabled_values(self, value):
        cfg = normalize_entropy(value)
        assert cfg == EntropyConfig.disabled()
        assert not cfg.enabled

    @pytest.mark.parametrize("value", [True, 1, 2.5])
    def test_enabled_uses_defaults(self, value):
        assert normalize_entropy(value) == EntropyConfig.defaults()

    def test_default_presets(self):
        cfg = EntropyConfig.defaults()
        jitter, walls = cfg.spawn_jitter, cfg.random_walls
        assert (jitter.radius, jitter.attempts, jitter.per_unit_radius, jitter.per_unit_attempts) == (3, 18, 1, 4)
        assert jitter.allow_zero_offset and jitter.preserve_formation
        assert (walls.count, walls.margin, walls.min_distance, walls.attempts) == (8, 12, 4, 40)

    def test_mapping_keeps_omitted_feature_default(self):
        cfg = normalize_entropy({"spawnJitter": {"radius": 2}})
        assert cfg.spawn_jitter.radius == 2
        assert cfg.spawn_jitter.attempts == 18
        assert cfg.random_walls == RandomWallsConfig()

    def test_mapping_can_disable_one_feature(self):
        cfg = normalize_entropy({"random_walls": False})
        assert cfg.random_walls is None
        assert cfg.spawn_jitter == SpawnJitterConfig()

    def test_number_sets_primary_field(self):
        cfg = normalize_entropy({"random_walls": 3, "spawn_jitter": 5})
        assert cfg.random_walls.count == 3
        assert cfg.spawn_jitter.radius == 5

    @pytest.mark.parametrize("walls", [0, -1, {"count": 0}, {"attempts": 0}])
    def test_non_positive_disables_feature(self, walls):
        assert normalize_entropy({"random_walls": walls}).random_walls is None

    def test_malformed_value_disables_feature_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="squadsim.systems.entropy"):
            cfg = normalize_entropy({"random_walls": {"count": "lots"}})
        assert cfg.random_walls is None
        assert cfg.spawn_jitter is not None
        assert any("not a number" in r.getMessage() for r in caplog.records)

    def test_unrecognized_whole_value(self, caplog):
        with caplog.at_level(logging.WARNING, logger="squadsim.systems.entropy"):
            assert normalize_entropy("chaos") == EntropyConfig.disabled()
        assert caplog.records

    def test_unknown_feature_key_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="squadsim.systems.entropy"):
            cfg = normalize_entropy({"walls": 3})
        assert cfg == EntropyConfig.defaults()
        assert any("walls" in r.getMessage() for r in caplog.records)

    def test_known_feature_keys_do_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="squadsim.systems.entropy"):
            normalize_entropy({"randomWalls": 3, "spawn_jitter": True})
        assert not caplog.records

    def test_unknown_option_is_ignored(self):
        cfg = normalize_entropy({"spawn_jitter": {"bogus": 1, "attempts": 5}})
        assert cfg.spawn_jitter.attempts == 5
        assert cfg.spawn_jitter.radius == 3

    def test_camel_case_options(self):
        cfg = normalize_entropy({"spawnJitter": {"allowZeroOffset": False, "preserveFormation": False},
                                 "randomWalls": {"minDistance": 7}})
        assert cfg.spawn_jitter.allow_zero_offset is False
        assert cfg.spawn_jitter.preserve_formation is False
        assert cfg.random_walls.min_distance == 7

    def test_zero_per_unit_keeps_team_jitter(self):
        cfg = normalize_entropy({"spawn_jitter": {"per_unit_radius": 0}})
        assert cfg.spawn_jitter.radius == 3
        assert cfg.spawn_jitter.per_unit_radius == 0
        assert cfg.spawn_jitter.per_unit_attempts == 0

    def test_typed_config_passthrough(self):
        typed = EntropyConfig(spawn_jitter=None, random_walls=RandomWallsConfig(count=2))
        assert normalize_entropy(typed) == typed


# =========================================================================
# Random walls
# =========================================================================

class TestRandomWalls:
    @pytest.mark.parametrize("seed", range(1, 11))
    def test_fifty_by_fifty_count_and_spacing(self, seed):
        cfg = SimulationConfig(
            seed=seed,
            grid_width=50,
            grid_height=50,
            entropy={"random_walls": {"count": 5, "min_distance": 4}, "spawn_jitter": False},
        )
        engine = CombatEngine(cfg)
        engine.reset()
        walls = engine.placed_walls
        assert len(walls) <= 5
        for (ax, ay), (bx, by) in combinations(walls, 2):
            assert abs(ax - bx) + abs(ay - by) > 4
        for x, y in walls:
            assert 12 <= x <= 37 and 12 <= y <= 37
            assert engine.terrain.is_wall(x, y)

    def test_base_terrain_untouched(self):
        cfg = SimulationConfig(grid_width=50, grid_height=50, entropy=True)
        engine = CombatEngine(cfg)
        engine.reset()
        assert engine.placed_walls
        assert engine.base_terrain.walls() == []

    def test_reset_places_fresh_walls(self):
        cfg = SimulationConfig(grid_width=50, grid_height=50, entropy={"spawn_jitter": False})
        engine = CombatEngine(cfg)
        engine.reset()
        first = engine.placed_walls
        engine.reset()
        assert sorted(engine.terrain.walls()) == sorted(engine.placed_walls)
        assert engine.placed_walls != first

    def test_exhausted_attempts_stop_placement(self):
        # Margin clamps to the single centre cell of a 3x3 map
        terrain = Terrain(3, 3)
        placed = place_random_walls(terrain, RandomWallsConfig(count=5), DeterministicRNG(1))
        assert placed == [(1, 1)]
        assert terrain.walls() == [(1, 1)]


# =========================================================================
# Spawn jitter
# =========================================================================

def _squads(friendly=((5, 5),), enemy=((15, 15),)):
    actors = [Actor.create(f"f{i}", x, y, ["move"]) for i, (x, y) in enumerate(friendly)]
    actors += [Actor.create(f"e{i}", x, y, ["move"], team=Team.ENEMY) for i, (x, y) in enumerate(enemy)]
    return actors


class TestSpawnJitter:
    def test_preferred_offset_wins(self):
        actors = _squads()
        offsets = apply_spawn_jitter(
            actors, Terrain(20, 20), SpawnJitterConfig(), DeterministicRNG(1),
            preferred_offsets={Team.FRIENDLY: (2, -1), "enemy": (-1, 0)},
        )
        assert offsets == {Team.FRIENDLY: (2, -1), Team.ENEMY: (-1, 0)}
        assert actors[0].pos == Vector2(7, 4)
        assert actors[1].pos == Vector2(14, 15)

    def test_preferred_offset_onto_enemy_is_rejected(self):
        actors = _squads(friendly=((5, 5),), enemy=((6, 5),))
        offsets = apply_spawn_jitter(
            actors, Terrain(20, 20), SpawnJitterConfig(), lambda: 0.5,
            preferred_offsets={Team.FRIENDLY: (1, 0)},
        )
        assert offsets[Team.FRIENDLY] == (0, 0)
        assert actors[0].pos == Vector2(5, 5)

    def test_zero_disallowed_falls_back_to_unit_offset(self):
        actors = _squads()
        cfg = SpawnJitterConfig(allow_zero_offset=False)
        # A constant 0.5 always draws (0, 0)
        offsets = apply_spawn_jitter(actors, Terrain(20, 20), cfg, lambda: 0.5)
        assert offsets[Team.FRIENDLY] == (1, 0)
        assert actors[0].pos == Vector2(6, 5)

    def test_no_valid_offset_leaves_squad_in_place(self):
        actors = [Actor.create("f", 0, 0, ["move"])]
        cfg = SpawnJitterConfig(allow_zero_offset=False)
        offsets = apply_spawn_jitter(actors, Terrain(1, 1), cfg, DeterministicRNG(3))
        assert offsets == {Team.FRIENDLY: (0, 0)}
        assert actors[0].pos == Vector2(0, 0)

    def test_formation_shifts_rigidly(self):
        actors = _squads(friendly=((5, 5), (7, 5)), enemy=())
        offsets = apply_spawn_jitter(actors, Terrain(20, 20), SpawnJitterConfig(), lambda: 0.99)
        assert offsets == {Team.FRIENDLY: (3, 3)}
        assert [a.pos for a in actors] == [Vector2(8, 8), Vector2(10, 8)]

    def test_per_unit_jitter_when_formation_not_preserved(self):
        actors = _squads(friendly=((5, 5), (7, 5)), enemy=())
        cfg = SpawnJitterConfig(preserve_formation=False)
        apply_spawn_jitter(actors, Terrain(20, 20), cfg, lambda: 0.99)
        assert [a.pos for a in actors] == [Vector2(9, 9), Vector2(11, 9)]

    def test_jitter_keeps_members_walkable_and_unstacked(self):
        terrain = Terrain(30, 30)
        for y in range(30):
            terrain.set_terrain(12, y, "wall")
        for seed in range(20):
            actors = _squads(friendly=((9, 9), (11, 9), (9, 11)), enemy=((14, 9), (16, 9)))
            apply_spawn_jitter(actors, terrain, SpawnJitterConfig(), DeterministicRNG(seed))
            cells = [a.pos.as_tuple() for a in actors]
            assert len(set(cells)) == len(cells)
            assert all(terrain.is_walkable(x, y) for x, y in cells)

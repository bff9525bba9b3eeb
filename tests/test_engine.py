"""Tests for the CombatEngine tick state machine.

Covers:
  - lifecycle states and termination
  - winner / draw semantics and empty sides
  - actors killed mid-tick losing their turn
  - no stacking in any recorded frame
  - reproducibility of recordings for a fixed random source
  - replaying spawn offsets through a BattleContext
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json

from tests.helpers.battle_arena import BattleArena
from squadsim.config import SimulationConfig
from squadsim.core.enums import BattleOutcome, EngineState, Team
from squadsim.core.models import Actor, Vector2
from squadsim.engine.combat_engine import BattleContext, CombatEngine
from squadsim.engine.results import decide_winner
from squadsim.systems.rng import DeterministicRNG
from squadsim.systems.squads import create_squad, get_composition
from squadsim.utils.replay import find_stacking


def _catalog_setup(friendly="ranged_kite", enemy="heavy_melee"):
    def setup(engine, context):
        for actor in create_squad(get_composition(friendly), 10, 45, Team.FRIENDLY):
            engine.add_creep(actor)
        for actor in create_squad(get_composition(enemy), 90, 54, Team.ENEMY):
            engine.add_creep(actor)
    return setup


def _catalog_battle(seed=11, max_ticks=300, **overrides):
    cfg = SimulationConfig(seed=seed, max_ticks=max_ticks, record_battle=True, **overrides)
    engine = CombatEngine(cfg)
    context = BattleContext()
    engine.reset(context)
    _catalog_setup()(engine, context)
    result = engine.run_battle()
    return engine, result


# =========================================================================
# Lifecycle
# =========================================================================

class TestLifecycle:
    def test_state_transitions(self):
        arena = BattleArena()
        arena.add_friendly("hero", (2, 2), ["attack"])
        arena.add_enemy("dummy", (3, 2), ["move"])
        engine = arena.engine
        assert engine.state is EngineState.IDLE
        assert engine.execute_tick() is True
        assert engine.state is EngineState.RUNNING
        engine.run_battle()
        assert engine.state is EngineState.ENDED
        ticks = engine.tick
        assert engine.execute_tick() is False
        assert engine.tick == ticks

    def test_reset_clears_battle(self):
        arena = BattleArena()
        arena.add_friendly("hero", (2, 2), ["attack"])
        arena.add_enemy("dummy", (3, 2), ["move"])
        arena.run()
        arena.engine.reset()
        assert arena.engine.actors == []
        assert arena.engine.tick == 0
        assert arena.engine.state is EngineState.IDLE
        assert len(arena.engine.occupancy) == 0

    def test_fresh_engine_places_walls_without_reset(self):
        cfg = SimulationConfig(
            grid_width=50,
            grid_height=50,
            max_ticks=5,
            entropy={"random_walls": {"count": 5, "min_distance": 4}, "spawn_jitter": False},
        )
        engine = CombatEngine(cfg)
        assert engine.state is EngineState.IDLE
        engine.add_creep(Actor.create("a", 2, 2, ["move"]))
        engine.add_creep(Actor.create("b", 47, 47, ["move"], team=Team.ENEMY))
        engine.run_battle()
        assert engine.terrain.walls()
        assert sorted(engine.terrain.walls()) == sorted(engine.placed_walls)
        assert engine.base_terrain.walls() == []

    def test_max_ticks_draw_with_survivors(self):
        arena = BattleArena(max_ticks=5)
        arena.add_friendly("a", (2, 2), ["move"])
        arena.add_enemy("b", (9, 9), ["move"])
        calls = 0
        while arena.engine.execute_tick():
            calls += 1
            assert calls <= 6
        result = arena.engine.battle_result()
        assert result.ticks == 5
        assert result.winner is BattleOutcome.DRAW
        assert result.friendly.survivors == 1
        assert result.enemy.survivors == 1

    def test_empty_side_ends_at_tick_zero(self):
        arena = BattleArena()
        arena.add_friendly("a", (2, 2), ["move"])
        result = arena.run()
        assert result.ticks == 0
        assert result.winner is BattleOutcome.FRIENDLY

    def test_no_actors_is_a_draw(self):
        result = BattleArena().run()
        assert result.ticks == 0
        assert result.winner is BattleOutcome.DRAW

    def test_winner_rules(self):
        assert decide_winner(2, 0) is BattleOutcome.FRIENDLY
        assert decide_winner(0, 1) is BattleOutcome.ENEMY
        assert decide_winner(0, 0) is BattleOutcome.DRAW
        assert decide_winner(3, 3) is BattleOutcome.DRAW


# =========================================================================
# Tick ordering
# =========================================================================

class TestTickOrdering:
    def test_actor_killed_mid_tick_loses_its_turn(self):
        arena = BattleArena()
        striker = arena.add_friendly("striker", (2, 2), ["attack"] * 4)
        victim = arena.add_enemy("victim", (3, 2), ["attack"])
        result = arena.run()
        assert result.ticks == 1
        assert result.winner is BattleOutcome.FRIENDLY
        assert not victim.alive
        assert striker.damage_taken == 0

    def test_roster_order_is_turn_order(self):
        arena = BattleArena()
        victim = arena.add_enemy("victim", (3, 2), ["attack"])
        striker = arena.add_friendly("striker", (2, 2), ["attack"] * 4)
        arena.run()
        assert striker.damage_taken == 30
        assert not victim.alive

    def test_walls_route_around(self):
        arena = BattleArena(width=10, height=10)
        hero = arena.add_friendly("hero", (2, 2), ["attack", "move"])
        arena.add_enemy("dummy", (5, 5), ["move"])
        arena.set_wall(3, 3)
        arena.run_ticks(1)
        assert hero.pos == Vector2(3, 2)
        assert arena.terrain.is_wall(3, 3)

    def test_side_summary(self):
        arena = BattleArena()
        arena.add_friendly("hero", (2, 2), ["attack"])
        arena.add_enemy("dummy", (3, 2), ["move"])
        data = arena.run().to_dict()
        assert data["winner"] == "friendly"
        assert data["friendly"]["totalDamage"] == 120
        assert data["friendly"]["survivors"] == 1
        assert data["enemy"]["survivors"] == 0
        assert data["enemy"]["actors"][0]["alive"] is False


# =========================================================================
# Full battles
# =========================================================================

class TestFullBattle:
    def test_no_stacking_in_any_frame(self):
        engine, result = _catalog_battle()
        recording = engine.export_recording()
        assert len(recording["frames"]) == result.ticks
        assert find_stacking(recording) == []

    def test_no_stacking_without_entropy(self):
        engine, _ = _catalog_battle(entropy=False)
        assert find_stacking(engine.export_recording()) == []

    def test_recording_shape(self):
        engine, result = _catalog_battle(max_ticks=40)
        recording = engine.export_recording()
        assert recording["totalTicks"] == result.ticks
        assert len(recording["terrain"]) == 100
        assert len(recording["terrain"][0]) == 100
        assert [f["tick"] for f in recording["frames"]] == list(range(1, result.ticks + 1))
        meta = recording["metadata"]
        assert meta["maxTicks"] == 40
        assert meta["gridSize"] == 100
        assert len(meta["walls"]) == len(engine.placed_walls)
        assert set(meta["spawnOffsets"]) == {"friendly", "enemy"}

    def test_recording_off_exports_none(self):
        arena = BattleArena()
        arena.add_friendly("a", (2, 2), ["attack"])
        arena.add_enemy("b", (3, 2), ["move"])
        arena.run()
        assert arena.engine.export_recording() is None

    def test_same_seed_byte_identical_frames(self):
        first, _ = _catalog_battle(seed=5, max_ticks=120)
        second, _ = _catalog_battle(seed=5, max_ticks=120)
        assert json.dumps(first.export_recording()) == json.dumps(second.export_recording())

    def test_different_seed_changes_layout(self):
        first, _ = _catalog_battle(seed=5, max_ticks=10)
        second, _ = _catalog_battle(seed=6, max_ticks=10)
        assert first.placed_walls != second.placed_walls

    def test_injected_random_source(self):
        def battle():
            cfg = SimulationConfig(max_ticks=60, record_battle=True)
            engine = CombatEngine(cfg, random_source=DeterministicRNG(99, stream=4))
            engine.reset()
            _catalog_setup()(engine, engine.context)
            engine.run_battle()
            return json.dumps(engine.export_recording())

        assert battle() == battle()


class TestReplayOffsets:
    def test_recorded_spawn_offsets_are_reused(self):
        entropy = {"random_walls": False}
        original, _ = _catalog_battle(seed=7, max_ticks=5, entropy=entropy)
        recording = original.export_recording()

        cfg = SimulationConfig(seed=1234, max_ticks=5, record_battle=True, entropy=entropy)
        replay = CombatEngine(cfg)
        context = BattleContext.from_recording(recording)
        replay.reset(context)
        _catalog_setup()(replay, context)
        replay.run_battle()
        assert replay.spawn_offsets == original.spawn_offsets
        assert replay.export_recording()["frames"] == recording["frames"]

"""Tests for the squad catalog, formations, and matchup runs."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from squadsim.config import SimulationConfig
from squadsim.core.enums import BodyPart, Team
from squadsim.core.models import Vector2
from squadsim.engine.matchups import QUICK_SCENARIOS, predefined_matchups, run_named_matchup
from squadsim.systems.squads import (
    COMPOSITIONS,
    CORE_COMPOSITIONS,
    body_cost,
    composition_cost,
    create_squad,
    get_composition,
    identify_role,
)


class TestCatalog:
    def test_costs(self):
        assert get_composition("ranged_kite")[0].cost == 600
        assert get_composition("ranged_kite")[-1].cost == 350
        assert composition_cost(get_composition("ranged_kite")) == 2150
        assert body_cost(["move", "attack"]) == 130

    def test_unknown_composition(self):
        with pytest.raises(KeyError, match="nope"):
            get_composition("nope")

    def test_core_compositions_exist(self):
        for name in CORE_COMPOSITIONS:
            assert name in COMPOSITIONS

    def test_every_unit_can_move(self):
        for name, units in COMPOSITIONS.items():
            for unit in units:
                assert BodyPart.MOVE in unit.body, name

    @pytest.mark.parametrize("body, role", [
        (["move", "heal", "move"], "Medic"),
        (["move", "ranged_attack"], "Ranger"),
        (["attack", "move"], "Berserker"),
        (["attack", "ranged_attack", "move"], "Operator"),
        (["tough"] * 4 + ["move"], "Enforcer"),
        (["tough", "move"], "Conscript"),
    ])
    def test_identify_role(self, body, role):
        assert identify_role(body) == role


class TestCreateSquad:
    def test_formation_rows_of_three(self):
        squad = create_squad(get_composition("hybrid_squad"), 10, 45, Team.FRIENDLY)
        assert [a.pos for a in squad] == [
            Vector2(10, 45), Vector2(12, 45), Vector2(14, 45),
            Vector2(10, 47), Vector2(12, 47),
        ]

    def test_ids_and_names(self):
        friendly = create_squad(get_composition("ranged_kite"), 0, 0, Team.FRIENDLY)
        enemy = create_squad(get_composition("ranged_kite"), 50, 50, Team.ENEMY)
        assert friendly[0].id == "player_Ranger_0"
        assert friendly[0].name == "Ranger-1"
        assert friendly[3].id == "player_Medic_3"
        assert enemy[0].id == "enemy_Ranger_0"
        assert all(a.team is Team.ENEMY for a in enemy)

    def test_fresh_actors_per_call(self):
        first = create_squad(get_composition("pure_ranged"), 0, 0)
        second = create_squad(get_composition("pure_ranged"), 0, 0)
        first[0].apply_damage(50)
        assert second[0].hits == second[0].hits_max


class TestMatchups:
    def test_named_matchup_report(self):
        cfg = SimulationConfig(max_ticks=60, record_battle=True)
        report = run_named_matchup(cfg, "ranged_kite", "heavy_melee", battles=2, record=True, heatmap=True)
        data = report.to_dict()
        assert report.label == "ranged_kite vs heavy_melee"
        assert report.friendly_cost == 2150
        assert report.batch.iterations == 2
        assert report.recording is not None
        assert report.recording["metadata"]["label"] == report.label
        assert data["heatmap"]["width"] == 100

    def test_recorded_matchup_holds_one_recording(self):
        cfg = SimulationConfig(max_ticks=30, record_battle=True)
        report = run_named_matchup(cfg, "ranged_kite", "heavy_melee", battles=5, record=True)
        assert report.batch.iterations == 5
        assert len(report.batch.recordings) == 1
        assert report.recording is report.batch.recordings[0]

    def test_parallel_matchup_matches_inline_count(self):
        cfg = SimulationConfig(max_ticks=30, num_workers=2)
        report = run_named_matchup(cfg, "pure_ranged", "tank_squad", battles=3)
        assert report.batch.iterations == 3
        assert report.recording is None

    def test_predefined_sweep_skips_self(self):
        cfg = SimulationConfig(max_ticks=20)
        reports = predefined_matchups(cfg, "heavy_melee", battles=1)
        assert len(reports) == len(CORE_COMPOSITIONS) - 1
        assert all(not r.label.endswith("vs heavy_melee") for r in reports)

    def test_quick_scenarios_are_known(self):
        for _, friendly, enemy in QUICK_SCENARIOS:
            get_composition(friendly)
            get_composition(enemy)

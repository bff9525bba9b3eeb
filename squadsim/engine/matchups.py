"""Named squad-vs-squad matchups built on the batch runner.

A matchup places two catalog compositions at the configured spawn anchors
and runs a batch.  ``quick_matchups`` and ``predefined_matchups`` are the
two sweeps offered by the CLI and the HTTP API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

from squadsim.core.enums import Team
from squadsim.engine.batch import forked_engine_factory, run_battles, run_parallel_battles
from squadsim.engine.combat_engine import CombatEngine
from squadsim.engine.results import BatchResult, build_heatmap
from squadsim.systems.squads import CORE_COMPOSITIONS, composition_cost, create_squad, get_composition

if TYPE_CHECKING:
    from squadsim.config import SimulationConfig
    from squadsim.engine.combat_engine import BattleContext
    from squadsim.systems.squads import UnitTemplate

logger = logging.getLogger(__name__)

QUICK_BATTLES = 10

QUICK_SCENARIOS: tuple[tuple[str, str, str], ...] = (
    ("Ranged Kite vs Heavy Melee", "ranged_kite", "heavy_melee"),
    ("Current Strategy vs Heavy Melee", "current_strategy", "heavy_melee"),
    ("Hybrid Squad vs Heavy Melee", "hybrid_squad", "heavy_melee"),
)


@dataclass(slots=True)
class MatchupReport:
    label: str
    friendly_cost: int
    enemy_cost: int
    batch: BatchResult
    heatmap: dict[str, Any] | None = None
    recording: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "label": self.label,
            "friendlyCost": self.friendly_cost,
            "enemyCost": self.enemy_cost,
            "summary": self.batch.summary(),
        }
        if self.heatmap is not None:
            out["heatmap"] = self.heatmap
        return out


def run_matchup(
    config: SimulationConfig,
    label: str,
    friendly: Sequence[UnitTemplate],
    enemy: Sequence[UnitTemplate],
    battles: int,
    record: bool = False,
    heatmap: bool = False,
) -> MatchupReport:
    """Run *battles* of *friendly* against *enemy*.

    With ``config.num_workers > 1`` every battle gets its own engine and
    random stream; otherwise one engine runs them back to back.
    When *record* is set the last battle's frames are kept.
    """
    fx, fy = config.friendly_spawn
    ex, ey = config.enemy_spawn

    def setup(engine: CombatEngine, context: BattleContext) -> None:
        for actor in create_squad(friendly, fx, fy, Team.FRIENDLY):
            engine.add_creep(actor)
        for actor in create_squad(enemy, ex, ey, Team.ENEMY):
            engine.add_creep(actor)
        context.label = label

    logger.info("Matchup %s: %d battles", label, battles)
    if config.num_workers > 1:
        batch = run_parallel_battles(
            battles, forked_engine_factory(config), setup,
            num_workers=config.num_workers,
            keep_recordings=record, last_recording_only=True,
        )
    else:
        batch = run_battles(
            CombatEngine(config), battles, setup,
            keep_recordings=record, last_recording_only=True,
        )

    return MatchupReport(
        label=label,
        friendly_cost=composition_cost(friendly),
        enemy_cost=composition_cost(enemy),
        batch=batch,
        heatmap=build_heatmap(batch.battles, config.grid_width, config.grid_height) if heatmap else None,
        recording=batch.recordings[-1] if batch.recordings else None,
    )


def run_named_matchup(
    config: SimulationConfig,
    friendly: str,
    enemy: str,
    battles: int,
    record: bool = False,
    heatmap: bool = False,
) -> MatchupReport:
    """``run_matchup`` with catalog names.  Raises ``KeyError`` for unknown names."""
    return run_matchup(
        config, f"{friendly} vs {enemy}",
        get_composition(friendly), get_composition(enemy),
        battles, record=record, heatmap=heatmap,
    )


def quick_matchups(config: SimulationConfig, record: bool = False) -> list[MatchupReport]:
    """The three reference matchups, a short batch each.

    Only the first matchup is recorded.
    """
    reports = []
    for index, (label, friendly, enemy) in enumerate(QUICK_SCENARIOS):
        reports.append(
            run_matchup(
                config, label,
                get_composition(friendly), get_composition(enemy),
                QUICK_BATTLES, record=record and index == 0,
            )
        )
    return reports


def predefined_matchups(
    config: SimulationConfig,
    scenario: str,
    battles: int,
    record: bool = False,
) -> list[MatchupReport]:
    """Pit *scenario* against every other core composition."""
    base = get_composition(scenario)
    reports = []
    for opponent in CORE_COMPOSITIONS:
        if opponent == scenario:
            continue
        reports.append(
            run_matchup(
                config, f"{scenario} vs {opponent}",
                base, get_composition(opponent),
                battles, record=record and not reports,
            )
        )
    return reports

"""Battle engine: tick state machine, results and batch runners."""

from squadsim.engine.batch import forked_engine_factory, run_battles, run_parallel_battles
from squadsim.engine.combat_engine import BattleContext, CombatEngine
from squadsim.engine.results import BatchResult, BattleResult, SideSummary, build_heatmap

__all__ = [
    "BatchResult",
    "BattleContext",
    "BattleResult",
    "CombatEngine",
    "SideSummary",
    "build_heatmap",
    "forked_engine_factory",
    "run_battles",
    "run_parallel_battles",
]

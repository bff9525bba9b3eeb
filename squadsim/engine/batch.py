"""Batch runner: many independent battles, inline or on a thread pool."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Callable

from squadsim.engine.combat_engine import BattleContext, CombatEngine
from squadsim.engine.results import BatchResult, BattleResult
from squadsim.systems.rng import DeterministicRNG

if TYPE_CHECKING:
    from squadsim.config import SimulationConfig
    from squadsim.engine.combat_engine import SetupFn

logger = logging.getLogger(__name__)

EngineFactory = Callable[[int], CombatEngine]


def _check_count(n: int) -> None:
    if n < 1:
        raise ValueError(f"battle count must be positive, got {n}")


def _run_one(
    engine: CombatEngine,
    index: int,
    setup_fn: SetupFn,
    keep_recording: bool,
) -> tuple[BattleResult, dict[str, Any] | None]:
    context = BattleContext(index=index)
    engine.reset(context)
    setup_fn(engine, context)
    result = engine.run_battle()
    recording = engine.export_recording() if keep_recording else None
    return result, recording


def _collect(outcomes: list[tuple[BattleResult, dict[str, Any] | None]]) -> BatchResult:
    battles = [result for result, _ in outcomes]
    recordings = [rec for _, rec in outcomes if rec is not None]
    batch = BatchResult.from_battles(battles, recordings)
    logger.info(
        "Batch of %d: %d wins, %d losses, %d draws (win rate %.1f%%, avg %.1f ticks)",
        batch.iterations, batch.wins, batch.losses, batch.draws,
        batch.win_rate * 100, batch.avg_ticks,
    )
    return batch


def _keeps(index: int, n: int, keep_recordings: bool, last_only: bool) -> bool:
    return keep_recordings and (not last_only or index == n - 1)


def run_battles(
    engine: CombatEngine,
    n: int,
    setup_fn: SetupFn,
    keep_recordings: bool = False,
    last_recording_only: bool = False,
) -> BatchResult:
    """Run *n* battles sequentially on one engine, resetting between them.

    With *last_recording_only* only the final battle is exported.
    """
    _check_count(n)
    outcomes = [
        _run_one(engine, i, setup_fn, _keeps(i, n, keep_recordings, last_recording_only))
        for i in range(n)
    ]
    return _collect(outcomes)


def forked_engine_factory(config: SimulationConfig) -> EngineFactory:
    """Factory giving battle *i* its own engine on random stream *i*."""
    def _factory(index: int) -> CombatEngine:
        return CombatEngine(config, random_source=DeterministicRNG(config.seed, stream=index))

    return _factory


def run_parallel_battles(
    n: int,
    engine_factory: EngineFactory,
    setup_fn: SetupFn,
    num_workers: int = 1,
    keep_recordings: bool = False,
    last_recording_only: bool = False,
) -> BatchResult:
    """Run *n* battles, each on its own engine from ``engine_factory(index)``.

    Results are ordered by battle index, so the outcome does not depend on
    *num_workers*.  Runs inline when ``num_workers <= 1``.  A failing battle
    propagates its exception to the caller.
    """
    _check_count(n)

    def _task(index: int) -> tuple[BattleResult, dict[str, Any] | None]:
        keep = _keeps(index, n, keep_recordings, last_recording_only)
        return _run_one(engine_factory(index), index, setup_fn, keep)

    # Fast path: single worker, no thread overhead
    if num_workers <= 1:
        return _collect([_task(i) for i in range(n)])

    with ThreadPoolExecutor(max_workers=num_workers, thread_name_prefix="battle-worker") as executor:
        outcomes = list(executor.map(_task, range(n)))
    return _collect(outcomes)

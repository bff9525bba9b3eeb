"""SimulationService — runs matchups on behalf of the API.

Each request builds fresh engines from a per-request copy of the base
configuration, so concurrent requests share nothing but the latest
recording, which is swapped under a lock.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import TYPE_CHECKING, Any

from squadsim.engine.matchups import MatchupReport, run_named_matchup

if TYPE_CHECKING:
    from squadsim.config import SimulationConfig

logger = logging.getLogger(__name__)


class SimulationService:
    """Holds the base config and the most recent battle recording."""

    def __init__(self, config: SimulationConfig) -> None:
        self._config = config
        self._recording_lock = threading.Lock()
        self._latest_recording: dict[str, Any] | None = None

    @property
    def config(self) -> SimulationConfig:
        return self._config

    def get_recording(self) -> dict[str, Any] | None:
        with self._recording_lock:
            return self._latest_recording

    def simulate(
        self,
        friendly: str,
        enemy: str,
        battles: int,
        seed: int | None = None,
        entropy: bool = True,
        record: bool = False,
        heatmap: bool = False,
    ) -> MatchupReport:
        """Run one matchup.  Raises ``KeyError`` for unknown composition names."""
        overrides: dict[str, Any] = {"entropy": self._config.entropy if entropy else False, "record_battle": record}
        if seed is not None:
            overrides["seed"] = seed
        cfg = dataclasses.replace(self._config, **overrides)

        report = run_named_matchup(cfg, friendly, enemy, battles, record=record, heatmap=heatmap)
        if report.recording is not None:
            with self._recording_lock:
                self._latest_recording = report.recording
        logger.info("API simulate %s: win rate %.2f", report.label, report.batch.win_rate)
        return report

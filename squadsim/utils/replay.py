"""Battle recording — per-tick frames for an external replay renderer."""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Mapping

if TYPE_CHECKING:
    from squadsim.actions.base import ActionRecord
    from squadsim.core.models import Actor

logger = logging.getLogger(__name__)


class BattleRecorder:
    """Accumulates frames for one battle and exports them as a plain dict."""

    __slots__ = ("_frames", "_terrain")

    def __init__(self) -> None:
        self._frames: list[dict[str, Any]] = []
        self._terrain: list[list[int]] | None = None

    @property
    def frames(self) -> list[dict[str, Any]]:
        return self._frames

    def set_terrain(self, grid: list[list[int]]) -> None:
        self._terrain = grid

    def record_frame(self, tick: int, actors: Iterable[Actor], actions: Iterable[ActionRecord]) -> None:
        self._frames.append(
            {
                "tick": tick,
                "actors": [a.frame_state() for a in actors],
                "actions": [a.to_dict() for a in actions],
            }
        )

    def clear(self) -> None:
        self._frames = []
        self._terrain = None

    def export(self, total_ticks: int, metadata: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "totalTicks": total_ticks,
            "terrain": self._terrain,
            "frames": self._frames,
            "metadata": dict(metadata),
        }


def save_recording(recording: Mapping[str, Any] | None, path: str | Path) -> bool:
    """Write *recording* as indented JSON.  Returns False when there is nothing to save."""
    if not recording:
        logger.warning("Recording requested but no battle data was captured.")
        return False
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(recording, indent=2), encoding="utf-8")
    logger.info("Recording saved to %s (%d frames)", target, len(recording.get("frames", [])))
    return True


def load_recording(path: str | Path) -> dict[str, Any]:
    return json.loads(Path(path).read_text(encoding="utf-8"))


@dataclass(frozen=True, slots=True)
class StackingIssue:
    """Two or more living actors sharing one cell in a recorded frame."""

    tick: int
    cell: tuple[int, int]
    names: tuple[str, ...]


def find_stacking(recording: Mapping[str, Any]) -> list[StackingIssue]:
    """Scan every frame for living actors that share a cell."""
    issues: list[StackingIssue] = []
    for frame in recording.get("frames", []):
        cells: dict[tuple[int, int], list[str]] = defaultdict(list)
        for actor in frame.get("actors", []):
            if actor["hits"] > 0:
                cells[(actor["x"], actor["y"])].append(actor["name"])
        for cell, names in cells.items():
            if len(names) > 1:
                issues.append(StackingIssue(tick=frame["tick"], cell=cell, names=tuple(names)))
    if issues:
        logger.warning("Stacking detected in %d frame cells", len(issues))
    return issues

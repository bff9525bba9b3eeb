"""ActionRecord — what the replay sees of a successful combat action."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from squadsim.core.enums import ActionType
from squadsim.core.models import Vector2


@dataclass(frozen=True, slots=True)
class ActionRecord:
    """A performed attack or heal, with the cells it was issued from and to.

    Only successful actions are recorded; rejected ones leave no trace.
    """

    verb: ActionType
    actor_id: str
    source: Vector2
    target: Vector2

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.verb.value,
            "from": {"x": self.source.x, "y": self.source.y},
            "to": {"x": self.target.x, "y": self.target.y},
        }

    def __repr__(self) -> str:
        return f"Action({self.actor_id}, {self.verb.value}, {self.source}->{self.target})"

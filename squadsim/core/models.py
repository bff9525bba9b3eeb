"""Core data models: Vector2, BodyPartState, Actor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from squadsim.core.constants import BODYPART_HITS, MOVE_POWER
from squadsim.core.enums import BodyPart, Team


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def chebyshev(self, other: Vector2) -> int:
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def as_tuple(self) -> tuple[int, int]:
        return self.x, self.y

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(slots=True)
class BodyPartState:
    """One entry of an actor's body with its own hit points."""

    kind: BodyPart
    hits: int = BODYPART_HITS


@dataclass(slots=True, eq=False)
class Actor:
    """A combat unit (creep) on the battlefield.

    ``hits`` and ``hits_max`` are derived from ``body`` and refreshed after
    every damage or healing application; never assign them directly.
    """

    id: str
    pos: Vector2
    body: list[BodyPartState]
    team: Team = Team.FRIENDLY
    name: str = ""
    fatigue: int = 0
    hits: int = field(default=0, init=False)
    hits_max: int = field(default=0, init=False)
    damage_dealt: int = 0
    damage_taken: int = 0
    healing_done: int = 0
    healing_received: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.id
        self.hits_max = len(self.body) * BODYPART_HITS
        self._recompute_hits()

    @classmethod
    def create(
        cls,
        actor_id: str,
        x: int,
        y: int,
        parts: Iterable[BodyPart | str],
        team: Team = Team.FRIENDLY,
        name: str = "",
    ) -> Actor:
        """Build a fresh full-health actor from a list of part kinds."""
        body = [BodyPartState(kind=BodyPart(p)) for p in parts]
        return cls(id=actor_id, pos=Vector2(x, y), body=body, team=team, name=name)

    # -- derived state --

    @property
    def x(self) -> int:
        return self.pos.x

    @property
    def y(self) -> int:
        return self.pos.y

    @property
    def alive(self) -> bool:
        return self.hits > 0

    @property
    def hp_ratio(self) -> float:
        return self.hits / self.hits_max if self.hits_max > 0 else 0.0

    def range_to(self, other: Actor | Vector2) -> int:
        """Chebyshev distance to another actor or cell."""
        pos = other.pos if isinstance(other, Actor) else other
        return self.pos.chebyshev(pos)

    def active_parts(self, kind: BodyPart) -> int:
        return sum(1 for part in self.body if part.kind == kind and part.hits > 0)

    # -- mutation --

    def _recompute_hits(self) -> None:
        self.hits = sum(part.hits for part in self.body)

    def apply_damage(self, amount: int) -> None:
        """Consume *amount* against parts front to back."""
        remaining = amount
        for part in self.body:
            if remaining <= 0:
                break
            if part.hits > 0:
                absorbed = min(part.hits, remaining)
                part.hits -= absorbed
                remaining -= absorbed
        self._recompute_hits()
        self.damage_taken += amount

    def apply_healing(self, amount: int) -> None:
        """Restore hit points front to back, each part capped at full."""
        remaining = amount
        for part in self.body:
            if remaining <= 0:
                break
            if part.hits < BODYPART_HITS:
                restored = min(BODYPART_HITS - part.hits, remaining)
                part.hits += restored
                remaining -= restored
        self._recompute_hits()
        self.healing_received += amount

    def reduce_fatigue(self) -> None:
        self.fatigue = max(0, self.fatigue - self.active_parts(BodyPart.MOVE) * MOVE_POWER)

    # -- export --

    def frame_state(self) -> dict[str, Any]:
        """Public per-tick state as written into replay frames."""
        return {
            "id": self.id,
            "name": self.name,
            "x": self.pos.x,
            "y": self.pos.y,
            "team": self.team.value,
            "hits": self.hits,
            "hitsMax": self.hits_max,
            "damageDealt": self.damage_dealt,
            "damageTaken": self.damage_taken,
            "healingDone": self.healing_done,
            "healingReceived": self.healing_received,
            "fatigue": self.fatigue,
        }

    def stats(self) -> dict[str, Any]:
        """End-of-battle summary including per-part hit points."""
        summary = self.frame_state()
        summary["alive"] = self.alive
        summary["bodyParts"] = [{"type": p.kind.value, "hits": p.hits} for p in self.body]
        return summary

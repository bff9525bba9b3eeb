"""Battle and batch result records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

from squadsim.core.enums import BattleOutcome, Team

if TYPE_CHECKING:
    from squadsim.core.models import Actor


@dataclass(slots=True)
class SideSummary:
    """One team's totals at the end of a battle."""

    survivors: int
    total_damage: int
    total_healing: int
    actors: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_actors(cls, actors: Sequence[Actor]) -> SideSummary:
        return cls(
            survivors=sum(1 for a in actors if a.alive),
            total_damage=sum(a.damage_dealt for a in actors),
            total_healing=sum(a.healing_done for a in actors),
            actors=[a.stats() for a in actors],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "survivors": self.survivors,
            "totalDamage": self.total_damage,
            "totalHealing": self.total_healing,
            "actors": self.actors,
        }


def decide_winner(friendly_alive: int, enemy_alive: int) -> BattleOutcome:
    """A side wins only by being the last one standing; anything else is a draw."""
    if friendly_alive > 0 and enemy_alive == 0:
        return BattleOutcome.FRIENDLY
    if enemy_alive > 0 and friendly_alive == 0:
        return BattleOutcome.ENEMY
    return BattleOutcome.DRAW


@dataclass(slots=True)
class BattleResult:
    winner: BattleOutcome
    ticks: int
    friendly: SideSummary
    enemy: SideSummary

    def side(self, team: Team) -> SideSummary:
        return self.friendly if team is Team.FRIENDLY else self.enemy

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner.value,
            "ticks": self.ticks,
            "friendly": self.friendly.to_dict(),
            "enemy": self.enemy.to_dict(),
        }


@dataclass(slots=True)
class SideAverages:
    total_damage: int = 0
    total_healing: int = 0
    avg_damage: float = 0.0
    avg_healing: float = 0.0
    avg_survivors: float = 0.0


@dataclass(slots=True)
class BatchResult:
    """Aggregate of a run of battles, friendly side's point of view."""

    iterations: int
    wins: int
    losses: int
    draws: int
    win_rate: float
    avg_ticks: float
    battles: list[BattleResult] = field(default_factory=list)
    recordings: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_battles(
        cls,
        battles: list[BattleResult],
        recordings: list[dict[str, Any]] | None = None,
    ) -> BatchResult:
        n = len(battles)
        wins = sum(1 for b in battles if b.winner is BattleOutcome.FRIENDLY)
        losses = sum(1 for b in battles if b.winner is BattleOutcome.ENEMY)
        draws = n - wins - losses
        return cls(
            iterations=n,
            wins=wins,
            losses=losses,
            draws=draws,
            win_rate=wins / n if n else 0.0,
            avg_ticks=sum(b.ticks for b in battles) / n if n else 0.0,
            battles=battles,
            recordings=recordings or [],
        )

    def side_averages(self, team: Team) -> SideAverages:
        """Per-battle averages of damage, healing, and survivors for *team*."""
        out = SideAverages()
        if not self.battles:
            return out
        survivors = 0
        for battle in self.battles:
            side = battle.side(team)
            out.total_damage += side.total_damage
            out.total_healing += side.total_healing
            survivors += side.survivors
        n = len(self.battles)
        out.avg_damage = out.total_damage / n
        out.avg_healing = out.total_healing / n
        out.avg_survivors = survivors / n
        return out

    def summary(self) -> dict[str, Any]:
        """Compact dict for logs and the API (no per-battle detail)."""
        def _side(team: Team) -> dict[str, float]:
            s = self.side_averages(team)
            return {
                "totalDamage": s.total_damage,
                "totalHealing": s.total_healing,
                "avgDamage": s.avg_damage,
                "avgHealing": s.avg_healing,
                "avgSurvivors": s.avg_survivors,
            }

        return {
            "iterations": self.iterations,
            "wins": self.wins,
            "losses": self.losses,
            "draws": self.draws,
            "winRate": self.win_rate,
            "avgTicks": self.avg_ticks,
            "friendly": _side(Team.FRIENDLY),
            "enemy": _side(Team.ENEMY),
        }


def build_heatmap(battles: Sequence[BattleResult], width: int, height: int) -> dict[str, Any]:
    """Count final actor positions per cell for each side, clamped to the map."""
    def _matrix() -> list[list[int]]:
        return [[0] * width for _ in range(height)]

    out: dict[str, Any] = {"width": width, "height": height}
    for team in (Team.FRIENDLY, Team.ENEMY):
        matrix = _matrix()
        peak = 0
        for battle in battles:
            for actor in battle.side(team).actors:
                x = max(0, min(width - 1, actor.get("x", 0)))
                y = max(0, min(height - 1, actor.get("y", 0)))
                matrix[y][x] += 1
                peak = max(peak, matrix[y][x])
        out[team.value] = {"matrix": matrix, "max": peak}
    return out

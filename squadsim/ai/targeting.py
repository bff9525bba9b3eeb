"""Target selection over the roster.

All scans walk the roster in insertion order and only replace the current
pick on a strict improvement, so the first actor found wins every tie.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from squadsim.core.models import Actor


def living_allies(actor: Actor, roster: Iterable[Actor]) -> list[Actor]:
    """Living actors on *actor*'s team, *actor* included."""
    return [a for a in roster if a.alive and a.team is actor.team]


def living_enemies(actor: Actor, roster: Iterable[Actor]) -> list[Actor]:
    return [a for a in roster if a.alive and a.team is not actor.team]


def most_damaged_friendly(actor: Actor, roster: Iterable[Actor]) -> Actor | None:
    """Injured ally with the fewest hit points (absolute, not fraction)."""
    best: Actor | None = None
    for ally in living_allies(actor, roster):
        if ally.hits >= ally.hits_max:
            continue
        if best is None or ally.hits < best.hits:
            best = ally
    return best


def weakest_enemy(actor: Actor, roster: Iterable[Actor]) -> Actor | None:
    """Living enemy with the lowest hit point fraction."""
    best: Actor | None = None
    for enemy in living_enemies(actor, roster):
        if best is None or enemy.hp_ratio < best.hp_ratio:
            best = enemy
    return best


def nearest_enemy(actor: Actor, roster: Iterable[Actor]) -> Actor | None:
    """Living enemy at the smallest Chebyshev range."""
    best: Actor | None = None
    best_range = 0
    for enemy in living_enemies(actor, roster):
        rng = actor.range_to(enemy)
        if best is None or rng < best_range:
            best, best_range = enemy, rng
    return best

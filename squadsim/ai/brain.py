"""SquadBrain — the per-actor decision function.

Deterministic and stateless: the same roster, terrain, and occupancy always
yield the same actions.  One call issues at most one attack-or-heal and at
most one move (melee units may follow a move with a strike), acting directly
through the free functions in ``squadsim.actions``.

Decision order:
  1. Healers with an injured ally heal it and do nothing offensive.
  2. Otherwise pick a target: weakest enemy, or nearest if the weakest is
     out of focus range.
  3. Act by loadout: ranged-only kites, melee-only charges, hybrid does both.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Sequence

from squadsim.actions.base import ActionRecord
from squadsim.actions.combat import attack, heal, ranged_attack, ranged_heal
from squadsim.actions.move import move_to
from squadsim.ai.targeting import most_damaged_friendly, nearest_enemy, weakest_enemy
from squadsim.config import PolicyConfig
from squadsim.core.constants import ATTACK_RANGE, HEAL_RANGE, RANGED_ATTACK_RANGE, RANGED_HEAL_RANGE
from squadsim.core.enums import ActionStatus, ActionType, BodyPart
from squadsim.core.models import Vector2

if TYPE_CHECKING:
    from squadsim.core.models import Actor
    from squadsim.core.terrain import Terrain
    from squadsim.systems.occupancy import OccupancyIndex

logger = logging.getLogger(__name__)

_ActionFn = Callable[["Actor", "Actor"], ActionStatus]


class SquadBrain:
    """Scripted squad AI parameterized by a ``PolicyConfig``."""

    __slots__ = ("_policy",)

    def __init__(self, policy: PolicyConfig | None = None) -> None:
        self._policy = policy or PolicyConfig()

    @property
    def policy(self) -> PolicyConfig:
        return self._policy

    def decide(
        self,
        actor: Actor,
        roster: Sequence[Actor],
        terrain: Terrain,
        occupancy: OccupancyIndex,
    ) -> list[ActionRecord]:
        """Run one actor's turn; return the actions that actually landed."""
        actions: list[ActionRecord] = []

        if actor.active_parts(BodyPart.HEAL) > 0:
            patient = most_damaged_friendly(actor, roster)
            if patient is not None:
                self._support(actor, patient, terrain, occupancy, actions)
                return actions

        target = self._choose_target(actor, roster)
        if target is None:
            return actions

        has_ranged = actor.active_parts(BodyPart.RANGED_ATTACK) > 0
        has_melee = actor.active_parts(BodyPart.ATTACK) > 0

        if has_ranged and not has_melee:
            self._ranged(actor, target, terrain, occupancy, actions)
        elif has_melee and not has_ranged:
            self._melee(actor, target, terrain, occupancy, actions)
        elif has_ranged and has_melee:
            self._hybrid(actor, target, terrain, occupancy, actions)
        return actions

    # -- target selection --

    def _choose_target(self, actor: Actor, roster: Sequence[Actor]) -> Actor | None:
        weakest = weakest_enemy(actor, roster)
        if weakest is None:
            return None
        if actor.range_to(weakest) > self._policy.focus_fire_range:
            return nearest_enemy(actor, roster)
        return weakest

    # -- branches --

    def _support(
        self,
        actor: Actor,
        patient: Actor,
        terrain: Terrain,
        occupancy: OccupancyIndex,
        actions: list[ActionRecord],
    ) -> None:
        distance = actor.range_to(patient)
        if distance <= HEAL_RANGE:
            _perform(heal, ActionType.HEAL, actor, patient, actions)
        elif distance <= RANGED_HEAL_RANGE:
            _perform(ranged_heal, ActionType.RANGED_HEAL, actor, patient, actions)

        if distance > self._policy.healer_approach_range:
            move_to(actor, patient, terrain, occupancy)

    def _ranged(
        self,
        actor: Actor,
        target: Actor,
        terrain: Terrain,
        occupancy: OccupancyIndex,
        actions: list[ActionRecord],
    ) -> None:
        distance = actor.range_to(target)
        if distance <= RANGED_ATTACK_RANGE:
            _perform(ranged_attack, ActionType.RANGED_ATTACK, actor, target, actions)

        # Hit point fractions are read after the shot
        policy = self._policy
        if distance <= policy.kite_range and actor.hp_ratio > policy.kite_self_hp_threshold:
            if target.hp_ratio > policy.kite_target_hp_threshold:
                flee = Vector2(2 * actor.pos.x - target.pos.x, 2 * actor.pos.y - target.pos.y)
                move_to(actor, flee, terrain, occupancy)
            else:
                move_to(actor, target, terrain, occupancy)
        elif distance > RANGED_ATTACK_RANGE:
            move_to(actor, target, terrain, occupancy)

    def _melee(
        self,
        actor: Actor,
        target: Actor,
        terrain: Terrain,
        occupancy: OccupancyIndex,
        actions: list[ActionRecord],
    ) -> None:
        if actor.range_to(target) <= ATTACK_RANGE:
            _perform(attack, ActionType.ATTACK, actor, target, actions)
            return

        move_to(actor, target, terrain, occupancy)
        if actor.range_to(target) <= ATTACK_RANGE:
            _perform(attack, ActionType.ATTACK, actor, target, actions)

    def _hybrid(
        self,
        actor: Actor,
        target: Actor,
        terrain: Terrain,
        occupancy: OccupancyIndex,
        actions: list[ActionRecord],
    ) -> None:
        distance = actor.range_to(target)
        if distance <= ATTACK_RANGE:
            _perform(attack, ActionType.ATTACK, actor, target, actions)
        elif distance <= RANGED_ATTACK_RANGE:
            _perform(ranged_attack, ActionType.RANGED_ATTACK, actor, target, actions)
            move_to(actor, target, terrain, occupancy)
        else:
            move_to(actor, target, terrain, occupancy)


def _perform(
    fn: _ActionFn,
    verb: ActionType,
    actor: Actor,
    target: Actor,
    actions: list[ActionRecord],
) -> None:
    source, dest = actor.pos, target.pos
    if fn(actor, target) is ActionStatus.OK:
        actions.append(ActionRecord(verb=verb, actor_id=actor.id, source=source, target=dest))

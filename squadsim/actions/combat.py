"""Combat actions — melee, ranged, and healing between two actors.

Each function validates in a fixed order (target, range, body part) and
returns an ``ActionStatus``.  Nothing here raises for a bad target: the AI
layer treats a non-OK status as "the action did not happen".
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from squadsim.core.constants import (
    ATTACK_POWER,
    ATTACK_RANGE,
    HEAL_POWER,
    HEAL_RANGE,
    RANGED_ATTACK_DISTANCE_RATE,
    RANGED_ATTACK_POWER,
    RANGED_ATTACK_RANGE,
    RANGED_HEAL_POWER,
    RANGED_HEAL_RANGE,
)
from squadsim.core.enums import ActionStatus, BodyPart

if TYPE_CHECKING:
    from squadsim.core.models import Actor

logger = logging.getLogger(__name__)


def _check(actor: Actor, target: Actor | None, max_range: int, part: BodyPart) -> tuple[ActionStatus, int]:
    """Shared validation.  Returns (status, active part count)."""
    if target is None or not target.alive:
        return ActionStatus.ERR_INVALID_TARGET, 0
    if actor.range_to(target) > max_range:
        return ActionStatus.ERR_NOT_IN_RANGE, 0
    parts = actor.active_parts(part)
    if parts == 0:
        return ActionStatus.ERR_NO_BODYPART, 0
    return ActionStatus.OK, parts


def ranged_falloff(distance: int) -> float:
    """Damage multiplier for a ranged attack at *distance* (0.0 if out of reach)."""
    return RANGED_ATTACK_DISTANCE_RATE.get(distance, 0.0)


def attack(actor: Actor, target: Actor | None) -> ActionStatus:
    """Melee strike on an adjacent target."""
    status, parts = _check(actor, target, ATTACK_RANGE, BodyPart.ATTACK)
    if status is not ActionStatus.OK:
        logger.debug("%s attack rejected: %s", actor.id, status.name)
        return status

    damage = parts * ATTACK_POWER
    target.apply_damage(damage)
    actor.damage_dealt += damage
    return ActionStatus.OK


def ranged_attack(actor: Actor, target: Actor | None) -> ActionStatus:
    """Ranged shot with distance falloff, up to range 3."""
    status, parts = _check(actor, target, RANGED_ATTACK_RANGE, BodyPart.RANGED_ATTACK)
    if status is not ActionStatus.OK:
        logger.debug("%s ranged attack rejected: %s", actor.id, status.name)
        return status

    # Falloff products are whole numbers; round() strips float noise (3 * 10 * 0.1)
    damage = round(parts * RANGED_ATTACK_POWER * ranged_falloff(actor.range_to(target)))
    target.apply_damage(damage)
    actor.damage_dealt += damage
    return ActionStatus.OK


def heal(actor: Actor, target: Actor | None) -> ActionStatus:
    """Adjacent heal (self included, at range 0)."""
    status, parts = _check(actor, target, HEAL_RANGE, BodyPart.HEAL)
    if status is not ActionStatus.OK:
        logger.debug("%s heal rejected: %s", actor.id, status.name)
        return status

    amount = parts * HEAL_POWER
    target.apply_healing(amount)
    actor.healing_done += amount
    return ActionStatus.OK


def ranged_heal(actor: Actor, target: Actor | None) -> ActionStatus:
    """Weaker heal reaching up to range 3."""
    status, parts = _check(actor, target, RANGED_HEAL_RANGE, BodyPart.HEAL)
    if status is not ActionStatus.OK:
        logger.debug("%s ranged heal rejected: %s", actor.id, status.name)
        return status

    amount = parts * RANGED_HEAL_POWER
    target.apply_healing(amount)
    actor.healing_done += amount
    return ActionStatus.OK

"""Movement — one-cell steps chosen by a fixed priority list.

This is a local tie-break, not a path planner: an actor tries, in order,

1. the diagonal step toward the goal,
2. the horizontal step toward it,
3. the vertical step toward it,
4. the two off-diagonals (x reflected, then y reflected),
5. the two reverse cardinals (x, then y),

and takes the first cell that is walkable and not held by another living
actor.  Steps that need a non-zero axis are skipped when that axis is zero.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from squadsim.core.enums import ActionStatus
from squadsim.core.models import Vector2

if TYPE_CHECKING:
    from squadsim.core.models import Actor
    from squadsim.core.terrain import Terrain
    from squadsim.systems.occupancy import OccupancyIndex

logger = logging.getLogger(__name__)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def candidate_steps(origin: Vector2, goal: Vector2) -> list[Vector2]:
    """Destination cells to try, highest priority first."""
    dx = _sign(goal.x - origin.x)
    dy = _sign(goal.y - origin.y)
    x, y = origin.x, origin.y

    steps: list[Vector2] = []
    if dx and dy:
        steps.append(Vector2(x + dx, y + dy))
    if dx:
        steps.append(Vector2(x + dx, y))
    if dy:
        steps.append(Vector2(x, y + dy))
    if dx and dy:
        steps.append(Vector2(x - dx, y + dy))
        steps.append(Vector2(x + dx, y - dy))
    if dx:
        steps.append(Vector2(x - dx, y))
    if dy:
        steps.append(Vector2(x, y - dy))
    return steps


def move_to(
    actor: Actor,
    goal: Actor | Vector2,
    terrain: Terrain,
    occupancy: OccupancyIndex,
) -> ActionStatus:
    """Step *actor* one cell toward *goal*.

    Fatigued actors and actors with no free candidate cell stay put and get
    ``ERR_NOT_IN_RANGE``.  Standing on the goal already is ``OK``.
    On success fatigue grows by the destination cell's terrain cost.
    """
    if actor.fatigue > 0:
        return ActionStatus.ERR_NOT_IN_RANGE

    goal_pos = goal.pos if hasattr(goal, "pos") else goal
    steps = candidate_steps(actor.pos, goal_pos)
    if not steps:
        return ActionStatus.OK

    for step in steps:
        if not terrain.is_walkable(step.x, step.y):
            continue
        if occupancy.is_occupied(step.x, step.y, ignore=actor):
            continue
        actor.pos = step
        actor.fatigue += int(terrain.get_cost(step.x, step.y))
        return ActionStatus.OK

    logger.debug("%s blocked at %s moving toward %s", actor.id, actor.pos, goal_pos)
    return ActionStatus.ERR_NOT_IN_RANGE

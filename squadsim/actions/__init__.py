"""Combat and movement actions as free functions over explicit world context."""

from squadsim.actions.base import ActionRecord
from squadsim.actions.combat import attack, heal, ranged_attack, ranged_heal
from squadsim.actions.move import candidate_steps, move_to

__all__ = [
    "ActionRecord",
    "attack",
    "candidate_steps",
    "heal",
    "move_to",
    "ranged_attack",
    "ranged_heal",
]

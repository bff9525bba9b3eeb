"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class BodyPart(str, Enum):
    """Kinds of body part an actor can carry."""

    MOVE = "move"
    WORK = "work"
    CARRY = "carry"
    ATTACK = "attack"
    RANGED_ATTACK = "ranged_attack"
    TOUGH = "tough"
    HEAL = "heal"


@unique
class Team(str, Enum):
    """Which side of the battle an actor fights for."""

    FRIENDLY = "friendly"
    ENEMY = "enemy"

    @property
    def opponent(self) -> Team:
        return Team.ENEMY if self is Team.FRIENDLY else Team.FRIENDLY


@unique
class BattleOutcome(str, Enum):
    """Winner reported at the end of a battle."""

    FRIENDLY = "friendly"
    ENEMY = "enemy"
    DRAW = "draw"


@unique
class TerrainType(IntEnum):
    """Terrain category codes as exported to renderers."""

    PLAIN = 0
    WALL = 1
    SWAMP = 2


@unique
class ActionStatus(IntEnum):
    """Result codes returned by combat and movement calls.

    These are control values, never raised.  ERR_NOT_IN_RANGE doubles as
    "cannot move" for fatigued or boxed-in actors.
    """

    OK = 0
    ERR_INVALID_TARGET = -7
    ERR_NOT_IN_RANGE = -9
    ERR_NO_BODYPART = -12


@unique
class ActionType(str, Enum):
    """Recorded action kinds (values match the replay format)."""

    ATTACK = "attack"
    RANGED_ATTACK = "rangedAttack"
    HEAL = "heal"
    RANGED_HEAL = "rangedHeal"


@unique
class EngineState(IntEnum):
    """Lifecycle of a single battle inside the engine."""

    IDLE = 0
    RUNNING = 1
    ENDED = 2

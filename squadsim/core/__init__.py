"""Core data models: actors, terrain, enums, and game constants."""

from squadsim.core.enums import ActionStatus, ActionType, BattleOutcome, BodyPart, EngineState, Team, TerrainType
from squadsim.core.models import Actor, BodyPartState, Vector2
from squadsim.core.terrain import Terrain

__all__ = [
    "ActionStatus",
    "ActionType",
    "Actor",
    "BattleOutcome",
    "BodyPart",
    "BodyPartState",
    "EngineState",
    "Team",
    "Terrain",
    "TerrainType",
    "Vector2",
]

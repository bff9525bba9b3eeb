"""AI layer: target selection and the squad decision policy."""

from squadsim.ai.brain import SquadBrain

__all__ = ["SquadBrain"]

"""Game constants: body part costs, combat power, ranges, and fatigue."""

from __future__ import annotations

from squadsim.core.enums import BodyPart

# Energy cost per body part
BODYPART_COST: dict[BodyPart, int] = {
    BodyPart.MOVE: 50,
    BodyPart.WORK: 100,
    BodyPart.CARRY: 50,
    BodyPart.ATTACK: 80,
    BodyPart.RANGED_ATTACK: 150,
    BodyPart.TOUGH: 10,
    BodyPart.HEAL: 250,
}

BODYPART_HITS = 100
MAX_CREEP_SIZE = 50

# Combat
ATTACK_POWER = 30               # per ATTACK part, adjacent
RANGED_ATTACK_POWER = 10        # per RANGED_ATTACK part before falloff
HEAL_POWER = 12                 # per HEAL part, adjacent
RANGED_HEAL_POWER = 4           # per HEAL part, range 2-3

# Ranged attack falloff by Chebyshev range; anything beyond 3 is rejected
RANGED_ATTACK_DISTANCE_RATE: dict[int, float] = {
    0: 1.0,
    1: 1.0,
    2: 0.4,
    3: 0.1,
}

ATTACK_RANGE = 1
RANGED_ATTACK_RANGE = 3
HEAL_RANGE = 1
RANGED_HEAL_RANGE = 3

# Movement
FATIGUE_COST_PLAIN = 2
FATIGUE_COST_SWAMP = 10
MOVE_POWER = 2                  # fatigue removed per MOVE part per tick

"""Squad catalog: named compositions and formation placement.

A composition is an ordered list of ``UnitTemplate``; ``create_squad`` turns
it into actors laid out two cells apart in rows of three, anchored at the
given cell.  Random composition generation lives outside this package.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence

from squadsim.core.constants import BODYPART_COST
from squadsim.core.enums import BodyPart, Team
from squadsim.core.models import Actor

M, A, R, H, T = BodyPart.MOVE, BodyPart.ATTACK, BodyPart.RANGED_ATTACK, BodyPart.HEAL, BodyPart.TOUGH

FORMATION_COLUMNS = 3
FORMATION_SPACING = 2


@dataclass(frozen=True, slots=True)
class UnitTemplate:
    """Body loadout plus a display role for one squad member."""

    body: tuple[BodyPart, ...]
    role: str = ""

    @property
    def cost(self) -> int:
        return body_cost(self.body)

    def to_dict(self) -> dict:
        return {"body": [p.value for p in self.body], "role": self.role, "cost": self.cost}


def _unit(role: str, *parts: BodyPart) -> UnitTemplate:
    return UnitTemplate(body=tuple(parts), role=role)


_RANGER = _unit("Ranger", M, R, M, R, M, R)
_HEAVY_RANGER = _unit("Ranger", M, R, M, R, M, R, M, R)
_BERSERKER = _unit("Berserker", A, M, A, M, A, M)
_SWAMP_BERSERKER = _unit("Berserker", M, M, A, M, A, M, A)
_ENFORCER = _unit("Enforcer", T, T, T, T, T, M, M, A, M, A, M, A)
_MEDIC = _unit("Medic", M, H, M)
_HEAVY_MEDIC = _unit("Medic", M, H, M, H)


COMPOSITIONS: dict[str, tuple[UnitTemplate, ...]] = {
    "ranged_kite": (_RANGER,) * 3 + (_MEDIC,),
    "heavy_melee": (_BERSERKER,) * 4 + (_MEDIC,),
    "hybrid_squad": (_RANGER, _RANGER, _SWAMP_BERSERKER, _MEDIC, _MEDIC),
    "current_strategy": (_SWAMP_BERSERKER,) * 3 + (_MEDIC,),
    "ranged_4_2": (_RANGER,) * 4 + (_MEDIC,) * 2,
    "ranged_5_2": (_RANGER,) * 5 + (_MEDIC,) * 2,
    "melee_5_2": (_SWAMP_BERSERKER,) * 5 + (_MEDIC,) * 2,
    "hybrid_2r_2m_2h": (_RANGER,) * 2 + (_SWAMP_BERSERKER,) * 2 + (_MEDIC,) * 2,
    "tank_squad": (_ENFORCER,) * 3 + (_MEDIC,) * 2,
    "pure_ranged": (_RANGER,) * 4,
    "heavy_ranged": (_HEAVY_RANGER,) * 3 + (_HEAVY_MEDIC,),
}

# Opponent pool for the predefined matchup sweep
CORE_COMPOSITIONS: tuple[str, ...] = ("ranged_kite", "heavy_melee", "hybrid_squad", "current_strategy")


def get_composition(name: str) -> tuple[UnitTemplate, ...]:
    """Look up a named composition.  Raises ``KeyError`` for unknown names."""
    try:
        return COMPOSITIONS[name]
    except KeyError:
        raise KeyError(f"Unknown composition {name!r}") from None


def body_cost(body: Iterable[BodyPart | str]) -> int:
    return sum(BODYPART_COST[BodyPart(p)] for p in body)


def composition_cost(composition: Iterable[UnitTemplate]) -> int:
    return sum(unit.cost for unit in composition)


def identify_role(body: Iterable[BodyPart | str]) -> str:
    """Classify a loadout by its parts."""
    counts = Counter(BodyPart(p) for p in body)
    if counts[H] > 0:
        return "Medic"
    if counts[R] > 0 and counts[A] == 0:
        return "Ranger"
    if counts[A] > 0 and counts[R] == 0:
        return "Berserker"
    if counts[A] > 0 and counts[R] > 0:
        return "Operator"
    if counts[T] > 3:
        return "Enforcer"
    return "Conscript"


def create_squad(
    composition: Sequence[UnitTemplate],
    x: int,
    y: int,
    team: Team = Team.FRIENDLY,
) -> list[Actor]:
    """Instantiate *composition* as actors in formation at (*x*, *y*)."""
    prefix = "player" if team is Team.FRIENDLY else "enemy"
    squad: list[Actor] = []
    for index, unit in enumerate(composition):
        role = unit.role or identify_role(unit.body)
        dx = (index % FORMATION_COLUMNS) * FORMATION_SPACING
        dy = (index // FORMATION_COLUMNS) * FORMATION_SPACING
        squad.append(
            Actor.create(
                f"{prefix}_{role}_{index}",
                x + dx,
                y + dy,
                unit.body,
                team=team,
                name=f"{role}-{index + 1}",
            )
        )
    return squad

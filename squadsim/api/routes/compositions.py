"""GET /api/v1/compositions — the squad catalog."""

from __future__ import annotations

from fastapi import APIRouter

from squadsim.api.schemas import CompositionSchema, UnitSchema
from squadsim.systems.squads import COMPOSITIONS, composition_cost

router = APIRouter()


@router.get("/compositions", response_model=list[CompositionSchema])
def list_compositions() -> list[CompositionSchema]:
    return [
        CompositionSchema(
            name=name,
            cost=composition_cost(units),
            units=[UnitSchema(role=u.role, body=[p.value for p in u.body], cost=u.cost) for u in units],
        )
        for name, units in COMPOSITIONS.items()
    ]

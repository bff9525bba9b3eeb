"""POST /api/v1/simulate — run a matchup between two catalog squads."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from squadsim.api.dependencies import get_simulation_service
from squadsim.api.schemas import BattleSummarySchema, SideStatsSchema, SimulateRequest, SimulateResponse
from squadsim.api.service import SimulationService
from squadsim.core.enums import Team

router = APIRouter()


@router.post("/simulate", response_model=SimulateResponse)
def simulate(
    request: SimulateRequest,
    service: SimulationService = Depends(get_simulation_service),
) -> SimulateResponse:
    try:
        report = service.simulate(
            request.friendly,
            request.enemy,
            request.battles,
            seed=request.seed,
            entropy=request.entropy,
            record=request.record,
            heatmap=request.heatmap,
        )
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=exc.args[0]) from exc

    batch = report.batch

    def _side(team: Team) -> SideStatsSchema:
        s = batch.side_averages(team)
        return SideStatsSchema(
            total_damage=s.total_damage,
            total_healing=s.total_healing,
            avg_damage=s.avg_damage,
            avg_healing=s.avg_healing,
            avg_survivors=s.avg_survivors,
        )

    return SimulateResponse(
        label=report.label,
        friendly_cost=report.friendly_cost,
        enemy_cost=report.enemy_cost,
        iterations=batch.iterations,
        wins=batch.wins,
        losses=batch.losses,
        draws=batch.draws,
        win_rate=batch.win_rate,
        avg_ticks=batch.avg_ticks,
        friendly=_side(Team.FRIENDLY),
        enemy=_side(Team.ENEMY),
        battles=[
            BattleSummarySchema(
                winner=b.winner.value,
                ticks=b.ticks,
                friendly_survivors=b.friendly.survivors,
                enemy_survivors=b.enemy.survivors,
            )
            for b in batch.battles
        ],
        heatmap=report.heatmap,
        recorded=report.recording is not None,
    )

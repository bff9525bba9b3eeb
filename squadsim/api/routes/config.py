"""GET /api/v1/config — expose simulation configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from squadsim.api.dependencies import get_simulation_service
from squadsim.api.schemas import SimulationConfigResponse
from squadsim.api.service import SimulationService
from squadsim.systems.entropy import normalize_entropy

router = APIRouter()


@router.get("/config", response_model=SimulationConfigResponse)
def get_config(
    service: SimulationService = Depends(get_simulation_service),
) -> SimulationConfigResponse:
    cfg = service.config
    policy = cfg.policy
    return SimulationConfigResponse(
        seed=cfg.seed,
        grid_width=cfg.grid_width,
        grid_height=cfg.grid_height,
        default_terrain=cfg.default_terrain,
        max_ticks=cfg.max_ticks,
        num_workers=cfg.num_workers,
        entropy_enabled=normalize_entropy(cfg.entropy).enabled,
        friendly_spawn=cfg.friendly_spawn,
        enemy_spawn=cfg.enemy_spawn,
        focus_fire_range=policy.focus_fire_range,
        kite_range=policy.kite_range,
        kite_self_hp_threshold=policy.kite_self_hp_threshold,
        kite_target_hp_threshold=policy.kite_target_hp_threshold,
        healer_approach_range=policy.healer_approach_range,
    )

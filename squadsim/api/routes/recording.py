"""GET /api/v1/recording — frames of the latest recorded battle."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from squadsim.api.dependencies import get_simulation_service
from squadsim.api.service import SimulationService

router = APIRouter()


@router.get("/recording")
def get_recording(
    service: SimulationService = Depends(get_simulation_service),
) -> dict:
    recording = service.get_recording()
    if recording is None:
        raise HTTPException(status_code=404, detail="No battle has been recorded yet.")
    return recording

"""FastAPI dependency injection — provides the SimulationService singleton."""

from __future__ import annotations

from squadsim.api.service import SimulationService

_service: SimulationService | None = None


def set_simulation_service(service: SimulationService) -> None:
    global _service
    _service = service


def get_simulation_service() -> SimulationService:
    if _service is None:
        raise RuntimeError("SimulationService not initialized — server not started correctly.")
    return _service

"""Versioned API route modules."""

from fastapi import APIRouter

from squadsim.api.routes.compositions import router as compositions_router
from squadsim.api.routes.config import router as config_router
from squadsim.api.routes.recording import router as recording_router
from squadsim.api.routes.simulate import router as simulate_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(simulate_router, tags=["Simulate"])
api_router.include_router(compositions_router, tags=["Compositions"])
api_router.include_router(recording_router, tags=["Recording"])
api_router.include_router(config_router, tags=["Config"])

__all__ = ["api_router"]

"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from squadsim import __version__
from squadsim.api.dependencies import set_simulation_service
from squadsim.api.routes import api_router
from squadsim.api.service import SimulationService
from squadsim.config import SimulationConfig
from squadsim.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: SimulationConfig | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = SimulationConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        set_simulation_service(SimulationService(_config))
        logger.info("API server started.")
        yield
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Squad Combat Simulator",
        description=(
            "Deterministic tick-based squad combat simulator.\n\n"
            "## API Groups\n\n"
            "- **Simulate** — Run batches of battles between catalog squads\n"
            "- **Compositions** — The squad catalog\n"
            "- **Recording** — Frames of the latest recorded battle\n"
            "- **Config** — Read-only simulation configuration\n"
        ),
        version=__version__,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Simulate", "description": "Run a matchup and return win/loss statistics."},
            {"name": "Compositions", "description": "Named squad compositions with body loadouts and energy cost."},
            {"name": "Recording", "description": "Per-tick replay frames of the most recent recorded battle."},
            {"name": "Config", "description": "Read-only simulation configuration (grid, ticks, entropy, AI policy)."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app

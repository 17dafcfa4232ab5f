"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from director.api.dependencies import set_engine_manager
from director.api.engine_manager import EngineManager
from director.api.routes import api_router
from director.config import DirectorConfig
from director.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: DirectorConfig | None = None, store=None, autostart: bool = True) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = DirectorConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config, store=store)
        set_engine_manager(manager)
        if autostart:
            manager.start()
        logger.info("API server started, director running.")
        yield
        manager.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Population Director",
        description=(
            "Procedural-population director — live telemetry and control.\n\n"
            "## API Groups\n\n"
            "- **State** — Live enemies, structures, current task, metrics, notifications\n"
            "- **Control** — Game loop lifecycle: start, pause, resume, step, reset\n"
            "- **Config** — Read-only director configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live director state polled by a viewer."},
            {"name": "Control", "description": "Game loop lifecycle controls: start, pause, resume, single-step, and reset."},
            {"name": "Config", "description": "Read-only director configuration parameters."},
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

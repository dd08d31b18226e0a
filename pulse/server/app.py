"""HTTP app — REST API mounted under /api."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from pulse.config import PulseConfig
from pulse.server.api import router
from pulse.state import closeState, initState


def createApp(config: PulseConfig | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        initState(config)
        yield
        closeState()

    app = FastAPI(title="Pulse", lifespan=lifespan)
    app.include_router(router, prefix="/api")
    return app

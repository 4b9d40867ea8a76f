from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from signal_relay.api.middleware.request_context import RequestContextMiddleware
from signal_relay.api.v1.routers import calls, health, ws
from signal_relay.application.exceptions import NotFoundError
from signal_relay.application.ports.clock import Clock, SystemClock
from signal_relay.config import Settings, settings as default_settings
from signal_relay.infrastructure.memory.call_store import CallStore
from signal_relay.infrastructure.memory.presence_registry import PresenceRegistry
from signal_relay.infrastructure.ws.manager import ConnectionManager
from signal_relay.services.signaling_service import SignalingRouter
from signal_relay.workers.call_reaper import CallReaper

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.started_at = time.monotonic()
    await app.state.reaper.start()

    yield

    await app.state.reaper.stop()
    await app.state.signaling.aclose()
    logger.info("Signaling relay stopped")


def create_app(config: Settings | None = None, clock: Clock | None = None) -> FastAPI:
    config = config or default_settings
    clock = clock or SystemClock()

    app = FastAPI(
        title="Signal Relay",
        version="0.1.0",
        lifespan=lifespan,
    )

    presence = PresenceRegistry()
    call_store = CallStore(clock)
    app.state.clock = clock
    app.state.presence = presence
    app.state.call_store = call_store
    app.state.manager = ConnectionManager()
    app.state.signaling = SignalingRouter(
        presence,
        call_store,
        end_grace_seconds=config.CALL_END_GRACE_SECONDS,
        default_call_kind=config.DEFAULT_CALL_KIND,
    )
    app.state.reaper = CallReaper(
        call_store,
        interval_seconds=config.REAPER_INTERVAL_SECONDS,
        max_age=config.call_max_age,
        clock=clock,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(calls.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

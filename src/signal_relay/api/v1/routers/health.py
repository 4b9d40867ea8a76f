from __future__ import annotations

import time

from fastapi import APIRouter, Request

from signal_relay.api.deps import CallStoreDep, ManagerDep, PresenceDep
from signal_relay.api.v1.schemas.health import HealthResponse, PingResponse

router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=HealthResponse)
async def healthz(
    request: Request,
    manager: ManagerDep,
    presence: PresenceDep,
    calls: CallStoreDep,
) -> HealthResponse:
    return HealthResponse(
        connections=len(manager),
        identities=len(presence),
        active_calls=len(calls),
        timestamp=request.app.state.clock.now(),
    )


@router.get("/ping", response_model=PingResponse)
async def ping(request: Request) -> PingResponse:
    return PingResponse(uptime=round(time.monotonic() - request.app.state.started_at, 3))

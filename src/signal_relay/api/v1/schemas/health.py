from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    connections: int
    identities: int
    active_calls: int
    timestamp: datetime


class PingResponse(BaseModel):
    status: str = "alive"
    uptime: float

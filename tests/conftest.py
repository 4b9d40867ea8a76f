"""Shared test fixtures."""
from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from signal_relay.infrastructure.memory.call_store import CallStore
from signal_relay.infrastructure.memory.presence_registry import PresenceRegistry
from signal_relay.services.signaling_service import SignalingRouter

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
T0_MILLIS = "1767225600000"

GRACE_SECONDS = 0.05


@dataclass
class FakeClock:
    current: datetime = T0

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@dataclass(eq=False)
class FakeConnection:
    """In-memory stand-in for a WebSocket connection handle."""

    connection_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    identity: str | None = None
    role: str | None = None
    open: bool = True
    sent: list[dict[str, Any]] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return self.open

    async def send(self, payload: dict[str, Any]) -> bool:
        if not self.open:
            return False
        self.sent.append(payload)
        return True

    def last(self) -> dict[str, Any]:
        return self.sent[-1]


async def send_frame(router: SignalingRouter, conn: FakeConnection, **frame: Any) -> None:
    """Feed a JSON frame through the router; ``from_`` maps to ``from``."""
    if "from_" in frame:
        frame["from"] = frame.pop("from_")
    await router.handle_raw(conn, json.dumps(frame))


async def login(router: SignalingRouter, identity: str, role: str | None = None) -> FakeConnection:
    conn = FakeConnection()
    frame: dict[str, Any] = {"type": "LOGIN", "identity": identity}
    if role is not None:
        frame["role"] = role
    await send_frame(router, conn, **frame)
    conn.sent.clear()
    return conn


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def presence() -> PresenceRegistry:
    return PresenceRegistry()


@pytest.fixture
def calls(clock: FakeClock) -> CallStore:
    return CallStore(clock)


@pytest.fixture
def router(presence: PresenceRegistry, calls: CallStore) -> SignalingRouter:
    return SignalingRouter(
        presence,
        calls,
        end_grace_seconds=GRACE_SECONDS,
    )

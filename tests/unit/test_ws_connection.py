from __future__ import annotations

import json

import pytest
from starlette.websockets import WebSocketState

from signal_relay.infrastructure.ws.connection import ClientConnection
from signal_relay.infrastructure.ws.manager import ConnectionManager


class StubWebSocket:
    def __init__(self, *, fail: bool = False) -> None:
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED
        self.fail = fail
        self.accepted = False
        self.frames: list[str] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("socket gone")
        self.frames.append(data)


@pytest.mark.asyncio
async def test_send_encodes_json_frame():
    ws = StubWebSocket()
    conn = ClientConnection(websocket=ws)

    assert await conn.send({"type": "LOGIN_ACK", "identity": "doc1"}) is True
    assert json.loads(ws.frames[0]) == {"type": "LOGIN_ACK", "identity": "doc1"}


@pytest.mark.asyncio
async def test_send_failure_returns_false():
    conn = ClientConnection(websocket=StubWebSocket(fail=True))

    assert conn.is_open
    assert await conn.send({"type": "OFFER"}) is False


@pytest.mark.asyncio
async def test_send_on_closed_socket_is_skipped():
    ws = StubWebSocket()
    ws.client_state = WebSocketState.DISCONNECTED
    conn = ClientConnection(websocket=ws)

    assert conn.is_open is False
    assert await conn.send({"type": "OFFER"}) is False
    assert ws.frames == []


@pytest.mark.asyncio
async def test_manager_accepts_and_tracks_connections():
    manager = ConnectionManager()
    ws = StubWebSocket()

    conn = await manager.connect(ws)
    assert ws.accepted
    assert len(manager) == 1

    manager.disconnect(conn)
    manager.disconnect(conn)
    assert len(manager) == 0

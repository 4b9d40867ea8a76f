"""In-process WebSocket connection manager."""
from __future__ import annotations

import logging

from fastapi import WebSocket

from signal_relay.infrastructure.ws.connection import ClientConnection

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Accepts WebSocket connections and tracks the ones still open."""

    def __init__(self) -> None:
        self._connections: dict[str, ClientConnection] = {}

    async def connect(self, ws: WebSocket) -> ClientConnection:
        await ws.accept()
        conn = ClientConnection(websocket=ws)
        self._connections[conn.connection_id] = conn
        logger.debug("WS connected: %s (total=%d)", conn.connection_id, len(self._connections))
        return conn

    def disconnect(self, conn: ClientConnection) -> None:
        self._connections.pop(conn.connection_id, None)
        logger.debug("WS disconnected: %s (total=%d)", conn.connection_id, len(self._connections))

    def __len__(self) -> int:
        return len(self._connections)

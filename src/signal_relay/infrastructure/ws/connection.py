from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from signal_relay.infrastructure.ws.serializer import encode_frame

logger = logging.getLogger(__name__)


def _new_connection_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(eq=False, slots=True)
class ClientConnection:
    """Transport-owned handle for one WebSocket plus its login state."""

    websocket: WebSocket
    connection_id: str = field(default_factory=_new_connection_id)
    identity: str | None = None
    role: str | None = None

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send(self, payload: dict[str, Any]) -> bool:
        if not self.is_open:
            return False
        try:
            await self.websocket.send_text(encode_frame(payload))
        except Exception:
            logger.warning("Send to connection %s failed", self.connection_id, exc_info=True)
            return False
        return True

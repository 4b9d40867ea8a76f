from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from signal_relay.api.deps import ManagerDep, SignalingDep
from signal_relay.api.middleware.request_context import correlation_id_ctx
from signal_relay.infrastructure.ws.connection import ClientConnection
from signal_relay.services.signaling_service import SignalingRouter

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])


@router.websocket("/ws")
@router.websocket("/")
async def ws_signaling(
    websocket: WebSocket,
    manager: ManagerDep,
    signaling: SignalingDep,
) -> None:
    conn = await manager.connect(websocket)
    token = correlation_id_ctx.set(conn.connection_id)
    try:
        await _read_loop(conn, signaling)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %s", conn.connection_id)
    finally:
        signaling.handle_disconnect(conn)
        manager.disconnect(conn)
        correlation_id_ctx.reset(token)


async def _read_loop(conn: ClientConnection, signaling: SignalingRouter) -> None:
    while True:
        message = await conn.websocket.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000))

        raw = message.get("text")
        if raw is None:
            raw = message.get("bytes")
        if raw is None:
            continue

        try:
            await signaling.handle_raw(conn, raw)
        except Exception:
            logger.exception("Failed to handle frame from %s", conn.connection_id)

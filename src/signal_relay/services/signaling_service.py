"""Signaling router: applies inbound frames to presence/call state and relays them."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from signal_relay.application.ports.transport import Connection
from signal_relay.application.repositories.call import CallRepository
from signal_relay.application.repositories.presence import PresenceDirectory
from signal_relay.domain.entities.call import Call
from signal_relay.domain.value_objects.enums import MessageKind
from signal_relay.infrastructure.ws.protocol import (
    AnswerMessage,
    DeclineCallMessage,
    EndCallMessage,
    IceMessage,
    LoginMessage,
    OfferMessage,
    ReconnectMessage,
    WsInbound,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Connection, Any, dict[str, Any]], Awaitable[None]]

NOT_FOUND_REASON = "not found"


class SignalingRouter:
    """Dispatches one decoded frame at a time.

    Relays are best-effort and at-most-once: a frame addressed to an
    identity that is not present, or whose connection is closed, is logged
    and dropped.
    """

    def __init__(
        self,
        presence: PresenceDirectory,
        calls: CallRepository,
        *,
        end_grace_seconds: float = 5.0,
        default_call_kind: str = "video",
    ) -> None:
        self._presence = presence
        self._calls = calls
        self._end_grace_seconds = end_grace_seconds
        self._default_call_kind = default_call_kind
        self._purges: set[asyncio.Task[None]] = set()
        self._handlers: dict[str, tuple[type[WsInbound], Handler]] = {
            MessageKind.LOGIN: (LoginMessage, self._on_login),
            MessageKind.OFFER: (OfferMessage, self._on_offer),
            MessageKind.ANSWER: (AnswerMessage, self._on_answer),
            MessageKind.ICE: (IceMessage, self._on_ice),
            MessageKind.RECONNECT: (ReconnectMessage, self._on_reconnect),
            MessageKind.END_CALL: (EndCallMessage, self._on_end_call),
            MessageKind.DECLINE_CALL: (DeclineCallMessage, self._on_decline_call),
        }

    @property
    def pending_purges(self) -> int:
        return len(self._purges)

    async def handle_raw(self, conn: Connection, raw: str | bytes) -> None:
        """Decode one frame and dispatch it. Malformed frames are dropped."""
        try:
            envelope = WsInbound.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Dropping malformed frame from %s: %d error(s)",
                conn.connection_id, exc.error_count(),
            )
            return
        await self.dispatch(conn, envelope)

    async def dispatch(self, conn: Connection, envelope: WsInbound) -> None:
        entry = self._handlers.get(envelope.type)
        if entry is None:
            await self._relay_unknown(conn, envelope)
            return

        model, handler = entry
        # Relays forward the frame as received; the typed model is only read.
        frame = envelope.relay_payload()
        try:
            msg = model.model_validate(frame)
        except ValidationError as exc:
            logger.warning(
                "Dropping malformed %s from %s: %d error(s)",
                envelope.type, conn.connection_id, exc.error_count(),
            )
            return
        await handler(conn, msg, frame)

    def handle_disconnect(self, conn: Connection) -> None:
        """Release the connection's identity. Calls are left in place for reconnects."""
        if conn.identity is None:
            return
        if self._presence.unbind(conn.identity, conn):
            logger.info("User disconnected: %s", conn.identity)
        else:
            logger.debug("Stale connection %s closed for %s", conn.connection_id, conn.identity)

    async def aclose(self) -> None:
        """Cancel grace-delay purges that have not fired yet."""
        tasks = list(self._purges)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._purges.clear()

    # -- handlers ---------------------------------------------------------

    async def _on_login(self, conn: Connection, msg: LoginMessage, frame: dict[str, Any]) -> None:
        if conn.identity is not None and conn.identity != msg.identity:
            self._presence.unbind(conn.identity, conn)
        conn.identity = msg.identity
        conn.role = msg.role
        self._presence.bind(msg.identity, conn)
        logger.info("User connected: %s (role=%s)", msg.identity, msg.role)

        ack: dict[str, Any] = {"type": MessageKind.LOGIN_ACK.value, "identity": msg.identity}
        if msg.role is not None:
            ack["role"] = msg.role
        await conn.send(ack)

    async def _on_offer(self, conn: Connection, msg: OfferMessage, frame: dict[str, Any]) -> None:
        kind = msg.kind or self._default_call_kind
        caller = msg.from_ or conn.identity
        call = self._calls.create(msg.offer, caller, msg.to, kind, msg.call_id or None)

        payload = dict(frame)
        if not msg.call_id:
            payload["callId"] = call.call_id
        payload["kind"] = kind
        if caller is not None:
            payload.setdefault("from", caller)
        await self._send_to(msg.to, payload)

    async def _on_answer(self, conn: Connection, msg: AnswerMessage, frame: dict[str, Any]) -> None:
        if msg.call_id is not None:
            self._calls.apply_answer(msg.call_id, msg.answer)
        await self._send_to(msg.to, frame)

    async def _on_ice(self, conn: Connection, msg: IceMessage, frame: dict[str, Any]) -> None:
        if msg.call_id is not None and msg.candidate is not None:
            sender = msg.from_ or conn.identity
            self._calls.append_candidate(msg.call_id, sender, msg.candidate)
        await self._send_to(msg.to, frame)

    async def _on_reconnect(self, conn: Connection, msg: ReconnectMessage, frame: dict[str, Any]) -> None:
        call = self._calls.get(msg.call_id) if msg.call_id is not None else None
        if call is None:
            logger.info("Reconnect for unknown call %s from %s", msg.call_id, conn.connection_id)
            await conn.send({
                "type": MessageKind.RECONNECT_FAILED.value,
                "callId": msg.call_id,
                "reason": NOT_FOUND_REASON,
            })
            return

        requester = msg.user_id or conn.identity
        logger.info("Reconnect to call %s by %s (status=%s)", call.call_id, requester, call.status)
        await conn.send(self._snapshot(call, requester))

    async def _on_end_call(self, conn: Connection, msg: EndCallMessage, frame: dict[str, Any]) -> None:
        sender = msg.from_ or conn.identity
        call = self._calls.get(msg.call_id) if msg.call_id is not None else None
        if call is None:
            await self._send_to(msg.to, frame)
            return
        if call.status.is_terminal:
            logger.debug("Call %s already %s; ignoring END_CALL", call.call_id, call.status)
            return

        self._calls.mark_ended(call.call_id)
        self._schedule_purge(call)
        await self._send_to(call.peer_of(sender), frame)

    async def _on_decline_call(self, conn: Connection, msg: DeclineCallMessage, frame: dict[str, Any]) -> None:
        if msg.call_id is not None:
            self._calls.mark_declined(msg.call_id)
        await self._send_to(msg.to, frame)

    async def _relay_unknown(self, conn: Connection, envelope: WsInbound) -> None:
        if envelope.to is None:
            logger.debug("Ignoring %s frame without target from %s", envelope.type, conn.connection_id)
            return
        await self._send_to(envelope.to, envelope.relay_payload())

    # -- helpers ----------------------------------------------------------

    async def _send_to(self, identity: str | None, payload: dict[str, Any]) -> bool:
        if identity is None:
            logger.debug("No target for %s; dropping", payload.get("type"))
            return False
        target = self._presence.lookup(identity)
        if target is None or not target.is_open:
            logger.warning("Target user %s not found; dropping %s", identity, payload.get("type"))
            return False
        delivered = await target.send(payload)
        if delivered:
            logger.debug("Relayed %s to %s", payload.get("type"), identity)
        return delivered

    def _snapshot(self, call: Call, requester: str | None) -> dict[str, Any]:
        return {
            "type": MessageKind.RECONNECT_STATE.value,
            "callId": call.call_id,
            "offer": call.offer,
            "answer": call.answer,
            "status": call.status.value,
            "kind": call.kind,
            "candidates": call.candidates_for_peer_of(requester),
        }

    def _schedule_purge(self, call: Call) -> None:
        task = asyncio.create_task(
            self._purge_after_grace(call), name=f"call-purge-{call.call_id}",
        )
        self._purges.add(task)
        task.add_done_callback(self._purges.discard)

    async def _purge_after_grace(self, call: Call) -> None:
        await asyncio.sleep(self._end_grace_seconds)
        if self._calls.remove(call.call_id, expected=call):
            logger.info("Call %s purged after grace delay", call.call_id)

"""In-process call store and its state transitions."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from signal_relay.application.ports.clock import Clock, SystemClock
from signal_relay.domain.entities.call import Call
from signal_relay.domain.value_objects.enums import CallStatus

logger = logging.getLogger(__name__)


class CallStore:
    """Call records keyed by call id.

    Mutators return the affected call, or ``None`` when the id is unknown;
    a missing call is never an error here. Every method is synchronous, so
    a read-then-mutate on one call cannot interleave with another handler
    on the same event loop.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._calls: dict[str, Call] = {}

    def create(
        self,
        offer: Any,
        caller: str | None,
        callee: str | None,
        kind: str,
        call_id: str | None = None,
    ) -> Call:
        now = self._clock.now()
        if call_id is None:
            call_id = str(int(now.timestamp() * 1000))
        elif call_id in self._calls:
            # Reusing an id replaces the old record wholesale.
            logger.warning("Call %s already exists; replacing it with a new offer", call_id)
        call = Call(
            call_id=call_id,
            caller=caller,
            callee=callee,
            kind=kind,
            offer=offer,
            created_at=now,
        )
        self._calls[call_id] = call
        logger.info("Call %s created: %s -> %s (%s)", call_id, caller, callee, kind)
        return call

    def get(self, call_id: str) -> Call | None:
        return self._calls.get(call_id)

    def apply_answer(self, call_id: str, answer: Any) -> Call | None:
        call = self._calls.get(call_id)
        if call is None:
            return None
        if call.status.is_terminal:
            logger.info("Ignoring answer for %s call %s", call.status, call_id)
            return call
        # A repeated answer overwrites the stored one.
        call.answer = answer
        call.status = CallStatus.CONNECTED
        call.answered_at = self._clock.now()
        return call

    def append_candidate(self, call_id: str, sender: str | None, candidate: Any) -> Call | None:
        call = self._calls.get(call_id)
        if call is None:
            return None
        if call.status.is_terminal:
            logger.debug("Dropping candidate for %s call %s", call.status, call_id)
            return call
        if call.is_caller(sender):
            call.caller_candidates.append(candidate)
        else:
            call.callee_candidates.append(candidate)
        return call

    def mark_ended(self, call_id: str) -> Call | None:
        call = self._calls.get(call_id)
        if call is None:
            return None
        if call.status.is_terminal:
            return call
        call.status = CallStatus.ENDED
        call.ended_at = self._clock.now()
        logger.info("Call %s ended", call_id)
        return call

    def mark_declined(self, call_id: str) -> Call | None:
        """Decline and drop the call in one step."""
        call = self._calls.pop(call_id, None)
        if call is None:
            return None
        if not call.status.is_terminal:
            call.status = CallStatus.DECLINED
            call.ended_at = self._clock.now()
        logger.info("Call %s declined", call_id)
        return call

    def remove(self, call_id: str, expected: Call | None = None) -> bool:
        current = self._calls.get(call_id)
        if current is None:
            return False
        if expected is not None and current is not expected:
            return False
        del self._calls[call_id]
        return True

    def sweep_expired(self, max_age: timedelta, now: datetime) -> list[str]:
        """Remove every call created more than ``max_age`` before ``now``."""
        expired = [
            call_id for call_id, call in self._calls.items()
            if now - call.created_at > max_age
        ]
        for call_id in expired:
            del self._calls[call_id]
        return expired

    def __len__(self) -> int:
        return len(self._calls)

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from signal_relay.domain.value_objects.enums import CallStatus


@dataclass(slots=True)
class Call:
    """One negotiation session between a caller and a callee.

    ``caller``, ``callee``, ``kind`` and ``offer`` never change once the
    record exists. Candidate lists are append-only and keep arrival order.
    """

    call_id: str
    caller: str | None
    callee: str | None
    kind: str
    offer: Any
    created_at: datetime
    status: CallStatus = CallStatus.PENDING
    answer: Any = None
    caller_candidates: list[Any] = field(default_factory=list)
    callee_candidates: list[Any] = field(default_factory=list)
    answered_at: datetime | None = None
    ended_at: datetime | None = None

    def is_caller(self, identity: str | None) -> bool:
        return identity is not None and identity == self.caller

    def peer_of(self, identity: str | None) -> str | None:
        """The participant on the other side of ``identity``."""
        return self.callee if self.is_caller(identity) else self.caller

    def candidates_for_peer_of(self, identity: str | None) -> list[Any]:
        """Candidates buffered by the other side, as a reconnecting party needs them."""
        source = self.callee_candidates if self.is_caller(identity) else self.caller_candidates
        return list(source)

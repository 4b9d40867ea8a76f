from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol

from signal_relay.domain.entities.call import Call


class CallRepository(Protocol):
    def create(
        self,
        offer: Any,
        caller: str | None,
        callee: str | None,
        kind: str,
        call_id: str | None = None,
    ) -> Call:
        """Store a fresh pending call, replacing any record under ``call_id``.

        Without a ``call_id`` one is derived from the current time in milliseconds.
        """
        ...

    def get(self, call_id: str) -> Call | None: ...

    def apply_answer(self, call_id: str, answer: Any) -> Call | None: ...

    def append_candidate(self, call_id: str, sender: str | None, candidate: Any) -> Call | None: ...

    def mark_ended(self, call_id: str) -> Call | None: ...

    def mark_declined(self, call_id: str) -> Call | None: ...

    def remove(self, call_id: str, expected: Call | None = None) -> bool: ...

    def sweep_expired(self, max_age: timedelta, now: datetime) -> list[str]: ...

    def __len__(self) -> int: ...

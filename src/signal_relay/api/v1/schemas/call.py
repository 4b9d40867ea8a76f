from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from signal_relay.domain.value_objects.enums import CallStatus


class CallResponse(BaseModel):
    call_id: str
    caller: str | None
    callee: str | None
    status: CallStatus
    kind: str
    offer: Any
    answer: Any
    caller_candidates: list[Any]
    callee_candidates: list[Any]
    created_at: datetime
    answered_at: datetime | None
    ended_at: datetime | None

    model_config = {"from_attributes": True}

from __future__ import annotations

from fastapi import APIRouter

from signal_relay.api.deps import CallStoreDep
from signal_relay.api.v1.schemas.call import CallResponse
from signal_relay.application.exceptions import NotFoundError

router = APIRouter(prefix="/api/v1/calls", tags=["calls"])


@router.get("/{call_id}", response_model=CallResponse)
async def get_call(call_id: str, calls: CallStoreDep) -> CallResponse:
    call = calls.get(call_id)
    if call is None:
        raise NotFoundError("Call not found")
    return CallResponse.model_validate(call, from_attributes=True)

"""WebSocket signaling message models.

Every inbound model keeps unknown fields, so a relayed frame reaches the
peer with everything the sender put in it. Numeric ids (a client using
``Date.now()`` as its call id) are read as strings.
"""
from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class WsInbound(BaseModel):
    """Client → Server envelope: a ``type`` tag plus an optional target."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    type: str
    to: str | None = None

    def relay_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class LoginMessage(WsInbound):
    identity: str = Field(validation_alias=AliasChoices("identity", "userId"))
    role: str | None = None


class OfferMessage(WsInbound):
    from_: str | None = Field(default=None, alias="from")
    call_id: str | None = Field(default=None, alias="callId")
    offer: Any
    kind: str | None = None


class AnswerMessage(WsInbound):
    call_id: str | None = Field(default=None, alias="callId")
    answer: Any = None


class IceMessage(WsInbound):
    call_id: str | None = Field(default=None, alias="callId")
    from_: str | None = Field(default=None, alias="from")
    candidate: Any = None


class ReconnectMessage(WsInbound):
    user_id: str | None = Field(default=None, alias="userId")
    call_id: str | None = Field(default=None, alias="callId")


class EndCallMessage(WsInbound):
    call_id: str | None = Field(default=None, alias="callId")
    from_: str | None = Field(default=None, alias="from")


class DeclineCallMessage(WsInbound):
    call_id: str | None = Field(default=None, alias="callId")

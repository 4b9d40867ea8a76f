from __future__ import annotations

from enum import StrEnum


class CallStatus(StrEnum):
    PENDING = "pending"
    CONNECTED = "connected"
    ENDED = "ended"
    DECLINED = "declined"

    @property
    def is_terminal(self) -> bool:
        return self in (CallStatus.ENDED, CallStatus.DECLINED)


class MessageKind(StrEnum):
    # client -> server
    LOGIN = "LOGIN"
    OFFER = "OFFER"
    ANSWER = "ANSWER"
    ICE = "ICE"
    RECONNECT = "RECONNECT"
    END_CALL = "END_CALL"
    DECLINE_CALL = "DECLINE_CALL"

    # server -> client
    LOGIN_ACK = "LOGIN_ACK"
    RECONNECT_STATE = "RECONNECT_STATE"
    RECONNECT_FAILED = "RECONNECT_FAILED"

"""In-process identity -> connection registry."""
from __future__ import annotations

import logging

from signal_relay.application.ports.transport import Connection

logger = logging.getLogger(__name__)


class PresenceRegistry:
    """Maps each logged-in identity to its most recent connection.

    All methods are synchronous and run on the event loop thread, so each
    bind/unbind completes without interleaving with another.
    """

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}

    def bind(self, identity: str, connection: Connection) -> None:
        previous = self._connections.get(identity)
        self._connections[identity] = connection
        if previous is not None and previous is not connection:
            logger.info(
                "Identity %s rebound: %s -> %s",
                identity, previous.connection_id, connection.connection_id,
            )

    def lookup(self, identity: str) -> Connection | None:
        return self._connections.get(identity)

    def unbind(self, identity: str, connection: Connection) -> bool:
        if self._connections.get(identity) is not connection:
            return False
        del self._connections[identity]
        return True

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, identity: object) -> bool:
        return identity in self._connections

from __future__ import annotations

from typing import Protocol

from signal_relay.application.ports.transport import Connection


class PresenceDirectory(Protocol):
    def bind(self, identity: str, connection: Connection) -> None: ...

    def lookup(self, identity: str) -> Connection | None: ...

    def unbind(self, identity: str, connection: Connection) -> bool:
        """Drop ``identity`` only while it still points at ``connection``."""
        ...

    def __len__(self) -> int: ...

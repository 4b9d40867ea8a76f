from __future__ import annotations

from typing import Any, Protocol


class Connection(Protocol):
    """A live duplex channel to one client, as seen by the router.

    ``identity`` and ``role`` stay ``None`` until the client logs in.
    """

    connection_id: str
    identity: str | None
    role: str | None

    @property
    def is_open(self) -> bool: ...

    async def send(self, payload: dict[str, Any]) -> bool:
        """Deliver one frame. Returns False when the channel rejected it."""
        ...

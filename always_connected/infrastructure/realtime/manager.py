"""Registry of live websocket connections grouped by participant."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from always_connected.domain.entities import Participant

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Anything able to push a JSON frame to a client."""

    async def send_json(self, data: Any) -> None: ...


class ConnectionRegistry:
    """Track the live connections of each participant.

    A participant may hold several connections at once (one per device). The
    mapping never keeps a participant with an empty set. Mutating methods do
    not await, so each one is atomic with respect to the event loop.
    """

    def __init__(self) -> None:
        self._connections: dict[Participant, set[Connection]] = {}

    def register(self, user: Participant, connection: Connection) -> None:
        """Add ``connection`` to the pool for ``user``."""

        self._connections.setdefault(user, set()).add(connection)
        logger.info(
            "Connection registered for %s (%s active)",
            user.value,
            len(self._connections[user]),
        )

    def unregister(self, user: Participant, connection: Connection) -> None:
        """Remove ``connection`` from the pool for ``user``."""

        connections = self._connections.get(user)
        if connections is None:
            return
        connections.discard(connection)
        if not connections:
            self._connections.pop(user, None)
        logger.info(
            "Connection unregistered for %s (%s active)",
            user.value,
            len(self._connections.get(user, ())),
        )

    def active_connections_for(self, user: Participant) -> frozenset[Connection]:
        """Return a snapshot of the live connections for ``user``."""

        return frozenset(self._connections.get(user, ()))

    def connected_users(self) -> frozenset[Participant]:
        return frozenset(self._connections)

    def __contains__(self, user: object) -> bool:
        return user in self._connections

    async def send_to_user(self, user: Participant, message: dict[str, Any]) -> int:
        """Send ``message`` to every active connection for ``user``.

        Connections are written to concurrently, so a stalled socket does not
        hold back the others. Connections that fail to receive the frame are
        unregistered. Returns the number of connections the frame reached.
        """

        connections = list(self.active_connections_for(user))
        results = await asyncio.gather(
            *(connection.send_json(message) for connection in connections),
            return_exceptions=True,
        )

        delivered = 0
        for connection, result in zip(connections, results):
            if isinstance(result, BaseException):
                logger.warning("Dropping connection for %s after send failure: %s", user.value, result)
                self.unregister(user, connection)
            else:
                delivered += 1
        return delivered


__all__ = ["Connection", "ConnectionRegistry"]

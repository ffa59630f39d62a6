"""Use case returning the conversation between the two participants."""

from __future__ import annotations

from collections.abc import Sequence

from always_connected.domain.entities import Message
from always_connected.infrastructure.persistence import PersistenceGateway

from .validators import ensure_pair

DEFAULT_HISTORY_LIMIT = 100


async def list_history(
    persistence: PersistenceGateway,
    user1: object,
    user2: object,
    *,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> Sequence[Message]:
    """Return up to ``limit`` most recent messages of the pair, oldest first.

    Raises ``InvalidParticipantError`` when either identity is unknown.
    """

    first, second = ensure_pair(user1, user2)
    return await persistence.list_history(first, second, limit=limit)


__all__ = ["DEFAULT_HISTORY_LIMIT", "list_history"]

"""Async facade over the SQLAlchemy repositories.

Repository calls are synchronous, so every operation runs in a worker thread
with its own session. The event loop keeps serving other connections while a
query is in flight.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Sequence
from typing import TypeVar

from anyio import to_thread
from sqlalchemy.orm import Session

from always_connected.domain.entities import Message, Participant, PushSubscription, User
from always_connected.infrastructure.repositories import MessageRepository, UserRepository

T = TypeVar("T")


class PersistenceGateway:
    """Store and query messages, users and push subscriptions."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    async def insert_message(self, message: Message) -> Message:
        return await self._run(lambda session: MessageRepository(session).create(message))

    async def list_history(
        self, user1: Participant, user2: Participant, *, limit: int | None = 100
    ) -> Sequence[Message]:
        return await self._run(
            lambda session: MessageRepository(session).list_between(
                user1, user2, limit=limit
            )
        )

    async def find_or_create_user(self, user_id: Participant) -> User:
        return await self._run(lambda session: UserRepository(session).find_or_create(user_id))

    async def list_subscriptions(self, user_id: Participant) -> Sequence[PushSubscription]:
        return await self._run(
            lambda session: UserRepository(session).list_subscriptions(user_id)
        )

    async def add_subscription(self, subscription: PushSubscription) -> bool:
        return await self._run(
            lambda session: UserRepository(session).add_subscription(subscription)
        )

    async def remove_subscription(self, user_id: Participant, endpoint: str) -> bool:
        return await self._run(
            lambda session: UserRepository(session).remove_subscription(user_id, endpoint)
        )

    async def _run(self, operation: Callable[[Session], T]) -> T:
        return await to_thread.run_sync(functools.partial(self._call, operation))

    def _call(self, operation: Callable[[Session], T]) -> T:
        session = self._session_factory()
        try:
            return operation(session)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


__all__ = ["PersistenceGateway"]

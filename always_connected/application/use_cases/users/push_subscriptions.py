"""Use cases for registering and removing browser push subscriptions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from always_connected.application.use_cases.messages.validators import ensure_participant
from always_connected.domain.entities import PushSubscription
from always_connected.infrastructure.repositories import UserRepository


def subscribe_push(
    session: Session,
    *,
    user_id: str,
    endpoint: str,
    p256dh: str,
    auth: str,
    expiration_time: datetime | None = None,
) -> bool:
    """Store a subscription and return ``True`` when it was not known before."""

    participant = ensure_participant(user_id, role="user id")
    subscription = PushSubscription(
        endpoint=endpoint,
        p256dh=p256dh,
        auth=auth,
        user_id=participant,
        expiration_time=expiration_time,
    )
    return UserRepository(session).add_subscription(subscription)


def unsubscribe_push(session: Session, *, user_id: str, endpoint: str) -> bool:
    """Remove ``endpoint`` for ``user_id``; ``False`` when it was not registered."""

    participant = ensure_participant(user_id, role="user id")
    return UserRepository(session).remove_subscription(participant, endpoint)


__all__ = ["subscribe_push", "unsubscribe_push"]

"""Persistence layer for user data and their push subscriptions."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from always_connected.domain.entities import Participant, PushSubscription, User
from always_connected.infrastructure.models import PushSubscriptionModel, UserModel
from always_connected.utils import ensure_naive_utc, ensure_utc


class UserRepository:
    """Provide lookup and subscription bookkeeping for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: Participant) -> User | None:
        model = self.session.get(UserModel, user_id.value)
        return self._to_entity(model) if model else None

    def find_or_create(self, user_id: Participant) -> User:
        """Return the record for ``user_id``, creating it on first use."""

        model = self.session.get(UserModel, user_id.value)
        if model is None:
            model = UserModel(user_id=user_id.value)
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def list_subscriptions(self, user_id: Participant) -> Sequence[PushSubscription]:
        query = (
            self.session.query(PushSubscriptionModel)
            .filter(PushSubscriptionModel.user_id == user_id.value)
            .order_by(PushSubscriptionModel.id)
        )
        return [self._subscription_to_entity(model) for model in query.all()]

    def add_subscription(self, subscription: PushSubscription) -> bool:
        """Store ``subscription`` and return ``True`` when a row was created.

        Re-subscribing an endpoint already held by the same user is a no-op.
        An endpoint held by the other participant is moved to the new owner.
        """

        self.find_or_create(subscription.user_id)
        existing = (
            self.session.query(PushSubscriptionModel)
            .filter(PushSubscriptionModel.endpoint == subscription.endpoint)
            .one_or_none()
        )
        if existing is not None and existing.user_id == subscription.user_id.value:
            return False

        model = existing or PushSubscriptionModel()
        model.user_id = subscription.user_id.value
        model.endpoint = subscription.endpoint
        model.p256dh = subscription.p256dh
        model.auth = subscription.auth
        model.expiration_time = ensure_naive_utc(subscription.expiration_time)
        self.session.add(model)
        self.session.commit()
        self._expire_cached_collections()
        return existing is None

    def remove_subscription(self, user_id: Participant, endpoint: str) -> bool:
        """Delete ``endpoint`` for ``user_id`` and return ``True`` when it existed."""

        deleted = (
            self.session.query(PushSubscriptionModel)
            .filter(
                PushSubscriptionModel.user_id == user_id.value,
                PushSubscriptionModel.endpoint == endpoint,
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        self._expire_cached_collections()
        return bool(deleted)

    def _expire_cached_collections(self) -> None:
        # Rows are linked by foreign key, so loaded ``push_subscriptions`` collections go stale.
        self.session.expire_all()

    @classmethod
    def _to_entity(cls, model: UserModel) -> User:
        return User(
            user_id=Participant(model.user_id),
            created_at=ensure_utc(model.created_at),
            push_subscriptions=[
                cls._subscription_to_entity(sub) for sub in model.push_subscriptions
            ],
        )

    @staticmethod
    def _subscription_to_entity(model: PushSubscriptionModel) -> PushSubscription:
        return PushSubscription(
            endpoint=model.endpoint,
            p256dh=model.p256dh,
            auth=model.auth,
            user_id=Participant(model.user_id),
            expiration_time=ensure_utc(model.expiration_time),
        )


__all__ = ["UserRepository"]

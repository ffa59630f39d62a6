"""Persistence helpers for message entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from always_connected.domain.entities import Message, MessageKind, Participant
from always_connected.infrastructure.models import MessageModel
from always_connected.utils import ensure_naive_utc, ensure_utc


class MessageRepository:
    """Append and query :class:`Message` objects.

    There is intentionally no update or delete operation.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, message: Message) -> Message:
        model = MessageModel()
        self._apply_entity_to_model(model, message)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get(self, message_id: str) -> Message | None:
        model = self.session.get(MessageModel, message_id)
        return self._to_entity(model) if model else None

    def list_between(
        self,
        user1: Participant,
        user2: Participant,
        *,
        limit: int | None = 100,
    ) -> Sequence[Message]:
        """Return messages exchanged by ``user1`` and ``user2``, oldest first.

        When ``limit`` is set only the most recent ``limit`` messages are
        returned.
        """

        query = self.session.query(MessageModel).filter(
            or_(
                and_(
                    MessageModel.sender == user1.value,
                    MessageModel.recipient == user2.value,
                ),
                and_(
                    MessageModel.sender == user2.value,
                    MessageModel.recipient == user1.value,
                ),
            )
        )
        query = query.order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
        if limit is not None:
            query = query.limit(limit)
        models = list(reversed(query.all()))
        return [self._to_entity(model) for model in models]

    @staticmethod
    def _apply_entity_to_model(model: MessageModel, message: Message) -> None:
        model.id = message.id
        model.sender = message.sender.value
        model.recipient = message.recipient.value
        model.kind = message.kind.value
        model.original_text = message.original_text
        model.enrichment_note = message.enrichment_note
        model.custom_text = message.custom_text
        model.created_at = ensure_naive_utc(message.created_at)

    @staticmethod
    def _to_entity(model: MessageModel) -> Message:
        return Message(
            id=model.id,
            sender=Participant(model.sender),
            recipient=Participant(model.recipient),
            kind=MessageKind(model.kind),
            created_at=ensure_utc(model.created_at),
            original_text=model.original_text,
            enrichment_note=model.enrichment_note,
            custom_text=model.custom_text,
        )


__all__ = ["MessageRepository"]

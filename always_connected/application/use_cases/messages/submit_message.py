"""Use case turning a submitted message into its canonical stored form."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError

from always_connected.domain.entities import Message, MessageKind, Participant
from always_connected.infrastructure.openai_client import (
    Enrichment,
    NoteEnrichmentService,
    generic_fallback_note,
)
from always_connected.infrastructure.persistence import PersistenceGateway
from always_connected.infrastructure.realtime import ConnectionRegistry
from always_connected.infrastructure.webpush import WebPushDeliveryService
from always_connected.utils import now_utc

from .errors import PersistenceFailureError
from .validators import validate_submission

logger = logging.getLogger(__name__)

NOTIFICATION_BODY_LIMIT = 100
NOTIFICATION_ICON = "/icon-192x192.png"
_ELLIPSIS = "..."


def truncate(text: str, limit: int = NOTIFICATION_BODY_LIMIT) -> str:
    """Return ``text`` cut to ``limit`` characters, ending with an ellipsis when cut."""

    if len(text) <= limit:
        return text
    return text[: limit - len(_ELLIPSIS)] + _ELLIPSIS


def build_notification(message: Message, enrichment: Enrichment | None = None) -> dict[str, Any]:
    """Return the push payload announcing ``message`` to its recipient."""

    sender = message.sender.value
    if message.kind is MessageKind.PREDEFINED:
        if enrichment is not None and enrichment.generated:
            body = f'{message.original_text} - {sender} adds: "{enrichment.note}"'
        else:
            body = f"{message.original_text} (from {sender})"
    elif message.kind is MessageKind.CUSTOM:
        body = f'{sender} says: "{message.custom_text}"'
    else:
        raise ValueError(f"Unhandled message kind {message.kind!r}")

    return {
        "title": f"New message from {sender}",
        "body": truncate(body),
        "icon": NOTIFICATION_ICON,
        "tag": f"new-message-{sender}-{message.recipient.value}",
        "data": {
            "url": "/",
            "sender": sender,
            "message_id": message.id,
        },
    }


def _new_message_id() -> str:
    return uuid4().hex


class MessagePipeline:
    """Validate, enrich, persist and announce messages.

    :meth:`submit` returns as soon as the message is stored. Push delivery
    runs in a background task that the caller never awaits; its failures are
    logged and never reach the sender.
    """

    def __init__(
        self,
        *,
        persistence: PersistenceGateway,
        enrichment: NoteEnrichmentService,
        delivery: WebPushDeliveryService,
        registry: ConnectionRegistry,
        clock: Callable[[], datetime] = now_utc,
        id_factory: Callable[[], str] = _new_message_id,
    ) -> None:
        self._persistence = persistence
        self._enrichment = enrichment
        self._delivery = delivery
        self._registry = registry
        self._clock = clock
        self._id_factory = id_factory
        self._deliveries: set[asyncio.Task[None]] = set()

    @property
    def pending_deliveries(self) -> int:
        return len(self._deliveries)

    async def submit(
        self, sender: object, recipient: object, kind: object, payload: object
    ) -> Message:
        """Store a new message and return its canonical representation."""

        submission = validate_submission(sender, recipient, kind, payload)

        enrichment: Enrichment | None = None
        if submission.kind is MessageKind.PREDEFINED:
            enrichment = await self._enrich(submission.text, submission.sender)
            message = Message(
                id=self._id_factory(),
                sender=submission.sender,
                recipient=submission.recipient,
                kind=submission.kind,
                created_at=self._clock(),
                original_text=submission.text,
                enrichment_note=enrichment.note,
            )
        else:
            message = Message(
                id=self._id_factory(),
                sender=submission.sender,
                recipient=submission.recipient,
                kind=submission.kind,
                created_at=self._clock(),
                custom_text=submission.text,
            )

        try:
            saved = await self._persistence.insert_message(message)
        except SQLAlchemyError as exc:
            logger.exception("Error saving message from %s to DB", submission.sender.value)
            raise PersistenceFailureError("Failed to save message to database.") from exc
        logger.info("Message %s saved (%s -> %s)", saved.id, saved.sender.value, saved.recipient.value)

        notification = build_notification(saved, enrichment)
        live = len(self._registry.active_connections_for(saved.recipient))
        if live:
            logger.debug("%s has %s live connection(s)", saved.recipient.value, live)
        else:
            logger.debug("%s is not connected; relying on push", saved.recipient.value)
        self._spawn_delivery(saved, notification)
        return saved

    async def drain(self) -> None:
        """Wait for every outstanding delivery task to finish."""

        while True:
            pending = [task for task in self._deliveries if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def _enrich(self, phrase: str, sender: Participant) -> Enrichment:
        try:
            return await self._enrichment.enrich(phrase, sender)
        except Exception:
            logger.exception("Note generation raised unexpectedly; using fallback note")
            return Enrichment(generic_fallback_note(sender), generated=False)

    def _spawn_delivery(self, message: Message, notification: dict[str, Any]) -> None:
        task = asyncio.create_task(
            self._deliver(message.recipient, notification),
            name=f"push-{message.id}",
        )
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def _deliver(self, recipient: Participant, notification: dict[str, Any]) -> None:
        try:
            report = await self._delivery.send(recipient, notification)
        except Exception:
            logger.exception("Error sending push notification to %s", recipient.value)
            return
        logger.debug("Push attempt to %s finished: %s", recipient.value, report)


__all__ = [
    "MessagePipeline",
    "NOTIFICATION_BODY_LIMIT",
    "build_notification",
    "truncate",
]

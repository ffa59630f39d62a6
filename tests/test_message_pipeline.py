"""Tests for validation, enrichment, storage and push scheduling of messages."""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from always_connected.application.use_cases.messages import (
    EmptyPayloadError,
    InvalidParticipantError,
    MessagePipeline,
    PersistenceFailureError,
    SelfMessageError,
    UnknownKindError,
    build_notification,
    truncate,
)
from always_connected.domain.entities import Message, MessageKind, Participant
from always_connected.infrastructure.openai_client import Enrichment
from always_connected.infrastructure.realtime import ConnectionRegistry
from always_connected.infrastructure.webpush import DeliveryReport
from conftest import FakeConnection, FakeDelivery, FakeEnrichment, SequentialIds, StepClock


class FailingPersistence:
    async def insert_message(self, message):
        raise OperationalError("INSERT INTO message", {}, Exception("disk I/O error"))


class ExplodingEnrichment:
    async def enrich(self, phrase, sender):
        raise RuntimeError("boom")


class GatedDelivery:
    """Hold every push until ``release`` is set."""

    def __init__(self):
        self.release = asyncio.Event()
        self.sent = []

    async def send(self, user_id, payload):
        await self.release.wait()
        self.sent.append((user_id, payload))
        return DeliveryReport(user_id=user_id, attempted=1, delivered=1)


def _pipeline(persistence, enrichment, delivery, registry=None):
    return MessagePipeline(
        persistence=persistence,
        enrichment=enrichment,
        delivery=delivery,
        registry=registry or ConnectionRegistry(),
        clock=StepClock(),
        id_factory=SequentialIds(),
    )


@pytest.mark.asyncio
async def test_predefined_message_is_enriched_and_stored(persistence, fake_enrichment, fake_delivery):
    pipeline = _pipeline(persistence, fake_enrichment, fake_delivery)

    message = await pipeline.submit("Shivam", "Arya", "predefined", "  Miss you ")
    await pipeline.drain()

    assert message.kind is MessageKind.PREDEFINED
    assert message.original_text == "Miss you"
    assert message.enrichment_note == "Always thinking of you."
    assert message.custom_text is None
    assert message.display_text == "Miss you - Always thinking of you."
    assert fake_enrichment.calls == [("Miss you", Participant.SHIVAM)]

    history = await persistence.list_history(Participant.ARYA, Participant.SHIVAM)
    assert [stored.id for stored in history] == [message.id]


@pytest.mark.asyncio
async def test_custom_message_skips_enrichment(persistence, fake_enrichment, fake_delivery):
    pipeline = _pipeline(persistence, fake_enrichment, fake_delivery)

    message = await pipeline.submit("Arya", "Shivam", "custom", "see you at 7")
    await pipeline.drain()

    assert message.custom_text == "see you at 7"
    assert message.original_text is None
    assert message.enrichment_note is None
    assert fake_enrichment.calls == []


@pytest.mark.asyncio
async def test_push_is_scheduled_for_the_recipient(persistence, fake_enrichment, fake_delivery):
    pipeline = _pipeline(persistence, fake_enrichment, fake_delivery)

    message = await pipeline.submit("Shivam", "Arya", "predefined", "Miss you")
    await pipeline.drain()

    assert pipeline.pending_deliveries == 0
    assert len(fake_delivery.sent) == 1
    recipient, payload = fake_delivery.sent[0]
    assert recipient is Participant.ARYA
    assert payload["title"] == "New message from Shivam"
    assert payload["body"] == 'Miss you - Shivam adds: "Always thinking of you."'
    assert payload["tag"] == "new-message-Shivam-Arya"
    assert payload["data"]["message_id"] == message.id


@pytest.mark.asyncio
async def test_push_failure_does_not_reach_the_sender(persistence, fake_enrichment):
    delivery = FakeDelivery(error=RuntimeError("push service down"))
    pipeline = _pipeline(persistence, fake_enrichment, delivery)

    message = await pipeline.submit("Arya", "Shivam", "custom", "hello")
    await pipeline.drain()

    assert message.custom_text == "hello"
    assert len(delivery.sent) == 1


@pytest.mark.asyncio
async def test_enrichment_crash_falls_back_to_a_note(persistence, fake_delivery):
    pipeline = _pipeline(persistence, ExplodingEnrichment(), fake_delivery)

    message = await pipeline.submit("Arya", "Shivam", "predefined", "Hug")
    await pipeline.drain()

    assert message.enrichment_note == (
        "(Arya wanted to add a special note, but there was a little hiccup!)"
    )
    _, payload = fake_delivery.sent[0]
    assert payload["body"] == "Hug (from Arya)"


@pytest.mark.parametrize(
    ("sender", "recipient", "kind", "payload", "error"),
    [
        ("Mallory", "Arya", "custom", "hi", InvalidParticipantError),
        ("Shivam", None, "custom", "hi", InvalidParticipantError),
        ("Shivam", "Shivam", "custom", "hi", SelfMessageError),
        ("Shivam", "Arya", "poem", "hi", UnknownKindError),
        ("Shivam", "Arya", "custom", "   ", EmptyPayloadError),
        ("Shivam", "Arya", "predefined", None, EmptyPayloadError),
    ],
)
@pytest.mark.asyncio
async def test_invalid_submissions_are_rejected_before_storage(
    persistence, fake_enrichment, fake_delivery, sender, recipient, kind, payload, error
):
    pipeline = _pipeline(persistence, fake_enrichment, fake_delivery)

    with pytest.raises(error):
        await pipeline.submit(sender, recipient, kind, payload)
    await pipeline.drain()

    assert await persistence.list_history(Participant.SHIVAM, Participant.ARYA) == []
    assert fake_enrichment.calls == []
    assert fake_delivery.sent == []


@pytest.mark.asyncio
async def test_persistence_failure_is_reported_and_nothing_is_sent(fake_enrichment, fake_delivery):
    registry = ConnectionRegistry()
    arya = FakeConnection()
    registry.register(Participant.ARYA, arya)
    pipeline = _pipeline(FailingPersistence(), fake_enrichment, fake_delivery, registry)

    with pytest.raises(PersistenceFailureError, match="Failed to save message"):
        await pipeline.submit("Shivam", "Arya", "custom", "hi")
    await pipeline.drain()

    assert fake_delivery.sent == []
    assert arya.sent == []


@pytest.mark.asyncio
async def test_history_is_ordered_by_creation_time(persistence, fake_enrichment, fake_delivery):
    pipeline = _pipeline(persistence, fake_enrichment, fake_delivery)

    first = await pipeline.submit("Shivam", "Arya", "custom", "one")
    second = await pipeline.submit("Arya", "Shivam", "custom", "two")
    third = await pipeline.submit("Shivam", "Arya", "predefined", "Miss you")
    await pipeline.drain()

    history = await persistence.list_history(Participant.SHIVAM, Participant.ARYA)

    assert [message.id for message in history] == [first.id, second.id, third.id]
    assert second.created_at - first.created_at == timedelta(seconds=1)


def test_truncate_keeps_short_text():
    assert truncate("short") == "short"
    assert truncate("x" * 100) == "x" * 100


def test_truncate_cuts_long_text_with_ellipsis():
    result = truncate("y" * 150)

    assert len(result) == 100
    assert result == "y" * 97 + "..."


def test_notification_for_custom_message():
    message = Message(
        id="m1",
        sender=Participant.ARYA,
        recipient=Participant.SHIVAM,
        kind=MessageKind.CUSTOM,
        created_at=StepClock()(),
        custom_text="x" * 200,
    )

    payload = build_notification(message)

    assert payload["body"].startswith('Arya says: "xxx')
    assert payload["body"].endswith("...")
    assert len(payload["body"]) == 100
    assert payload["icon"] == "/icon-192x192.png"
    assert payload["data"] == {"url": "/", "sender": "Arya", "message_id": "m1"}


def test_notification_for_predefined_message_with_fallback_note():
    message = Message(
        id="m2",
        sender=Participant.SHIVAM,
        recipient=Participant.ARYA,
        kind=MessageKind.PREDEFINED,
        created_at=StepClock()(),
        original_text="Good night",
        enrichment_note="(A special thought from Shivam!)",
    )

    payload = build_notification(message, Enrichment(message.enrichment_note, generated=False))

    assert payload["body"] == "Good night (from Shivam)"


@pytest.mark.asyncio
async def test_submit_returns_before_push_delivery_finishes(persistence, fake_enrichment):
    delivery = GatedDelivery()
    pipeline = _pipeline(persistence, fake_enrichment, delivery)

    message = await pipeline.submit("Shivam", "Arya", "custom", "on my way")

    assert message.custom_text == "on my way"
    assert pipeline.pending_deliveries == 1
    assert delivery.sent == []

    delivery.release.set()
    await pipeline.drain()

    assert pipeline.pending_deliveries == 0
    assert [user for user, _ in delivery.sent] == [Participant.ARYA]


def test_notification_rejects_unhandled_kind():
    message = Message(
        id="m3",
        sender=Participant.SHIVAM,
        recipient=Participant.ARYA,
        kind="poem",
        created_at=StepClock()(),
        custom_text="roses",
    )

    with pytest.raises(ValueError, match="Unhandled message kind"):
        build_notification(message)

"""Shared fixtures: an in-memory database and fakes for the outbound services."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["DATABASE_URL"] = "sqlite://"
for _name in ("OPENAI_API_KEY", "VAPID_PUBLIC_KEY", "VAPID_PRIVATE_KEY", "SHARED_SECRET_HASH"):
    os.environ.pop(_name, None)

from always_connected.config import Settings, reset_settings_cache  # noqa: E402

reset_settings_cache()

from always_connected.domain.entities import Participant  # noqa: E402
from always_connected.infrastructure.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    initialize_database,
)
from always_connected.infrastructure.openai_client import Enrichment  # noqa: E402
from always_connected.infrastructure.persistence import PersistenceGateway  # noqa: E402
from always_connected.infrastructure.webpush import DeliveryReport  # noqa: E402


class FakeEnrichment:
    """Return a fixed note and remember every request."""

    def __init__(self, note: str = "Always thinking of you.", *, generated: bool = True) -> None:
        self.note = note
        self.generated = generated
        self.calls: list[tuple[str, Participant]] = []

    async def enrich(self, phrase: str, sender: Participant) -> Enrichment:
        self.calls.append((phrase, sender))
        return Enrichment(self.note, generated=self.generated)


class FakeDelivery:
    """Record push payloads instead of contacting a push service."""

    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[tuple[Participant, dict]] = []

    async def send(self, user_id: Participant, payload: dict) -> DeliveryReport:
        self.sent.append((user_id, payload))
        if self.error is not None:
            raise self.error
        return DeliveryReport(user_id=user_id, attempted=1, delivered=1)


class FakeConnection:
    """Collect frames pushed to a client."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[dict] = []

    async def send_json(self, data: dict) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.sent.append(data)


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 2, 14, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


class SequentialIds:
    def __init__(self) -> None:
        self.counter = 0

    def __call__(self) -> str:
        self.counter += 1
        return f"msg-{self.counter:04d}"


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None, database_url="sqlite://")


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://")
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def persistence(session_factory) -> PersistenceGateway:
    return PersistenceGateway(session_factory)


@pytest.fixture()
def fake_enrichment() -> FakeEnrichment:
    return FakeEnrichment()


@pytest.fixture()
def fake_delivery() -> FakeDelivery:
    return FakeDelivery()

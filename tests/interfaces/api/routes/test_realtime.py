"""End-to-end tests for the websocket channel."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from always_connected.domain.entities import Participant
from always_connected.infrastructure.database import build_engine
from conftest import FakeDelivery, FakeEnrichment
from main import create_app


@pytest.fixture()
def enrichment():
    return FakeEnrichment()


@pytest.fixture()
def delivery():
    return FakeDelivery()


@pytest.fixture()
def app(settings, enrichment, delivery):
    return create_app(
        settings=settings,
        engine=build_engine("sqlite://"),
        enrichment=enrichment,
        delivery=delivery,
    )


def _send(ws, sender, recipient, kind, payload):
    ws.send_json(
        {"type": "send", "sender": sender, "recipient": recipient, "kind": kind, "payload": payload}
    )


def test_invalid_user_is_rejected(app):
    with TestClient(app) as client:
        with client.websocket_connect("/ws?userId=Mallory") as ws:
            frame = ws.receive_json()
            assert frame["type"] == "error"
            assert frame["code"] == "invalid_participant"
            with pytest.raises(WebSocketDisconnect) as excinfo:
                ws.receive_json()
    assert excinfo.value.code == 1008


def test_missing_user_is_rejected(app):
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_json()["type"] == "error"
            with pytest.raises(WebSocketDisconnect):
                ws.receive_json()


def test_first_connection_gets_ack_and_empty_history(app):
    with TestClient(app) as client:
        with client.websocket_connect("/ws?userId=Shivam") as ws:
            assert ws.receive_json() == {
                "type": "ack",
                "message": "Successfully connected as Shivam.",
            }
            ws.send_json({"type": "history-fetch", "user1": "Shivam", "user2": "Arya"})
            assert ws.receive_json() == {"type": "history", "messages": []}


def test_predefined_message_reaches_both_participants(app, delivery):
    with TestClient(app) as client:
        with client.websocket_connect("/ws?userId=Shivam") as shivam, client.websocket_connect(
            "/ws?userId=Arya"
        ) as arya:
            shivam.receive_json()
            arya.receive_json()

            _send(shivam, "Shivam", "Arya", "predefined", "Miss you")

            echoed = shivam.receive_json()
            received = arya.receive_json()

    assert echoed == received
    assert received["type"] == "message"
    assert received["text"] == "Miss you - Always thinking of you."
    assert received["original_text"] == "Miss you"
    assert received["enrichment_note"] == "Always thinking of you."
    assert received["recipient"] == "Arya"
    assert [user for user, _ in delivery.sent] == [Participant.ARYA]


def test_every_device_of_both_users_receives_the_message(app):
    with TestClient(app) as client:
        with client.websocket_connect("/ws?userId=Shivam") as phone, client.websocket_connect(
            "/ws?userId=Shivam"
        ) as laptop, client.websocket_connect("/ws?userId=Arya") as arya:
            for ws in (phone, laptop, arya):
                ws.receive_json()

            _send(phone, "Shivam", "Arya", "custom", "see you at 7")

            frames = [ws.receive_json() for ws in (phone, laptop, arya)]

    assert all(frame["type"] == "message" for frame in frames)
    assert {frame["id"] for frame in frames} == {frames[0]["id"]}
    assert frames[0]["text"] == "see you at 7"


def test_offline_recipient_still_gets_a_push(app, delivery):
    with TestClient(app) as client:
        with client.websocket_connect("/ws?userId=Arya") as arya:
            arya.receive_json()
            _send(arya, "Arya", "Shivam", "custom", "call me")
            assert arya.receive_json()["type"] == "message"

    assert len(delivery.sent) == 1
    user, payload = delivery.sent[0]
    assert user is Participant.SHIVAM
    assert payload["body"] == 'Arya says: "call me"'


def test_errors_keep_the_connection_open(app, delivery):
    with TestClient(app) as client:
        with client.websocket_connect("/ws?userId=Shivam") as ws:
            ws.receive_json()

            ws.send_text("this is not json")
            assert ws.receive_json()["message"] == "Invalid message format."

            _send(ws, "Arya", "Shivam", "custom", "spoofed")
            assert ws.receive_json()["code"] == "sender_mismatch"

            _send(ws, "Shivam", "Arya", "custom", "   ")
            assert ws.receive_json()["code"] == "empty_payload"

            _send(ws, "Shivam", "Arya", "poem", "roses")
            assert ws.receive_json()["code"] == "unknown_kind"

            ws.send_json({"type": "ping"})
            assert ws.receive_json() == {"type": "pong"}

    assert delivery.sent == []


def test_history_replays_messages_oldest_first(app):
    with TestClient(app) as client:
        with client.websocket_connect("/ws?userId=Shivam") as ws:
            ws.receive_json()
            for text in ("one", "two", "three"):
                _send(ws, "Shivam", "Arya", "custom", text)
                ws.receive_json()

        with client.websocket_connect("/ws?userId=Arya") as ws:
            ws.receive_json()
            ws.send_json({"type": "history-fetch", "user1": "Arya", "user2": "Shivam"})
            history = ws.receive_json()

        response = client.get("/api/messages/history", params={"user1": "Shivam", "user2": "Arya"})

    assert [message["text"] for message in history["messages"]] == ["one", "two", "three"]
    assert response.status_code == 200
    assert [message["text"] for message in response.json()] == ["one", "two", "three"]

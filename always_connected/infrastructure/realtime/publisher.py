"""Serialization of outbound websocket frames."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from always_connected.domain.entities import Message
from always_connected.utils import isoformat_utc


def serialize_message(message: Message) -> dict[str, Any]:
    """Return the canonical JSON representation of ``message``."""

    return {
        "id": message.id,
        "sender": message.sender.value,
        "recipient": message.recipient.value,
        "kind": message.kind.value,
        "text": message.display_text,
        "original_text": message.original_text,
        "enrichment_note": message.enrichment_note,
        "custom_text": message.custom_text,
        "timestamp": isoformat_utc(message.created_at),
    }


def ack_frame(text: str) -> dict[str, Any]:
    return {"type": "ack", "message": text}


def error_frame(text: str, *, code: str | None = None) -> dict[str, Any]:
    frame: dict[str, Any] = {"type": "error", "message": text}
    if code is not None:
        frame["code"] = code
    return frame


def history_frame(messages: Iterable[Message]) -> dict[str, Any]:
    return {"type": "history", "messages": [serialize_message(m) for m in messages]}


def message_frame(message: Message) -> dict[str, Any]:
    return {"type": "message", **serialize_message(message)}


def pong_frame() -> dict[str, Any]:
    return {"type": "pong"}


__all__ = [
    "ack_frame",
    "error_frame",
    "history_frame",
    "message_frame",
    "pong_frame",
    "serialize_message",
]

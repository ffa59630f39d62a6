"""Realtime connection helpers for the infrastructure layer."""

from .manager import Connection, ConnectionRegistry
from .publisher import (
    ack_frame,
    error_frame,
    history_frame,
    message_frame,
    pong_frame,
    serialize_message,
)

__all__ = [
    "Connection",
    "ConnectionRegistry",
    "ack_frame",
    "error_frame",
    "history_frame",
    "message_frame",
    "pong_frame",
    "serialize_message",
]

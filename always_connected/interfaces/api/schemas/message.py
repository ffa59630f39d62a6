"""Pydantic models describing canonical messages."""

from __future__ import annotations

from pydantic import BaseModel


class MessageRead(BaseModel):
    """Canonical message as returned to both participants."""

    id: str
    sender: str
    recipient: str
    kind: str
    text: str
    original_text: str | None = None
    enrichment_note: str | None = None
    custom_text: str | None = None
    timestamp: str


__all__ = ["MessageRead"]

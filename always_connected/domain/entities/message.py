"""Domain entity representing a message exchanged between participants."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .participant import Participant

MISSING_NOTE_PLACEHOLDER = "(Note not available)"


class MessageKind(str, Enum):
    """Recognized message kinds."""

    PREDEFINED = "predefined"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Message:
    """A persisted message. Instances are never mutated after creation."""

    id: str
    sender: Participant
    recipient: Participant
    kind: MessageKind
    created_at: datetime
    original_text: str | None = None
    enrichment_note: str | None = None
    custom_text: str | None = None

    @property
    def display_text(self) -> str:
        """Return the text shown to both participants."""

        if self.kind is MessageKind.PREDEFINED:
            note = self.enrichment_note or MISSING_NOTE_PLACEHOLDER
            return f"{self.original_text} - {note}"
        if self.kind is MessageKind.CUSTOM:
            return self.custom_text or ""
        raise ValueError(f"Unhandled message kind {self.kind!r}")


__all__ = ["MISSING_NOTE_PLACEHOLDER", "Message", "MessageKind"]

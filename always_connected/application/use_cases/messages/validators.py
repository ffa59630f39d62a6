"""Validation helpers shared by the message use cases."""

from __future__ import annotations

from dataclasses import dataclass

from always_connected.domain.entities import MessageKind, Participant

from .errors import (
    EmptyPayloadError,
    InvalidParticipantError,
    SelfMessageError,
    UnknownKindError,
)


@dataclass(frozen=True)
class ValidatedSubmission:
    sender: Participant
    recipient: Participant
    kind: MessageKind
    text: str


def ensure_participant(value: object, *, role: str) -> Participant:
    """Return the participant named ``value`` or raise ``InvalidParticipantError``."""

    participant = Participant.parse(value)
    if participant is None:
        names = " or ".join(member.value for member in Participant)
        raise InvalidParticipantError(f"Invalid {role} {value!r}. Must be {names}.")
    return participant


def ensure_pair(user1: object, user2: object) -> tuple[Participant, Participant]:
    return ensure_participant(user1, role="user1"), ensure_participant(user2, role="user2")


def validate_submission(
    sender: object, recipient: object, kind: object, payload: object
) -> ValidatedSubmission:
    """Check a submission and return it normalized.

    Checks run in a fixed order so the first problem is the one reported.
    """

    sender_id = ensure_participant(sender, role="sender")
    recipient_id = ensure_participant(recipient, role="recipient")
    if recipient_id is not sender_id.counterpart:
        raise SelfMessageError("Sender and recipient cannot be the same.")

    try:
        message_kind = MessageKind(kind)
    except ValueError:
        raise UnknownKindError(
            f"Invalid message kind {kind!r}. Must be 'predefined' or 'custom'."
        ) from None

    text = payload.strip() if isinstance(payload, str) else ""
    if not text:
        raise EmptyPayloadError("Message text is required.")

    return ValidatedSubmission(
        sender=sender_id, recipient=recipient_id, kind=message_kind, text=text
    )


__all__ = [
    "ValidatedSubmission",
    "ensure_pair",
    "ensure_participant",
    "validate_submission",
]

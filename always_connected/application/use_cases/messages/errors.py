"""Failures reported by the message use cases."""


class MessagePipelineError(Exception):
    """Base class for errors surfaced to the sender of a message."""

    code = "message_error"


class InvalidParticipantError(MessagePipelineError, ValueError):
    """A sender, recipient or history participant is not a known identity."""

    code = "invalid_participant"


class SelfMessageError(MessagePipelineError, ValueError):
    """The sender tried to message themselves."""

    code = "self_message"


class UnknownKindError(MessagePipelineError, ValueError):
    """The message kind is neither ``predefined`` nor ``custom``."""

    code = "unknown_kind"


class EmptyPayloadError(MessagePipelineError, ValueError):
    """The phrase or free text is missing."""

    code = "empty_payload"


class PersistenceFailureError(MessagePipelineError, RuntimeError):
    """The message could not be stored; nothing was broadcast."""

    code = "persistence_failure"


__all__ = [
    "EmptyPayloadError",
    "InvalidParticipantError",
    "MessagePipelineError",
    "PersistenceFailureError",
    "SelfMessageError",
    "UnknownKindError",
]

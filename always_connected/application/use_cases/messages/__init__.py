"""Use cases for exchanging messages."""

from .errors import (
    EmptyPayloadError,
    InvalidParticipantError,
    MessagePipelineError,
    PersistenceFailureError,
    SelfMessageError,
    UnknownKindError,
)
from .history import DEFAULT_HISTORY_LIMIT, list_history
from .submit_message import (
    NOTIFICATION_BODY_LIMIT,
    MessagePipeline,
    build_notification,
    truncate,
)
from .validators import ensure_pair, ensure_participant, validate_submission

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "EmptyPayloadError",
    "InvalidParticipantError",
    "MessagePipeline",
    "MessagePipelineError",
    "NOTIFICATION_BODY_LIMIT",
    "PersistenceFailureError",
    "SelfMessageError",
    "UnknownKindError",
    "build_notification",
    "ensure_pair",
    "ensure_participant",
    "list_history",
    "truncate",
    "validate_submission",
]

"""Domain entities exposed by the application."""

from .message import MISSING_NOTE_PLACEHOLDER, Message, MessageKind
from .participant import Participant
from .push_subscription import PushSubscription
from .user import User

__all__ = [
    "MISSING_NOTE_PLACEHOLDER",
    "Message",
    "MessageKind",
    "Participant",
    "PushSubscription",
    "User",
]

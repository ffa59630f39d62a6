"""Repository implementations for infrastructure layer."""

from .message_repository import MessageRepository
from .user_repository import UserRepository

__all__ = [
    "MessageRepository",
    "UserRepository",
]

"""Aggregate application use cases."""

from .messages import MessagePipeline, list_history
from .users import authenticate_user, subscribe_push, unsubscribe_push

__all__ = [
    "MessagePipeline",
    "authenticate_user",
    "list_history",
    "subscribe_push",
    "unsubscribe_push",
]

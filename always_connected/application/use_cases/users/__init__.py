"""Use cases for managing participants."""

from .authenticate_user import AuthenticationStatus, authenticate_user
from .push_subscriptions import subscribe_push, unsubscribe_push

__all__ = [
    "AuthenticationStatus",
    "authenticate_user",
    "subscribe_push",
    "unsubscribe_push",
]

"""ORM models used by the application infrastructure."""

from .message import MessageModel
from .push_subscription import PushSubscriptionModel
from .user import UserModel

__all__ = [
    "MessageModel",
    "PushSubscriptionModel",
    "UserModel",
]

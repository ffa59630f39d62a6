"""Domain entity representing a user."""

from dataclasses import dataclass, field
from datetime import datetime

from .participant import Participant
from .push_subscription import PushSubscription


@dataclass
class User:
    """A participant's stored record and the browsers it receives pushes on."""

    user_id: Participant
    created_at: datetime | None = None
    push_subscriptions: list[PushSubscription] = field(default_factory=list)

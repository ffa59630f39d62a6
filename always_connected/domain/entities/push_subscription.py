"""Domain entity representing a browser push subscription."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .participant import Participant


@dataclass(frozen=True)
class PushSubscription:
    """Endpoint and key material handed out by a browser push service."""

    endpoint: str
    p256dh: str
    auth: str
    user_id: Participant
    expiration_time: datetime | None = None

    def as_subscription_info(self) -> dict[str, object]:
        """Return the structure expected by ``pywebpush.webpush``."""

        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }


__all__ = ["PushSubscription"]

"""Web Push fan-out to every browser a user subscribed from."""

from __future__ import annotations

import asyncio
import functools
import json
import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from anyio import to_thread
from pywebpush import WebPushException, webpush

from always_connected.config import Settings, get_settings
from always_connected.domain.entities import Participant, PushSubscription
from always_connected.infrastructure.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

# Push services answer with these codes once a subscription is unsubscribed or expired.
_GONE_STATUS_CODES = frozenset({404, 410})


class EndpointOutcome(Enum):
    """Result of a single push attempt."""

    DELIVERED = auto()
    GONE = auto()
    FAILED = auto()


@dataclass
class DeliveryReport:
    """Aggregated outcome of a fan-out to one user."""

    user_id: Participant
    attempted: int = 0
    delivered: int = 0
    failed: int = 0
    pruned: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.delivered > 0


def _short(endpoint: str) -> str:
    return f"{endpoint[:30]}..." if len(endpoint) > 30 else endpoint


class WebPushDeliveryService:
    """Send a payload to all of a user's push subscriptions.

    Endpoints are contacted concurrently and independently: a slow or failing
    endpoint never prevents delivery to the others. Subscriptions the push
    service reports as gone are deleted.
    """

    def __init__(
        self,
        persistence: PersistenceGateway,
        *,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._persistence = persistence
        self._private_key = settings.vapid_private_key
        self._contact = settings.vapid_contact
        self._timeout = settings.push_timeout_seconds
        self._enabled = settings.push_enabled
        if not self._enabled:
            logger.warning(
                "VAPID_PUBLIC_KEY or VAPID_PRIVATE_KEY is not configured; push notifications are disabled"
            )

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def send(self, user_id: Participant, payload: dict[str, Any]) -> DeliveryReport:
        """Deliver ``payload`` to every subscription registered for ``user_id``."""

        report = DeliveryReport(user_id=user_id)
        if not self.enabled:
            logger.warning("Cannot send push notification to %s: VAPID keys not set", user_id.value)
            return report

        subscriptions = list(await self._persistence.list_subscriptions(user_id))
        if not subscriptions:
            logger.info("No push subscriptions found for %s", user_id.value)
            return report

        data = json.dumps(payload)
        outcomes = await asyncio.gather(
            *(self._send_one(subscription, data) for subscription in subscriptions),
            return_exceptions=True,
        )

        for subscription, outcome in zip(subscriptions, outcomes):
            report.attempted += 1
            if outcome is EndpointOutcome.DELIVERED:
                report.delivered += 1
                continue
            report.failed += 1
            if isinstance(outcome, BaseException):
                logger.error(
                    "Unexpected push failure for %s at %s: %r",
                    user_id.value,
                    _short(subscription.endpoint),
                    outcome,
                )
            elif outcome is EndpointOutcome.GONE:
                await self._prune(subscription)
                report.pruned.append(subscription.endpoint)

        if report.success:
            logger.info(
                "Sent %s push notifications to %s. Failed: %s",
                report.delivered,
                user_id.value,
                report.failed,
            )
        else:
            logger.warning(
                "Failed to send any push notifications to %s. Attempts: %s",
                user_id.value,
                report.attempted,
            )
        return report

    async def _send_one(self, subscription: PushSubscription, data: str) -> EndpointOutcome:
        # webpush() adds ``aud`` and ``exp`` to the claims it receives, so every call gets its own dict.
        call = functools.partial(
            webpush,
            subscription_info=subscription.as_subscription_info(),
            data=data,
            vapid_private_key=self._private_key,
            vapid_claims={"sub": self._contact},
            timeout=self._timeout,
        )
        try:
            await to_thread.run_sync(call)
        except WebPushException as exc:
            response = getattr(exc, "response", None)
            status_code = getattr(response, "status_code", None)
            if status_code in _GONE_STATUS_CODES:
                logger.info(
                    "Push subscription %s is no longer valid (%s)",
                    _short(subscription.endpoint),
                    status_code,
                )
                return EndpointOutcome.GONE
            logger.warning(
                "Web push failed for %s (status %s): %s",
                _short(subscription.endpoint),
                status_code,
                exc,
            )
            return EndpointOutcome.FAILED
        except Exception:
            logger.exception("Unexpected error sending web push to %s", _short(subscription.endpoint))
            return EndpointOutcome.FAILED
        return EndpointOutcome.DELIVERED

    async def _prune(self, subscription: PushSubscription) -> None:
        try:
            await self._persistence.remove_subscription(subscription.user_id, subscription.endpoint)
        except Exception:
            logger.exception("Could not remove stale push subscription %s", _short(subscription.endpoint))


__all__ = ["DeliveryReport", "EndpointOutcome", "WebPushDeliveryService"]

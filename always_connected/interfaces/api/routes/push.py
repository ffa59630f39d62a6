"""Endpoints for managing browser push subscriptions."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from always_connected.application.use_cases.messages import InvalidParticipantError
from always_connected.application.use_cases.users import subscribe_push, unsubscribe_push
from always_connected.config import Settings
from always_connected.interfaces.api.dependencies import get_app_settings, get_db
from always_connected.interfaces.api.schemas import (
    PushResponse,
    SubscribeRequest,
    UnsubscribeRequest,
    VapidPublicKeyResponse,
)

router = APIRouter(prefix="/api/push", tags=["push"])
logger = logging.getLogger(__name__)


@router.get("/vapid-public-key", response_model=VapidPublicKeyResponse)
def read_vapid_public_key(
    settings: Settings = Depends(get_app_settings),
) -> VapidPublicKeyResponse:
    """Expose the application server key browsers need to subscribe."""

    if not settings.vapid_public_key:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Push notifications are not configured.",
        )
    return VapidPublicKeyResponse(public_key=settings.vapid_public_key)


@router.post(
    "/subscribe",
    response_model=PushResponse,
    status_code=status.HTTP_201_CREATED,
)
def subscribe(
    payload: SubscribeRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> PushResponse:
    """Register the browser subscription for the given participant."""

    if not settings.push_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Push notifications are not configured on the server.",
        )

    subscription = payload.subscription
    try:
        created = subscribe_push(
            db,
            user_id=payload.user_id,
            endpoint=subscription.endpoint,
            p256dh=subscription.keys.p256dh,
            auth=subscription.keys.auth,
            expiration_time=subscription.expiration_time,
        )
    except InvalidParticipantError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    if not created:
        response.status_code = status.HTTP_200_OK
        return PushResponse(message="Subscription already exists.")

    logger.info("Push subscription added for %s", payload.user_id)
    return PushResponse(message="Push subscription saved successfully.")


@router.post("/unsubscribe", response_model=PushResponse)
def unsubscribe(
    payload: UnsubscribeRequest,
    db: Session = Depends(get_db),
) -> PushResponse:
    """Remove a subscription, typically after the browser revoked it."""

    try:
        removed = unsubscribe_push(db, user_id=payload.user_id, endpoint=payload.endpoint)
    except InvalidParticipantError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subscription not found.",
        )

    logger.info("Push subscription removed for %s", payload.user_id)
    return PushResponse(message="Unsubscribed successfully.")

"""Schemas for push subscription management."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PushSubscriptionKeys(BaseModel):
    p256dh: str = Field(..., min_length=1, description="P-256 ECDH public key")
    auth: str = Field(..., min_length=1, description="Authentication secret")


class PushSubscriptionPayload(BaseModel):
    """Subscription object as serialized by the browser Push API."""

    model_config = ConfigDict(populate_by_name=True)

    endpoint: str = Field(..., min_length=1, description="Push service URL")
    expiration_time: datetime | None = Field(default=None, alias="expirationTime")
    keys: PushSubscriptionKeys


class SubscribeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    subscription: PushSubscriptionPayload


class UnsubscribeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    endpoint: str = Field(..., min_length=1)


class PushResponse(BaseModel):
    message: str


class VapidPublicKeyResponse(BaseModel):
    public_key: str


__all__ = [
    "PushResponse",
    "PushSubscriptionKeys",
    "PushSubscriptionPayload",
    "SubscribeRequest",
    "UnsubscribeRequest",
    "VapidPublicKeyResponse",
]

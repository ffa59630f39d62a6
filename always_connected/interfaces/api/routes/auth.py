"""Endpoint for logging a participant in with the shared secret."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from always_connected.application.use_cases.users import (
    AuthenticationStatus,
    authenticate_user,
)
from always_connected.config import Settings
from always_connected.interfaces.api.dependencies import get_app_settings, get_db
from always_connected.interfaces.api.schemas import LoginRequest, LoginResponse, LoginUser

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> LoginResponse:
    """Check the shared secret for one of the two participants."""

    user, auth_status = authenticate_user(
        db, payload.user_id, payload.password, settings=settings
    )

    if auth_status is AuthenticationStatus.UNKNOWN_USER:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user ID.",
        )

    if auth_status is AuthenticationStatus.INVALID_CREDENTIALS:
        logger.info("Failed login attempt for %s", payload.user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials.",
        )

    logger.info("User %s logged in", user.user_id.value)
    return LoginResponse(
        message="Login successful.",
        user=LoginUser(user_id=user.user_id.value),
    )

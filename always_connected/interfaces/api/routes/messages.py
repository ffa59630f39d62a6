"""HTTP access to the conversation history."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from always_connected.application.use_cases.messages import (
    InvalidParticipantError,
    list_history,
)
from always_connected.config import Settings
from always_connected.infrastructure.persistence import PersistenceGateway
from always_connected.infrastructure.realtime import serialize_message
from always_connected.interfaces.api.dependencies import get_app_settings, get_persistence
from always_connected.interfaces.api.schemas import MessageRead

router = APIRouter(prefix="/api/messages", tags=["messages"])
logger = logging.getLogger(__name__)


@router.get("/history", response_model=list[MessageRead])
async def read_history(
    user1: str = Query(..., description="First participant"),
    user2: str = Query(..., description="Second participant"),
    persistence: PersistenceGateway = Depends(get_persistence),
    settings: Settings = Depends(get_app_settings),
) -> list[MessageRead]:
    """Return the most recent messages between the two participants, oldest first."""

    try:
        messages = await list_history(persistence, user1, user2, limit=settings.history_limit)
    except InvalidParticipantError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except SQLAlchemyError as exc:
        logger.exception("Error fetching message history for %s and %s", user1, user2)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch message history.",
        ) from exc

    return [MessageRead(**serialize_message(message)) for message in messages]

"""Websocket endpoint for the live channel."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from always_connected.interfaces.api.dependencies import (
    get_app_settings,
    get_persistence,
    get_pipeline,
    get_registry,
)
from always_connected.interfaces.api.session import ChatSession

router = APIRouter(tags=["realtime"])
logger = logging.getLogger(__name__)


@router.websocket("/ws")
async def realtime_websocket(websocket: WebSocket) -> None:
    """Authenticate by ``userId`` and process frames until the client leaves."""

    await websocket.accept()
    session = ChatSession(
        websocket,
        registry=get_registry(websocket),
        pipeline=get_pipeline(websocket),
        persistence=get_persistence(websocket),
        history_limit=get_app_settings(websocket).history_limit,
    )

    if not await session.open(websocket.query_params.get("userId")):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        while True:
            event = await websocket.receive()
            if event["type"] == "websocket.disconnect":
                break
            raw = event.get("text")
            if raw is None:
                raw = event.get("bytes") or b""
            await session.handle_text(raw)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WebSocket error for %s", session.user)
        raise
    finally:
        session.close()

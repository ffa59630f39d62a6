"""Per-connection protocol handling for the realtime channel."""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from always_connected.application.use_cases.messages import (
    DEFAULT_HISTORY_LIMIT,
    InvalidParticipantError,
    MessagePipeline,
    MessagePipelineError,
    list_history,
)
from always_connected.domain.entities import Participant
from always_connected.infrastructure.persistence import PersistenceGateway
from always_connected.infrastructure.realtime import (
    Connection,
    ConnectionRegistry,
    ack_frame,
    error_frame,
    history_frame,
    message_frame,
    pong_frame,
)
from always_connected.interfaces.api.schemas import (
    FrameError,
    HistoryFetchFrame,
    PingFrame,
    SendFrame,
    parse_frame,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    CONNECTING = auto()
    AUTHENTICATED = auto()
    CLOSED = auto()


class ChatSession:
    """State machine for one live connection.

    ``CONNECTING`` moves to ``AUTHENTICATED`` when the claimed identity is a
    known participant, or straight to ``CLOSED`` otherwise. Frames are only
    processed while authenticated; errors in a frame are reported back to
    this connection and never end the session.
    """

    def __init__(
        self,
        connection: Connection,
        *,
        registry: ConnectionRegistry,
        pipeline: MessagePipeline,
        persistence: PersistenceGateway,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self._connection = connection
        self._registry = registry
        self._pipeline = pipeline
        self._persistence = persistence
        self._history_limit = history_limit
        self.state = SessionState.CONNECTING
        self.user: Participant | None = None

    async def open(self, claimed_identity: str | None) -> bool:
        """Authenticate the connection; ``False`` means it must be closed."""

        if self.state is not SessionState.CONNECTING:
            raise RuntimeError(f"Cannot open a session in state {self.state.name}")

        participant = Participant.parse(claimed_identity)
        if participant is None:
            logger.info("WebSocket connection rejected: invalid or missing userId %r", claimed_identity)
            self.state = SessionState.CLOSED
            await self._send(
                error_frame(
                    "Invalid user ID for WebSocket connection.",
                    code=InvalidParticipantError.code,
                )
            )
            return False

        self.user = participant
        self.state = SessionState.AUTHENTICATED
        self._registry.register(participant, self._connection)
        await self._send(ack_frame(f"Successfully connected as {participant.value}."))
        return True

    async def handle_text(self, raw: str | bytes) -> None:
        """Process one inbound frame in arrival order."""

        if self.state is not SessionState.AUTHENTICATED:
            return

        try:
            frame = parse_frame(raw)
        except FrameError as exc:
            logger.debug("Unparseable frame from %s: %s", self._user_name, exc)
            await self._send(error_frame(str(exc), code="malformed_frame"))
            return

        if isinstance(frame, HistoryFetchFrame):
            await self._handle_history_fetch(frame)
        elif isinstance(frame, SendFrame):
            await self._handle_send(frame)
        elif isinstance(frame, PingFrame):
            await self._send(pong_frame())

    def close(self) -> None:
        """Release the connection; later frames are ignored."""

        if self.state is SessionState.AUTHENTICATED and self.user is not None:
            self._registry.unregister(self.user, self._connection)
            logger.info("WebSocket client disconnected: %s", self.user.value)
        self.state = SessionState.CLOSED

    async def _handle_history_fetch(self, frame: HistoryFetchFrame) -> None:
        try:
            messages = await list_history(
                self._persistence, frame.user1, frame.user2, limit=self._history_limit
            )
        except InvalidParticipantError as exc:
            await self._send(error_frame(str(exc), code=exc.code))
            return
        except SQLAlchemyError:
            logger.exception("Error fetching message history for %s", self._user_name)
            await self._send(
                error_frame("Failed to fetch message history.", code="persistence_failure")
            )
            return

        await self._send(history_frame(messages))
        logger.debug(
            "Sent %s history messages for %s and %s to %s",
            len(messages),
            frame.user1,
            frame.user2,
            self._user_name,
        )

    async def _handle_send(self, frame: SendFrame) -> None:
        if self.user is None or frame.sender != self.user.value:
            logger.warning(
                "Message sender mismatch. Expected %s, got %s", self._user_name, frame.sender
            )
            await self._send(error_frame("Sender mismatch.", code="sender_mismatch"))
            return

        try:
            message = await self._pipeline.submit(
                frame.sender, frame.recipient, frame.kind, frame.payload
            )
        except MessagePipelineError as exc:
            logger.info("Message from %s rejected: %s", self._user_name, exc)
            await self._send(
                error_frame(f"Failed to process message: {exc}", code=exc.code)
            )
            return

        outbound = message_frame(message)
        echoed = await self._registry.send_to_user(message.sender, outbound)
        delivered = await self._registry.send_to_user(message.recipient, outbound)
        logger.debug(
            "Message %s echoed to %s connection(s) and sent to %s live connection(s)",
            message.id,
            echoed,
            delivered,
        )

    async def _send(self, frame: dict[str, Any]) -> None:
        await self._connection.send_json(frame)

    @property
    def _user_name(self) -> str:
        return self.user.value if self.user is not None else "<unauthenticated>"


__all__ = ["ChatSession", "SessionState"]

"""FastAPI dependency utilities.

Shared services live on ``app.state`` and are created by ``create_app``.
"""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from always_connected.application.use_cases.messages import MessagePipeline
from always_connected.config import Settings
from always_connected.infrastructure.persistence import PersistenceGateway
from always_connected.infrastructure.realtime import ConnectionRegistry


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_app_settings(connection: HTTPConnection) -> Settings:
    return connection.app.state.settings


def get_registry(connection: HTTPConnection) -> ConnectionRegistry:
    return connection.app.state.registry


def get_pipeline(connection: HTTPConnection) -> MessagePipeline:
    return connection.app.state.pipeline


def get_persistence(connection: HTTPConnection) -> PersistenceGateway:
    return connection.app.state.persistence

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from always_connected.application.use_cases.messages import MessagePipeline
from always_connected.config import Settings, get_settings
from always_connected.infrastructure import database
from always_connected.infrastructure.database import (
    build_session_factory,
    initialize_database,
)
from always_connected.infrastructure.openai_client import NoteEnrichmentService
from always_connected.infrastructure.persistence import PersistenceGateway
from always_connected.infrastructure.realtime import ConnectionRegistry
from always_connected.infrastructure.webpush import WebPushDeliveryService
from always_connected.interfaces.api.routes import register_routes


def create_app(
    *,
    settings: Settings | None = None,
    engine: Engine | None = None,
    enrichment: NoteEnrichmentService | None = None,
    delivery: WebPushDeliveryService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Collaborators default to the ones built from the environment; tests pass
    their own engine and fakes.
    """

    settings = settings or get_settings()
    if engine is None:
        engine = database.engine
        session_factory = database.SessionLocal
    else:
        session_factory = build_session_factory(engine)

    registry = ConnectionRegistry()
    persistence = PersistenceGateway(session_factory)
    if enrichment is None:
        enrichment = NoteEnrichmentService(settings=settings)
    if delivery is None:
        delivery = WebPushDeliveryService(persistence, settings=settings)
    pipeline = MessagePipeline(
        persistence=persistence,
        enrichment=enrichment,
        delivery=delivery,
        registry=registry,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the schema on startup; finish pending pushes and release resources on shutdown."""

        initialize_database(engine)
        yield
        await pipeline.drain()
        engine.dispose()

    app = FastAPI(title="Always Connected", lifespan=lifespan)
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.registry = registry
    app.state.persistence = persistence
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()

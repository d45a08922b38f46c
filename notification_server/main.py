"""Application factory wiring settings, storage, database and routes together."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from notification_server import __version__
from notification_server.config import Settings, get_settings
from notification_server.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
)
from notification_server.domain.exceptions import AuthenticationError
from notification_server.infrastructure.image_storage import ImageStorage
from notification_server.infrastructure.security import AUTHORIZATION_HEADER, BearerTokenGate
from notification_server.interfaces.api.errors import (
    handle_authentication_error,
    register_exception_handlers,
)
from notification_server.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("notification_server.requests")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logging.getLogger("notification_server").setLevel(settings.log_level)


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    request_logger.info(
        "%s %s -> %s (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


async def authenticate_requests(request: Request, call_next):
    """Reject requests to protected paths before routing reads their body."""

    gate: BearerTokenGate = request.app.state.gate
    if not gate.is_public(request.url.path):
        try:
            request.state.api_client = gate.authenticate(request.headers.get(AUTHORIZATION_HEADER))
        except AuthenticationError as exc:
            return await handle_authentication_error(request, exc)
    return await call_next(request)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Components are created once, in dependency order, and stored on
    ``app.state``. An unusable image storage directory aborts start-up.
    """

    settings = settings or get_settings()
    configure_logging(settings)

    image_storage = ImageStorage(settings)
    image_storage.ensure_ready()
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    gate = BearerTokenGate(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create missing tables on start-up and release connections on shutdown."""

        initialize_database(engine)
        logger.info("Notification server started")
        yield
        engine.dispose()

    app = FastAPI(
        title="Notification Server",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.image_storage = image_storage
    app.state.gate = gate

    register_exception_handlers(app)
    # The last middleware registered runs first, so 401s are logged too.
    app.middleware("http")(authenticate_requests)
    app.middleware("http")(log_requests)
    register_routes(app)
    return app


__all__ = ["configure_logging", "create_app"]

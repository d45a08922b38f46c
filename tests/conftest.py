"""Shared fixtures for the notification server test-suite."""

from __future__ import annotations

import io
from collections.abc import Callable

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from PIL import Image as PILImage

from notification_server.config import Settings
from notification_server.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
)
from notification_server.infrastructure.image_storage import ImageStorage
from notification_server.main import create_app

BEARER_TOKEN = "test-token"
HOST_URL = "http://testserver/image/"


@pytest.fixture()
def storage_dir(tmp_path):
    directory = tmp_path / "images"
    directory.mkdir()
    return directory


@pytest.fixture()
def settings(tmp_path, storage_dir) -> Settings:
    """Settings pointing at a throw-away database and storage directory."""

    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'notifications.db'}",
        image_storage_path=str(storage_dir),
        bearer_token=BEARER_TOKEN,
        host_url=HOST_URL,
    )


@pytest.fixture()
def engine(settings):
    engine = build_engine(settings)
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    factory = build_session_factory(engine)
    with factory() as db:
        yield db


@pytest.fixture()
def storage(settings) -> ImageStorage:
    return ImageStorage(settings)


@pytest.fixture()
def client(settings):
    """Return a test client bound to a clean application instance."""

    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {BEARER_TOKEN}"}


@pytest.fixture()
def image_factory() -> Callable[..., bytes]:
    """Return a helper that renders a small image in the requested format."""

    def _make(fmt: str = "PNG", *, mode: str = "RGB", size: tuple[int, int] = (16, 12)) -> bytes:
        image = PILImage.new(mode, size)
        buffer = io.BytesIO()
        image.save(buffer, format=fmt)
        return buffer.getvalue()

    return _make

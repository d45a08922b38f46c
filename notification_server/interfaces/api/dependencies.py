"""FastAPI dependency utilities."""

from fastapi import Request
from fastapi.security import HTTPBearer

from notification_server.config import Settings
from notification_server.infrastructure.image_storage import ImageStorage

# Credentials are enforced by the ``authenticate_requests`` middleware before the
# body is read; this scheme only documents them in the OpenAPI schema.
bearer_scheme = HTTPBearer(
    auto_error=False,
    description="Static API token configured through BEARER_TOKEN",
)


def get_app_settings(request: Request) -> Settings:
    """Return the settings the application was built with."""

    return request.app.state.settings


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.image_storage


__all__ = ["bearer_scheme", "get_app_settings", "get_image_storage"]

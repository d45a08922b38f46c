"""Static bearer token authentication for the protected API routes."""

from __future__ import annotations

import logging
import secrets

from notification_server.config import Settings
from notification_server.domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"
BEARER_SCHEME = "bearer"
API_CLIENT_PRINCIPAL = "api-client"

PUBLIC_PATHS = frozenset({"/healthcheck"})
PUBLIC_PATH_PREFIXES = ("/image/", "/actuator/health")


class BearerTokenGate:
    """Check requests against the single configured bearer token.

    The gate keeps no state between requests: there are no sessions and no
    per-client identities, every authenticated caller is the same API client.
    """

    def __init__(self, settings: Settings) -> None:
        self._token = settings.bearer_token

    @staticmethod
    def is_public(path: str) -> bool:
        return path in PUBLIC_PATHS or path.startswith(PUBLIC_PATH_PREFIXES)

    def authenticate(self, header: str | None) -> str:
        """Return the authenticated principal or raise :class:`AuthenticationError`."""

        if header is None or not header.strip():
            raise AuthenticationError("Missing Authorization header")

        scheme, separator, token = header.lstrip().partition(" ")
        if not separator or scheme.lower() != BEARER_SCHEME:
            raise AuthenticationError(
                "Invalid Authorization header format. Expected 'Bearer <token>'"
            )

        token = token.strip()
        if not token:
            raise AuthenticationError("Empty Bearer token")

        if not secrets.compare_digest(token.encode("utf-8"), self._token.encode("utf-8")):
            logger.warning("Rejected request with an invalid bearer token")
            raise AuthenticationError("Invalid Bearer token")

        return API_CLIENT_PRINCIPAL


__all__ = [
    "API_CLIENT_PRINCIPAL",
    "AUTHORIZATION_HEADER",
    "BearerTokenGate",
    "PUBLIC_PATHS",
    "PUBLIC_PATH_PREFIXES",
]

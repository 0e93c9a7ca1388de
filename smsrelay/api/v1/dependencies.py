"""
Dependencies for API endpoints.
"""
import logging
import secrets
from typing import Optional

from fastapi import Header, Request

from smsrelay.core.config import settings
from smsrelay.core.exceptions import AuthenticationError, AuthorizationError, ConfigurationError
from smsrelay.services.gateway.session import SessionManager
from smsrelay.services.sms.sender import SMSSender

logger = logging.getLogger("smsrelay.auth")


async def verify_api_key(
    request: Request,
    api_key: Optional[str] = Header(None, alias=settings.API_KEY_HEADER),
    authorization: Optional[str] = Header(None),
) -> None:
    """
    Verify the caller's API key.

    The key is accepted from the API key header or as an
    `Authorization: Bearer <key>` header.

    Raises:
        ConfigurationError: If no API secret is configured on the server
        AuthenticationError: If no key was presented
        AuthorizationError: If the key does not match
    """
    valid_key = settings.API_SECRET_KEY
    if not valid_key:
        logger.error("API_SECRET_KEY not set in environment")
        raise ConfigurationError("API security not configured")

    presented = api_key
    if not presented and authorization and authorization.startswith("Bearer "):
        presented = authorization[len("Bearer "):]

    if not presented:
        raise AuthenticationError(
            "API key required. Provide via X-API-Key header or Authorization: Bearer token"
        )

    if not secrets.compare_digest(presented.encode(), valid_key.encode()):
        client_host = request.client.host if request.client else "unknown"
        logger.warning(f"Invalid API key attempt from: {client_host}")
        raise AuthorizationError("Invalid API key")


async def get_session_manager(request: Request) -> SessionManager:
    """Get the process-wide session manager built at startup."""
    return request.app.state.session_manager


async def get_sms_sender(request: Request) -> SMSSender:
    """Get the SMS sender service built at startup."""
    return request.app.state.sms_sender

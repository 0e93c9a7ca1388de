"""
Event handlers for application lifecycle events.
"""
import logging
from contextlib import asynccontextmanager
from datetime import timedelta

import httpx
from fastapi import FastAPI

from smsrelay.core.config import settings
from smsrelay.services.gateway.client import PragatiClient
from smsrelay.services.gateway.credential_store import FileCredentialStore
from smsrelay.services.gateway.session import SessionManager
from smsrelay.services.sms.sender import SMSSender

logger = logging.getLogger("smsrelay")


async def startup_event_handler(app: FastAPI) -> None:
    """
    Handle application startup.

    Build the gateway client, session manager and sender once per process
    and warm the token cache from disk.
    """
    logger.info(f"Starting {settings.PROJECT_NAME}")

    http_client = httpx.AsyncClient(timeout=settings.GATEWAY_TIMEOUT_SECONDS)
    client = PragatiClient(
        http_client,
        base_url=settings.PRAGATI_API_BASE_URL,
        api_key=settings.PRAGATI_API_KEY,
    )

    session_manager = SessionManager(
        client,
        FileCredentialStore(settings.TOKEN_CACHE_FILE),
        token_validity=timedelta(days=settings.TOKEN_VALIDITY_DAYS),
        safety_margin=timedelta(days=settings.TOKEN_SAFETY_MARGIN_DAYS),
    )
    await session_manager.load()

    if not settings.PRAGATI_API_BASE_URL or not settings.PRAGATI_API_KEY:
        logger.warning("Pragati gateway credentials not configured; sends will be rejected")
    if not settings.API_SECRET_KEY:
        logger.warning("API_SECRET_KEY not set; all SMS routes will answer 500")

    app.state.http_client = http_client
    app.state.session_manager = session_manager
    app.state.sms_sender = SMSSender(
        client,
        session_manager,
        sender_id=settings.SMS_SENDER_ID,
        default_template_id=settings.SMS_DEFAULT_TEMPLATE_ID,
        category=settings.SMS_CATEGORY,
        recipient_cap=settings.GATEWAY_RECIPIENT_CAP,
        max_recipients=settings.MAX_RECIPIENTS_PER_REQUEST,
        batch_delay=settings.BATCH_DELAY_SECONDS,
    )

    logger.info(f"✅ {settings.PROJECT_NAME} v{settings.VERSION} startup complete")


async def shutdown_event_handler(app: FastAPI) -> None:
    """
    Handle application shutdown.

    Close the shared HTTP client. The token snapshot is already on disk.
    """
    logger.info(f"Shutting down {settings.PROJECT_NAME}")

    http_client = getattr(app.state, "http_client", None)
    if http_client is not None:
        try:
            await http_client.aclose()
        except Exception as e:
            logger.error(f"Error closing gateway HTTP client: {e}")

    logger.info("✅ Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup_event_handler(app)
    try:
        yield
    finally:
        await shutdown_event_handler(app)

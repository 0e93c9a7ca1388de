"""
Gateway session token lifecycle: cache, expiry and single-flight refresh.
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from smsrelay.services.gateway.client import PragatiClient
from smsrelay.services.gateway.credential_store import Credential, CredentialStore
from smsrelay.utils.datetime import format_datetime, format_duration, utc_now

logger = logging.getLogger("smsrelay.session")


class SessionManager:
    """
    Owns the live gateway credential.

    Callers get a valid credential from `acquire_valid_credential`. When the
    cached one has expired, exactly one refresh (generate + enable) runs at a
    time; everyone who arrives meanwhile waits on that same refresh.
    """

    def __init__(
        self,
        client: PragatiClient,
        store: CredentialStore,
        *,
        token_validity: timedelta = timedelta(days=7),
        safety_margin: timedelta = timedelta(days=1),
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize the session manager.

        Args:
            client: Gateway client used for the token handshake
            store: Durable snapshot storage for the credential
            token_validity: Lifetime the gateway states for a token
            safety_margin: Subtracted from the stated lifetime when caching
            clock: Returns the current aware UTC time
        """
        self.client = client
        self.store = store
        self.cache_lifetime = token_validity - safety_margin
        self._clock = clock
        self._credential = Credential()
        self._refresh_task: Optional[asyncio.Task] = None

    @property
    def credential(self) -> Credential:
        """Current credential snapshot (immutable)."""
        return self._credential

    @property
    def refresh_in_progress(self) -> bool:
        return self._refresh_task is not None

    async def load(self) -> None:
        """Warm the in-memory credential from the durable snapshot."""
        self._credential = await self.store.load()

    async def acquire_valid_credential(self) -> Credential:
        """
        Return a credential that is valid right now.

        Returns:
            Credential: Cached credential, or a freshly refreshed one

        Raises:
            ConfigurationError: If a refresh is needed but the gateway is not configured
            GatewaySessionError: If the refresh handshake fails
        """
        credential = self._credential
        if credential.is_valid(self._clock()):
            logger.debug("Using cached auth token")
            return credential

        if self._refresh_task is None:
            self.client.require_token_config()
            logger.info("Fetching new auth token...")
            self._refresh_task = asyncio.create_task(self._refresh())
            self._refresh_task.add_done_callback(self._collect_refresh_result)
        else:
            logger.info("Token refresh in progress, waiting...")

        # Shielded so that one cancelled caller does not abort everyone's refresh
        return await asyncio.shield(self._refresh_task)

    async def _refresh(self) -> Credential:
        try:
            token = await self.client.generate_token(self._credential.token)
            await self.client.activate_token(token)

            credential = Credential(token=token, expires_at=self._clock() + self.cache_lifetime)
            self._credential = credential

            try:
                await self.store.save(credential)
            except Exception as e:
                logger.error(f"Failed to save token snapshot: {e}")

            logger.info(f"Successfully cached new auth token (expires {format_datetime(credential.expires_at)})")
            return credential
        except Exception as e:
            logger.error(f"Error fetching auth token: {e}")
            raise
        finally:
            self._refresh_task = None

    @staticmethod
    def _collect_refresh_result(task: asyncio.Task) -> None:
        # Retrieve the outcome even when every waiter was cancelled; _refresh already logged it
        if not task.cancelled():
            task.exception()

    def status(self) -> Dict[str, Any]:
        """
        Describe the cached credential without touching the gateway.

        Returns:
            Dict: valid flag, human readable time left and expiry timestamp
        """
        credential = self._credential
        now = self._clock()
        if not credential.is_valid(now):
            return {"valid": False, "expiresIn": "expired", "expiresAt": None}

        remaining = (credential.expires_at - now).total_seconds()
        return {
            "valid": True,
            "expiresIn": format_duration(remaining),
            "expiresAt": format_datetime(credential.expires_at),
        }

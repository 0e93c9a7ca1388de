"""
HTTP client for the Pragati SMS gateway.
"""
import logging
from typing import List, Optional

import httpx

from smsrelay.core.exceptions import ConfigurationError, GatewaySessionError

logger = logging.getLogger("smsrelay.gateway")


class PragatiClient:
    """
    Thin wrapper around the three Pragati endpoints.

    The token endpoints authenticate with the account API key; the send
    endpoint authenticates with the current session token.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        base_url: Optional[str],
        api_key: Optional[str]
    ):
        """
        Initialize the gateway client.

        Args:
            http_client: Shared async HTTP client (carries the request timeout)
            base_url: Gateway base URL, e.g. https://api.pragati.example
            api_key: Account API key used for token management
        """
        self.http = http_client
        self.base_url = base_url.rstrip("/") if base_url else None
        self.api_key = api_key

    def require_token_config(self) -> None:
        """
        Raises:
            ConfigurationError: If the base URL or API key is not configured
        """
        if not self.base_url or not self.api_key:
            raise ConfigurationError("PRAGATI_API_BASE_URL or PRAGATI_API_KEY not configured")

    async def generate_token(self, old_token: Optional[str]) -> str:
        """
        Ask the gateway for a new session token, retiring the old one.

        Args:
            old_token: Currently cached token, if any

        Returns:
            str: The newly issued (not yet enabled) token

        Raises:
            GatewaySessionError: If the gateway rejects the request or omits the token
        """
        self.require_token_config()

        try:
            response = await self.http.post(
                f"{self.base_url}/api/sendsms/token",
                params={"action": "generate"},
                headers={"apikey": self.api_key},
                json={"old_token": old_token or ""},
            )
        except httpx.HTTPError as e:
            raise GatewaySessionError(f"Failed to get auth token: {e}") from e

        if not response.is_success:
            raise GatewaySessionError(
                f"Failed to get auth token: {response.status_code} {response.text}",
                details={"status_code": response.status_code}
            )

        try:
            token = response.json().get("token")
        except (ValueError, AttributeError) as e:
            raise GatewaySessionError(f"Unreadable token response: {e}") from e

        if not token:
            raise GatewaySessionError("Token not found in API response")

        return token

    async def activate_token(self, token: str) -> None:
        """
        Enable a freshly generated token so it can authorize sends.

        Raises:
            GatewaySessionError: If the gateway refuses to enable the token
        """
        self.require_token_config()

        try:
            response = await self.http.post(
                f"{self.base_url}/api/sendsms/token",
                params={"action": "enable", "token": token},
                headers={"apikey": self.api_key},
            )
        except httpx.HTTPError as e:
            raise GatewaySessionError(f"Failed to enable token: {e}") from e

        if not response.is_success:
            logger.warning(f"Gateway refused to enable token: HTTP {response.status_code}")
            raise GatewaySessionError(
                f"Failed to enable token: {response.status_code} {response.text}",
                details={"status_code": response.status_code}
            )

    async def send_sms(
        self,
        *,
        token: str,
        phone_numbers: List[str],
        sender_id: str,
        message_text: str,
        category: str,
        template_id: str
    ) -> httpx.Response:
        """
        Send one message text to up to one gateway-cap worth of numbers.

        The raw response is returned as-is; interpreting the status and body
        is the caller's job.
        """
        if not self.base_url:
            raise ConfigurationError("PRAGATI_API_BASE_URL not configured")

        return await self.http.get(
            f"{self.base_url}/sendsms",
            params={
                "to": ",".join(phone_numbers),
                "from": sender_id,
                "text": message_text,
                "category": category,
                "dlt-templateid": template_id,
            },
            headers={"Authorization": f"Bearer {token}"},
        )

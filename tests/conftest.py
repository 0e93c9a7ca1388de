import asyncio
import json
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import httpx
import pytest
import pytest_asyncio

from smsrelay.services.gateway.client import PragatiClient
from smsrelay.services.gateway.credential_store import Credential, FileCredentialStore
from smsrelay.services.gateway.session import SessionManager
from smsrelay.services.sms.sender import SMSSender

GATEWAY_URL = "https://gateway.test"
GATEWAY_API_KEY = "pragati-key"
SENDER_ID = "JAINSM"
TEMPLATE_ID = "1107160000000000001"


class FakeGateway:
    """Answers like the Pragati gateway and records every request."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.issued_tokens = 0
        self.generate_status = 200
        self.enable_status = 200
        self.token_latency = 0.01
        self.send_handler: Optional[Callable[[httpx.Request], httpx.Response]] = None

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.path == "/api/sendsms/token":
            await asyncio.sleep(self.token_latency)
            action = request.url.params.get("action")
            if action == "generate":
                if self.generate_status != 200:
                    return httpx.Response(self.generate_status, text="generate refused")
                self.issued_tokens += 1
                return httpx.Response(200, json={"token": f"tok-{self.issued_tokens}"})
            if action == "enable":
                if self.enable_status != 200:
                    return httpx.Response(self.enable_status, text="enable refused")
                return httpx.Response(200, json={"token": request.url.params.get("token")})

        if request.url.path == "/sendsms":
            if self.send_handler is not None:
                return self.send_handler(request)
            count = len(request.url.params["to"].split(","))
            codes = ",".join(["0"] * count)
            seqnos = ",".join(f"{len(self.sends())}{i:03d}" for i in range(count))
            return httpx.Response(200, text=f"guid=G{len(self.sends())}&errorcode={codes}&seqno={seqnos}")

        return httpx.Response(404, text="not found")

    def token_calls(self, action: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.url.path == "/api/sendsms/token" and r.url.params.get("action") == action
        ]

    def sends(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/sendsms"]

    @staticmethod
    def generate_body(request: httpx.Request) -> dict:
        return json.loads(request.content)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest_asyncio.fixture()
async def http_client(gateway) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(gateway)) as client:
        yield client


@pytest.fixture
def pragati_client(http_client) -> PragatiClient:
    return PragatiClient(http_client, base_url=GATEWAY_URL, api_key=GATEWAY_API_KEY)


@pytest.fixture
def credential_store(tmp_path) -> FileCredentialStore:
    return FileCredentialStore(tmp_path / "token-cache.json")


@pytest.fixture
def session_manager(pragati_client, credential_store) -> SessionManager:
    return SessionManager(pragati_client, credential_store)


@pytest.fixture
def valid_credential() -> Credential:
    return Credential(token="cached-token", expires_at=datetime.now(timezone.utc) + timedelta(days=3))


@pytest.fixture
def sms_sender(pragati_client, session_manager) -> SMSSender:
    return SMSSender(
        pragati_client,
        session_manager,
        sender_id=SENDER_ID,
        default_template_id=TEMPLATE_ID,
        batch_delay=0.0,
    )

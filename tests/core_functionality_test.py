import json
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI

from smsrelay.core.config import Settings, settings
from smsrelay.core.events import lifespan
from smsrelay.services.gateway.session import SessionManager
from smsrelay.services.sms.sender import SMSSender


@pytest.fixture
def configured_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "PRAGATI_API_BASE_URL", "https://gateway.test")
    monkeypatch.setattr(settings, "PRAGATI_API_KEY", "k")
    monkeypatch.setattr(settings, "SMS_SENDER_ID", "JAINSM")
    monkeypatch.setattr(settings, "SMS_DEFAULT_TEMPLATE_ID", "TPL")
    monkeypatch.setattr(settings, "TOKEN_CACHE_FILE", str(tmp_path / "token-cache.json"))
    return settings


def test_default_settings_match_gateway_limits():
    defaults = Settings(_env_file=None)
    assert defaults.GATEWAY_RECIPIENT_CAP == 100
    assert defaults.MAX_RECIPIENTS_PER_REQUEST == 1000
    assert defaults.BATCH_DELAY_SECONDS == 0.5
    assert defaults.TOKEN_VALIDITY_DAYS - defaults.TOKEN_SAFETY_MARGIN_DAYS == 6
    assert defaults.SMS_CATEGORY == "bulk"


@pytest.mark.asyncio
async def test_startup_builds_services_and_loads_token_cache(configured_settings):
    expiry = datetime.now(timezone.utc) + timedelta(days=2)
    with open(configured_settings.TOKEN_CACHE_FILE, "w") as f:
        json.dump({"token": "warm", "expiry": int(expiry.timestamp() * 1000)}, f)

    app = FastAPI()
    async with lifespan(app):
        assert isinstance(app.state.session_manager, SessionManager)
        assert isinstance(app.state.sms_sender, SMSSender)
        assert app.state.sms_sender.sender_id == "JAINSM"
        assert app.state.sms_sender.recipient_cap == 100

        credential = await app.state.session_manager.acquire_valid_credential()
        assert credential.token == "warm"

    assert app.state.http_client.is_closed


@pytest.mark.asyncio
async def test_startup_survives_missing_configuration(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "PRAGATI_API_BASE_URL", None)
    monkeypatch.setattr(settings, "TOKEN_CACHE_FILE", str(tmp_path / "absent.json"))

    app = FastAPI()
    async with lifespan(app):
        assert app.state.session_manager.status()["valid"] is False


@pytest.mark.asyncio
async def test_startup_survives_unusable_token_cache(configured_settings):
    with open(configured_settings.TOKEN_CACHE_FILE, "w") as f:
        f.write('{"token": "warm", "expiry": 1e300}')

    app = FastAPI()
    async with lifespan(app):
        assert app.state.session_manager.credential.token is None
        assert app.state.session_manager.status()["valid"] is False

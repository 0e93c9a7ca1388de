"""
Durable snapshot of the gateway session token.
"""
import asyncio
import json
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from smsrelay.utils.datetime import from_epoch_millis, to_epoch_millis

logger = logging.getLogger("smsrelay.credentials")

_NEVER = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class Credential:
    """Gateway session token and the instant it stops being usable."""
    token: Optional[str] = None
    expires_at: datetime = field(default=_NEVER)

    def is_valid(self, now: datetime) -> bool:
        """A credential without a token is always expired."""
        return bool(self.token) and now < self.expires_at

    def to_snapshot(self) -> dict:
        return {"token": self.token, "expiry": to_epoch_millis(self.expires_at)}

    @classmethod
    def from_snapshot(cls, data: dict) -> "Credential":
        token = data.get("token")
        if token is not None and not isinstance(token, str):
            raise ValueError("token must be a string")
        expiry = float(data.get("expiry") or 0)
        if not math.isfinite(expiry):
            raise ValueError(f"expiry is not a finite number: {expiry}")
        return cls(token=token or None, expires_at=from_epoch_millis(expiry))


class CredentialStore:
    """
    Base class for credential snapshot storage.

    Subclasses load and save a single snapshot record. Loading never fails:
    a missing or unreadable snapshot yields an empty credential.
    """

    async def load(self) -> Credential:
        raise NotImplementedError

    async def save(self, credential: Credential) -> None:
        raise NotImplementedError


class FileCredentialStore(CredentialStore):
    """Keeps the snapshot as a small JSON file, compatible with `.token-cache.json`."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def load(self) -> Credential:
        return await asyncio.to_thread(self._read)

    async def save(self, credential: Credential) -> None:
        await asyncio.to_thread(self._write, credential)

    def _read(self) -> Credential:
        if not self.path.exists():
            return Credential()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            credential = Credential.from_snapshot(data)
        except (OSError, ValueError, TypeError, AttributeError, OverflowError) as e:
            logger.warning(f"Failed to load token snapshot from {self.path}: {e}")
            return Credential()

        logger.info(f"Loaded cached token from {self.path}")
        return credential

    def _write(self, credential: Credential) -> None:
        self.path.write_text(json.dumps(credential.to_snapshot(), indent=2), encoding="utf-8")
        logger.info(f"Saved token snapshot to {self.path}")

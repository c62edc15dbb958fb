from __future__ import annotations

from typing import Protocol

from config import config
from domain.errors import InvalidCredentialError


class CredentialProvider(Protocol):
    def api_key(self) -> str: ...


class StaticCredentialProvider(CredentialProvider):
    def __init__(self, key: str) -> None:
        self._key = key

    def api_key(self) -> str:
        return _require_key(self._key)


class SettingsCredentialProvider(CredentialProvider):
    """Reads ``API_KEY`` from the environment or the local ``.env`` file."""

    def api_key(self) -> str:
        return _require_key(config().api_key)


def _require_key(value: str | None) -> str:
    key = (value or "").strip()
    if not key:
        raise InvalidCredentialError("API key not found")
    return key


__all__ = ["CredentialProvider", "SettingsCredentialProvider", "StaticCredentialProvider"]

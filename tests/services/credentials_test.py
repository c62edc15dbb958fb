from __future__ import annotations

from pathlib import Path

import pytest

from config import config
from domain.errors import InvalidCredentialError
from services.credentials import SettingsCredentialProvider, StaticCredentialProvider


def test_settings_provider_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_KEY", "from-env")
    config.cache_clear()

    assert SettingsCredentialProvider().api_key() == "from-env"


def test_settings_provider_reads_dotenv_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("API_KEY=from-file\nUNRELATED=1\n", encoding="utf-8")

    assert SettingsCredentialProvider().api_key() == "from-file"


def test_settings_provider_raises_when_key_missing() -> None:
    with pytest.raises(InvalidCredentialError):
        SettingsCredentialProvider().api_key()


@pytest.mark.parametrize("key", ["", "   "])
def test_static_provider_rejects_blank_key(key: str) -> None:
    with pytest.raises(InvalidCredentialError):
        StaticCredentialProvider(key).api_key()


def test_static_provider_strips_whitespace() -> None:
    assert StaticCredentialProvider(" abc \n").api_key() == "abc"

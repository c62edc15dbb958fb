from pathlib import Path
from typing import Generator

import pytest

from config import config
from services.rate_cache import RateCache
from tests.helpers.fakes import FakeClock


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    # Keep a developer's real .env and API_KEY out of the tests.
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("API_KEY", raising=False)
    config.cache_clear()
    yield
    config.cache_clear()


@pytest.fixture(scope="function")
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="function")
def rate_cache() -> RateCache:
    return RateCache()

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Protocol

from config import config
from domain.rates import ConversionResult, RateSnapshot, convert

from .exchange_rate_client import ExchangeRateAPIClient
from .rate_cache import RateCache

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class LatestRatesClient(Protocol):
    def get_latest_rates(self, *, api_key: str, base_currency: str) -> RateSnapshot: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RateService:
    def __init__(
        self,
        client: LatestRatesClient,
        cache: RateCache,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self.client = client
        self.cache = cache
        self.clock = clock

    def fetch_rates(self, api_key: str, base_currency: str) -> RateSnapshot:
        base = base_currency.upper()
        cached = self.cache.lookup(base)
        if cached is not None and cached.is_fresh(self.clock()):
            logger.debug("Rate cache hit for %s (valid until %s)", base, cached.next_update_at)
            return cached

        logger.debug("Rate cache miss for %s", base)
        snapshot = self.client.get_latest_rates(api_key=api_key, base_currency=base)
        if snapshot.next_update_at is not None:
            self.cache.store(base, snapshot)
            logger.info("Cached %d rates for %s until %s", len(snapshot.rates), base, snapshot.next_update_at)
        return snapshot

    def convert(self, api_key: str, source_currency: str, target_currency: str, amount: float) -> ConversionResult:
        source = source_currency.upper()
        target = target_currency.upper()
        snapshot = self.fetch_rates(api_key, source)
        rate = snapshot.rate_for(target)
        return ConversionResult(
            source_currency=source,
            target_currency=target,
            source_amount=amount,
            converted_amount=convert(rate, amount),
            rate=rate,
        )


def build_default_service(cache: RateCache | None = None) -> RateService:
    settings = config()
    client = ExchangeRateAPIClient(
        base_url=settings.exchange_rate_base_url,
        timeout=settings.request_timeout_seconds,
    )
    return RateService(client=client, cache=cache if cache is not None else RateCache())


__all__ = ["LatestRatesClient", "RateService", "build_default_service", "utc_now"]

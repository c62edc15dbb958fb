from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from domain.errors import ExchangeRateError
from domain.rates import RateSnapshot

DEFAULT_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@dataclass
class FakeClock:
    now: datetime = DEFAULT_NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@dataclass
class FakeRatesClient:
    """Serves canned snapshots and records every call it receives."""

    snapshots: dict[str, RateSnapshot] = field(default_factory=dict)
    error: ExchangeRateError | None = None
    calls: list[tuple[str, str]] = field(default_factory=list)

    def get_latest_rates(self, *, api_key: str, base_currency: str) -> RateSnapshot:
        self.calls.append((api_key, base_currency))
        if self.error is not None:
            raise self.error
        return self.snapshots[base_currency]


def make_snapshot(
    base: str = "USD",
    rates: dict[str, float] | None = None,
    *,
    next_update_at: datetime | None = DEFAULT_NOW + timedelta(hours=6),
) -> RateSnapshot:
    return RateSnapshot(
        base_currency=base,
        rates=rates if rates is not None else {"USD": 1.0, "EUR": 0.9, "GBP": 0.8},
        next_update_at=next_update_at,
        fetched_at=DEFAULT_NOW,
    )

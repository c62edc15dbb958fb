from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Mapping

from .errors import CurrencyNotFoundError


@dataclass(frozen=True)
class RateSnapshot:
    """One upstream rate table for a single base currency plus its validity window."""

    base_currency: str
    rates: Mapping[str, float]
    next_update_at: datetime | None = None
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.rates:
            msg = f"Rate table for {self.base_currency} must not be empty"
            raise ValueError(msg)
        object.__setattr__(self, "base_currency", self.base_currency.upper())
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    def is_fresh(self, now: datetime) -> bool:
        # Snapshots without a known expiry are never reused.
        return self.next_update_at is not None and now < self.next_update_at

    def rate_for(self, currency: str) -> float:
        try:
            return self.rates[currency]
        except KeyError as exc:
            raise CurrencyNotFoundError(currency) from exc


@dataclass(frozen=True)
class ConversionResult:
    source_currency: str
    target_currency: str
    source_amount: float
    converted_amount: float
    rate: float


def convert(rate: float, amount: float) -> float:
    return amount * rate


__all__ = ["ConversionResult", "RateSnapshot", "convert"]

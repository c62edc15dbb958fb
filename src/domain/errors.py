from __future__ import annotations

from typing import Any


class ExchangeRateError(RuntimeError):
    """Base class for every failure raised while resolving a conversion."""

    stage = "conversion"


class InvalidCredentialError(ExchangeRateError):
    stage = "credentials"


class TransportError(ExchangeRateError):
    stage = "transport"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ExchangeRateError):
    stage = "response"

    def __init__(self, message: str, *, payload: Any | None = None) -> None:
        super().__init__(message)
        self.payload = payload


class UpstreamAPIError(ExchangeRateError):
    stage = "upstream"

    def __init__(self, error_type: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(error_type)
        self.error_type = error_type
        self.status_code = status_code
        self.payload = payload


class CurrencyNotFoundError(ExchangeRateError):
    stage = "currency"

    def __init__(self, currency: str) -> None:
        super().__init__(f"Currency {currency} not found in rate table")
        self.currency = currency


class TimestampParseError(ExchangeRateError):
    stage = "timestamp"

    def __init__(self, raw: str | None) -> None:
        super().__init__(f"Unable to parse next update timestamp: {raw!r}")
        self.raw = raw


# Upstream error types that mean the key itself is unusable.
CREDENTIAL_ERROR_TYPES = frozenset({"invalid-key", "inactive-account"})


__all__ = [
    "CREDENTIAL_ERROR_TYPES",
    "CurrencyNotFoundError",
    "ExchangeRateError",
    "InvalidCredentialError",
    "MalformedResponseError",
    "TimestampParseError",
    "TransportError",
    "UpstreamAPIError",
]

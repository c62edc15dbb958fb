from __future__ import annotations

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import requests
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from requests import Response

from domain.errors import (
    InvalidCredentialError,
    MalformedResponseError,
    TimestampParseError,
    TransportError,
    UpstreamAPIError,
)
from domain.rates import RateSnapshot

logger = logging.getLogger(__name__)

# API docs: https://www.exchangerate-api.com/docs/standard-requests
DEFAULT_BASE_URL = "https://v6.exchangerate-api.com/v6"


class _EnvelopePayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    result: str
    error_type: str | None = Field(default=None, alias="error-type")
    base_code: str | None = None
    rates: dict[str, float] | None = Field(default=None, validation_alias=AliasChoices("conversion_rates", "rates"))
    time_next_update_utc: str | None = None


class _BarePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    base_code: str | None = None
    rates: dict[str, float] | None = Field(default=None, validation_alias=AliasChoices("conversion_rates", "rates"))
    time_next_update_utc: str | None = None


def parse_next_update(raw: str | None) -> datetime:
    if not raw:
        raise TimestampParseError(raw)
    # RFC 1123 names are English regardless of LC_TIME.
    try:
        parsed = parsedate_to_datetime(raw)
    except (TypeError, ValueError) as exc:
        raise TimestampParseError(raw) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_latest_payload(payload: Any, *, base_currency: str, fetched_at: datetime | None = None) -> RateSnapshot:
    """Turn a ``/latest`` response body into a snapshot.

    The enveloped schema (with ``result``) is tried first; bodies without an
    envelope fall back to the bare rate table. A non-empty rate table is the
    only success signal.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError("Exchange rate API returned unexpected payload type", payload=payload)

    parsed: _EnvelopePayload | _BarePayload
    try:
        parsed = _EnvelopePayload.model_validate(payload)
    except ValidationError:
        try:
            parsed = _BarePayload.model_validate(payload)
        except ValidationError as exc:
            raise MalformedResponseError("Exchange rate API payload has invalid fields", payload=payload) from exc
    else:
        if parsed.result != "success":
            raise UpstreamAPIError(parsed.error_type or "unknown-error", payload=payload)

    if not parsed.rates:
        raise MalformedResponseError("Invalid API key or malformed response: rate table is empty", payload=payload)

    try:
        next_update_at: datetime | None = parse_next_update(parsed.time_next_update_utc)
    except TimestampParseError as exc:
        logger.warning("%s; snapshot for %s will not be cached", exc, base_currency)
        next_update_at = None

    return RateSnapshot(
        base_currency=(parsed.base_code or base_currency).upper(),
        rates={code.upper(): rate for code, rate in parsed.rates.items()},
        next_update_at=next_update_at,
        fetched_at=fetched_at or datetime.now(timezone.utc),
    )


class ExchangeRateAPIClient:
    """Minimal ExchangeRate-API client for the ``/latest`` endpoint."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if timeout <= 0:
            msg = "timeout must be > 0"
            raise ValueError(msg)

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def get_latest_rates(self, *, api_key: str, base_currency: str) -> RateSnapshot:
        if not api_key:
            raise InvalidCredentialError("API key must be provided")
        if not base_currency:
            msg = "base_currency must be provided"
            raise ValueError(msg)

        base = base_currency.upper()
        payload = self._request("GET", f"/{api_key}/latest/{base}")
        return parse_latest_payload(payload, base_currency=base)

    def _request(self, method: str, path: str) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("Requesting %s %s", method, self._redact(path))
        try:
            response = self._session.request(method, url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            error_type, payload = self._extract_error(resp)
            if error_type is not None:
                raise UpstreamAPIError(error_type, status_code=status_code, payload=payload) from exc
            raise TransportError(f"Exchange rate API returned HTTP {status_code}", status_code=status_code) from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise TransportError(f"Exchange rate API request failed: {exc}", status_code=status_code) from exc

        if response.status_code != requests.codes.ok:
            status_code = response.status_code
            raise TransportError(f"Exchange rate API returned HTTP {status_code}", status_code=status_code)

        try:
            return response.json()
        # requests' JSONDecodeError is both a ValueError and a RequestException.
        except ValueError as exc:
            raise MalformedResponseError("Exchange rate API returned invalid JSON", payload=response.text) from exc
        except requests.RequestException as exc:
            raise TransportError(f"Unable to read exchange rate API response: {exc}") from exc

    @staticmethod
    def _extract_error(response: Response | None) -> tuple[str | None, Any | None]:
        if response is None:
            return None, None

        try:
            payload = response.json()
        except ValueError:
            return None, response.text
        if isinstance(payload, dict) and payload.get("result") == "error":
            return str(payload.get("error-type") or "unknown-error"), payload
        return None, payload

    @staticmethod
    def _redact(path: str) -> str:
        parts = path.split("/")
        if len(parts) > 1 and parts[1]:
            parts[1] = "***"
        return "/".join(parts)


__all__ = ["DEFAULT_BASE_URL", "ExchangeRateAPIClient", "parse_latest_payload", "parse_next_update"]

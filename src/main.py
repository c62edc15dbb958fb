from __future__ import annotations

import argparse
import logging
import math
import sys
from dataclasses import dataclass
from typing import Callable, Sequence, TextIO

from domain.errors import CREDENTIAL_ERROR_TYPES, ExchangeRateError, InvalidCredentialError, UpstreamAPIError
from services.credentials import CredentialProvider, SettingsCredentialProvider
from services.rate_service import RateService, build_default_service
from utils.formatting import render_conversion

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class InvalidInputError(ValueError):
    stage = "input"


@dataclass(frozen=True)
class ConversionRequest:
    source_currency: str
    target_currency: str
    amount: float


def parse_currency(raw: str, *, label: str) -> str:
    code = raw.strip().upper()
    if not code or not code.isalpha():
        raise InvalidInputError(f"Invalid {label} currency: {raw!r}")
    return code


def parse_amount(raw: str) -> float:
    try:
        amount = float(raw.strip())
    except ValueError as exc:
        raise InvalidInputError(f"Invalid amount: {raw!r}") from exc
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidInputError("Amount must be positive")
    return amount


def build_request(source: str, target: str, amount: str) -> ConversionRequest:
    return ConversionRequest(
        source_currency=parse_currency(source, label="source"),
        target_currency=parse_currency(target, label="target"),
        amount=parse_amount(amount),
    )


def is_fatal(exc: Exception) -> bool:
    if isinstance(exc, InvalidCredentialError):
        return True
    return isinstance(exc, UpstreamAPIError) and exc.error_type in CREDENTIAL_ERROR_TYPES


def run_once(
    service: RateService,
    credentials: CredentialProvider,
    request: ConversionRequest,
    *,
    out: TextIO | None = None,
) -> None:
    out = out if out is not None else sys.stdout
    api_key = credentials.api_key()
    result = service.convert(api_key, request.source_currency, request.target_currency, request.amount)
    print(render_conversion(result), file=out)


def report_error(exc: Exception, *, err: TextIO | None = None) -> None:
    err = err if err is not None else sys.stderr
    stage = getattr(exc, "stage", "conversion")
    print(f"Error [{stage}]: {exc}", file=err)


def interactive_loop(
    service: RateService,
    credentials: CredentialProvider,
    *,
    prompt: Callable[[str], str] = input,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    while True:
        try:
            source = prompt("Source currency: ")
            target = prompt("Target currency: ")
            amount = prompt("Amount to convert: ")
        except (EOFError, KeyboardInterrupt):
            print(file=out)
            return 0

        try:
            run_once(service, credentials, build_request(source, target, amount), out=out)
        except (ExchangeRateError, InvalidInputError) as exc:
            report_error(exc, err=err)
            if is_fatal(exc):
                return 1


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Convert an amount between currencies using ExchangeRate-API.")
    parser.add_argument("--from", dest="source", help="Source currency code, e.g. USD.")
    parser.add_argument("--to", dest="target", help="Target currency code, e.g. EUR.")
    parser.add_argument("--amount", help="Positive amount to convert.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)

    service = build_default_service()
    credentials = SettingsCredentialProvider()

    one_shot = (args.source, args.target, args.amount)
    if not any(one_shot):
        return interactive_loop(service, credentials)
    if not all(one_shot):
        parser.error("--from, --to and --amount must be given together")

    try:
        run_once(service, credentials, build_request(args.source, args.target, args.amount))
    except (ExchangeRateError, InvalidInputError) as exc:
        logger.debug("Conversion failed", exc_info=exc)
        report_error(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

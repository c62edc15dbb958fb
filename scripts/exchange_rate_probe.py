# flake8: noqa E402
# Run via uv to load project deps, e.g.:
# uv run scripts/exchange_rate_probe.py --base EUR --quote USD
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

# Ensure the src directory is importable when the script is invoked via uv/python directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from services.credentials import SettingsCredentialProvider
from services.rate_service import build_default_service


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch the latest rate table from ExchangeRate-API.")
    parser.add_argument("--base", default="USD", help="Base currency code (default: USD).")
    parser.add_argument("--quote", default=None, help="Only print the rate for this currency.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    service = build_default_service()
    snapshot = service.fetch_rates(SettingsCredentialProvider().api_key(), args.base)

    rates: dict[str, Any] = dict(snapshot.rates)
    if args.quote:
        quote = args.quote.upper()
        rates = {quote: snapshot.rate_for(quote)}

    payload: dict[str, Any] = {
        "base": snapshot.base_currency,
        "fetched_at": snapshot.fetched_at.isoformat(),
        "next_update_at": snapshot.next_update_at.isoformat() if snapshot.next_update_at else None,
        "rates": rates,
    }
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()

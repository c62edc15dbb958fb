from __future__ import annotations

from datetime import timedelta

import pytest

from domain.errors import CurrencyNotFoundError
from domain.rates import RateSnapshot, convert
from tests.helpers.fakes import DEFAULT_NOW, make_snapshot


def test_snapshot_rejects_empty_rate_table() -> None:
    with pytest.raises(ValueError):
        RateSnapshot(base_currency="USD", rates={})


def test_snapshot_normalizes_base_and_freezes_rates() -> None:
    rates = {"EUR": 0.9}
    snapshot = RateSnapshot(base_currency="usd", rates=rates)
    rates["GBP"] = 0.8

    assert snapshot.base_currency == "USD"
    assert dict(snapshot.rates) == {"EUR": 0.9}
    with pytest.raises(TypeError):
        snapshot.rates["JPY"] = 150.0  # type: ignore[index]


def test_is_fresh_respects_next_update_boundary() -> None:
    snapshot = make_snapshot(next_update_at=DEFAULT_NOW + timedelta(minutes=1))

    assert snapshot.is_fresh(DEFAULT_NOW)
    assert not snapshot.is_fresh(DEFAULT_NOW + timedelta(minutes=1))


def test_snapshot_without_expiry_is_never_fresh() -> None:
    assert not make_snapshot(next_update_at=None).is_fresh(DEFAULT_NOW)


def test_rate_for_raises_for_unknown_code() -> None:
    snapshot = make_snapshot(rates={"EUR": 0.9, "GBP": 0.8})

    with pytest.raises(CurrencyNotFoundError) as excinfo:
        snapshot.rate_for("XYZ")
    assert excinfo.value.currency == "XYZ"


def test_rate_for_returns_rate_or_raises() -> None:
    snapshot = make_snapshot(rates={"EUR": 0.9})

    assert snapshot.rate_for("EUR") == 0.9
    with pytest.raises(CurrencyNotFoundError):
        snapshot.rate_for("GBP")


@pytest.mark.parametrize(("rate", "amount"), [(0.9, 100.0), (1.1, 0.3), (151.37, 12.5)])
def test_convert_is_plain_multiplication(rate: float, amount: float) -> None:
    assert convert(rate, amount) == amount * rate

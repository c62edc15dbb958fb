from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, localcontext

from domain.rates import ConversionResult

CENTS = Decimal("0.01")


def format_amount(value: float) -> str:
    # repr gives the shortest decimal that round-trips, so 90.00000000000001 -> 90.00
    amount = Decimal(repr(value))
    with localcontext() as ctx:
        # Room for every integer digit plus cents; the default 28 digits overflow near 1e26.
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        cents = amount.quantize(CENTS, rounding=ROUND_HALF_EVEN)
    return f"{cents:.2f}"


def render_conversion(result: ConversionResult) -> str:
    return (
        f"{format_amount(result.source_amount)} {result.source_currency} = "
        f"{format_amount(result.converted_amount)} {result.target_currency}"
    )

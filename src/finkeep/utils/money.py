"""Money arithmetic helpers."""

from decimal import Decimal, ROUND_HALF_UP

# Scale of every engine-computed amount (matches the Numeric(18, 4) columns)
MONEY_QUANTUM = Decimal("0.0001")
CENT = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    """Round an amount to the stored money scale."""
    return Decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def split_evenly(total: Decimal, parts: int) -> Decimal:
    """Return the equal share of ``total`` over ``parts``.

    No remainder is redistributed: ``share * parts`` may differ from
    ``total`` by less than one cent.
    """
    if parts < 1:
        raise ValueError("parts must be at least 1")
    return quantize_money(Decimal(total) / parts)


def to_decimal(value) -> Decimal:
    """Coerce ints, strings and Decimals to Decimal (floats via their repr)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def format_money(value: Decimal) -> str:
    """Render an amount rounded to cents with thousands separators."""
    return f"{Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP):,.2f}"

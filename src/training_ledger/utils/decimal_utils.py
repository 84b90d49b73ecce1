"""Decimal utilities for money and rate handling.

All monetary calculations use Decimal to avoid floating-point drift in tax
and net income figures.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CURRENCY_SYMBOLS = {"€", "$", "£"}

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def parse_amount(raw_amount: str) -> Decimal:
    """Parse a signed amount string such as "-120.50", "400€" or "1.234,56".

    Raises:
        ValueError: If the amount cannot be parsed or is not finite.
    """
    if raw_amount is None or not str(raw_amount).strip():
        raise ValueError("Empty amount string")

    amount_str = str(raw_amount).strip()
    for symbol in CURRENCY_SYMBOLS:
        amount_str = amount_str.replace(symbol, "")
    amount_str = amount_str.replace(" ", "")

    # European grouping: 1.234,56 -> 1234.56, 12,5 -> 12.5
    if "," in amount_str:
        amount_str = amount_str.replace(".", "").replace(",", ".")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Cannot parse amount '{raw_amount}': {e}") from e

    if not amount.is_finite():
        raise ValueError(f"Amount must be finite: '{raw_amount}'")
    return amount


def percent_of(amount: Decimal, rate_percent: Decimal) -> Decimal:
    """Return rate_percent % of amount, unrounded."""
    return amount * rate_percent / HUNDRED


def format_currency(
    amount: Decimal,
    symbol: str = "€",
    decimal_places: int = 2,
) -> str:
    """Format an amount for display, e.g. "1234.50€" or "-80.00€"."""
    quantize_str = "1" if decimal_places == 0 else "0." + "0" * decimal_places
    rounded = amount.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)
    return f"{rounded}{symbol}"

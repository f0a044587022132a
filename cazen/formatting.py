"""Display and input helpers for amounts and percentages (pt-BR conventions)."""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

CURRENCY_SYMBOLS = {
    "BRL": "R$",
    "USD": "US$",
    "EUR": "€",
}


def format_currency(amount: Union[Decimal, int, float], currency_code: str = "BRL") -> str:
    """
    Format an amount the way the Brazilian locale does.

    >>> format_currency(Decimal("1234.5"))
    'R$ 1.234,50'
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    integer, _, cents = f"{abs(value):.2f}".partition(".")

    groups = []
    while len(integer) > 3:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    groups.insert(0, integer)

    symbol = CURRENCY_SYMBOLS.get(currency_code.upper(), currency_code.upper())
    return f"{sign}{symbol} {'.'.join(groups)},{cents}"


def format_percentage(value: float, digits: int = 1) -> str:
    """Percentage with fixed decimals; NaN and infinities render as 'n/a'."""
    if not math.isfinite(value):
        return "n/a"
    return f"{value:.{digits}f}%"


def amount_from_input(value: Optional[float]) -> Optional[Decimal]:
    """
    Amount typed into a number field, in cents.

    An empty field is None. Zero is a real amount and stays zero.
    """
    if value is None:
        return None
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

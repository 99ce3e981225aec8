"""
Parse/format boundary for Brazilian currency and percentage values.

Text such as "R$ 4.500,00" or "10,99%" is turned into Decimal here, before it
reaches the calculation engine, and engine results are rounded here when they
leave it. The engine never sees strings and never rounds.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Optional

CENTS = Decimal("0.01")
PERCENT_PLACES = Decimal("0.0001")
HUNDRED = Decimal("100")

_CURRENCY_PREFIX = re.compile(r"R\$\s*")
# 4.500 / 1.234.567: dots only between groups of exactly three digits
_GROUPED = re.compile(r"-?\d{1,3}(\.\d{3})+")


def _strip(text: str) -> str:
    return _CURRENCY_PREFIX.sub("", text).replace(" ", "").strip()


def _money_text(text: str) -> str:
    """
    Normalize pt-BR or plain money text to a Decimal literal.

    A dot is a thousands separator when a comma is present or when every group
    after it has three digits ("4.500"); otherwise it is the decimal point
    ("4500.00", "1234.5").
    """
    clean = _strip(text)

    if "," in clean:
        # Brazilian format: 4.500,00
        integer, _, cents = clean.partition(",")
        if "." in integer and not _GROUPED.fullmatch(integer):
            raise ValueError(f"Ambiguous amount: {text!r}")
        return integer.replace(".", "") + "." + cents
    if _GROUPED.fullmatch(clean):
        return clean.replace(".", "")
    return clean


def _points_text(text: str) -> str:
    """Normalize percentage text: a comma is the decimal mark, else the dot is."""
    clean = _strip(text.replace("%", ""))
    if "," in clean:
        return clean.replace(".", "").replace(",", ".")
    return clean


def _to_decimal(value: Any, what: str, normalize: Callable[[str], str]) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"Invalid {what}: {value!r}")
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, (int, float)):
            result = Decimal(str(value))
        elif isinstance(value, str):
            result = Decimal(normalize(value))
        else:
            raise ValueError(f"Invalid {what}: {value!r}")
    except InvalidOperation:
        raise ValueError(f"Invalid {what}: {value!r}")

    if not result.is_finite():
        raise ValueError(f"Invalid {what}: {value!r}")
    return result


def parse_currency(value: Any) -> Decimal:
    """
    Parse a money amount.

    Accepts numbers and text like "R$ 4.500,00", "4.500", "4500.00", "1234.5".

    Raises:
        ValueError: If the value is not a finite amount
    """
    return _to_decimal(value, "currency value", _money_text)


def parse_points(value: Any) -> Decimal:
    """
    Parse a percentage and keep it in points.

    "20,5", "20.5%" and 20.5 all give Decimal("20.5").

    Raises:
        ValueError: If the value is not a finite percentage
    """
    return _to_decimal(value, "percentage", _points_text)


def parse_percentage(value: Any) -> Decimal:
    """
    Parse a percentage in points and return it as a fraction.

    "10,99", "10.99%" and 10.99 all give Decimal("0.1099").

    Raises:
        ValueError: If the value is not a finite percentage
    """
    return parse_points(value) / HUNDRED


def quantize_money(value: Decimal) -> Decimal:
    """Round a money amount to cents (half up)."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def money(value: Optional[Decimal]) -> Optional[float]:
    """Presentation value for a money amount."""
    if value is None:
        return None
    return float(quantize_money(value))


def percent(value: Optional[Decimal]) -> Optional[float]:
    """Presentation value for a figure already expressed in percent."""
    if value is None:
        return None
    return float(value.quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP))


def fraction_as_percent(value: Optional[Decimal]) -> Optional[float]:
    """Presentation value (in percent) for a rate held as a fraction."""
    if value is None:
        return None
    return percent(value * HUNDRED)


def format_brl(value: Decimal) -> str:
    """
    Format an amount as Brazilian Real: R$ 4.500,00.

    Negative amounts keep the sign in front of the symbol.
    """
    rounded = quantize_money(value)
    sign = "-" if rounded < 0 else ""
    integer, _, cents = f"{abs(rounded):.2f}".partition(".")
    grouped = f"{int(integer):,}".replace(",", ".")
    return f"{sign}R$ {grouped},{cents}"

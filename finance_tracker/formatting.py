"""Display helpers for money and dates.

They mirror the pt-BR conventions of the app screens (``R$ 1.234,56`` and
``DD/MM``) and hold no business logic.
"""
from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .validation import parse_date

CENTS = Decimal("0.01")


def format_money(amount: Decimal | int | float, symbol: str = "R$") -> str:
    """Format ``amount`` with ``.`` thousands and ``,`` decimal separators."""

    value = Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, cents = f"{abs(value):,.2f}".partition(".")
    return f"{sign}{symbol} {whole.replace(',', '.')},{cents}"


def format_date(value: Optional[date | str]) -> str:
    """Return ``DD/MM`` for a date or ISO string; empty input yields ``""``."""

    parsed = parse_date(value) if value else None
    if parsed is None:
        return ""
    return parsed.strftime("%d/%m")


def format_percent(percent: Decimal) -> str:
    """Signed percentage with one decimal place, e.g. ``+12.5%``."""

    rounded = percent.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    signal = "+" if rounded > 0 else ""
    return f"{signal}{rounded}%"

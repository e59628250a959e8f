"""Display formatting for money and rates.

Numbers always use western digits, even in Arabic.
"""
from __future__ import annotations

from typing import Literal

from shibr.config import get_config
from shibr.finance.rounding import round2

ARABIC_RIYAL_SYMBOL = "ر.س"


def format_currency(amount: float, language: Literal["en", "ar"] = "en") -> str:
    """Format ``amount`` with exactly two decimals and the currency marker.

    >>> format_currency(1234.5)
    'SAR 1,234.50'
    """
    formatted = f"{round2(amount):,.2f}"
    if language == "ar":
        return f"{formatted} {ARABIC_RIYAL_SYMBOL}"
    return f"{get_config().currency_code} {formatted}"


def format_rate(rate: float) -> str:
    """Percentage without trailing zeros: 8 -> '8%', 12.5 -> '12.5%'."""
    return f"{rate:g}%"

"""Display formatting for valuation figures.

All formatters accept missing or non-numeric input and fall back to a zero
rendering instead of raising, so a NaN never reaches the screen.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional, Union

import pandas as pd

from portfolio_valuation.data_models.display_theme import PnLTheme, StatusColor

logger = logging.getLogger(__name__)

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "CAD": "CA$",
    "AUD": "A$",
}

# enough digits to write out any finite float with its cents
DECIMAL_PRECISION = 400

DateLike = Union[str, datetime, pd.Timestamp]


def _usable(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    return v if math.isfinite(v) else None


def format_currency(amount: Optional[float], currency: str = "USD") -> str:
    """Format `amount` as an en-US currency string with 2 fraction digits.

    >>> format_currency(1234.5)
    '$1,234.50'
    >>> format_currency(-5)
    '-$5.00'
    """
    v = _usable(amount)
    if v is None:
        return "$0.00"

    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        quantized = Decimal(repr(v)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        sign = "-" if quantized < 0 else ""
        return f"{sign}{symbol}{abs(quantized):,.2f}"


def format_percentage(value: Optional[float], decimals: int = 2) -> str:
    """Format a percentage with an explicit sign.

    Non-negative values (zero included) get a leading `+`.
    """
    v = _usable(value)
    if v is None:
        return "0.00%"
    if v == 0:
        v = 0.0
    prefix = "+" if v >= 0 else ""
    return f"{prefix}{v:.{decimals}f}%"


def get_pnl_color(pnl: Optional[float], theme: Optional[PnLTheme] = None) -> str:
    """Pick the colour token for a P&L figure; zero and missing are neutral."""
    theme = theme or PnLTheme()
    v = _usable(pnl)
    if v is None:
        return theme.neutral
    if v > 0:
        return theme.positive
    if v < 0:
        return theme.negative
    return theme.neutral


def _to_datetime(value: DateLike) -> Optional[pd.Timestamp]:
    try:
        ts = pd.to_datetime(value)
    except (ValueError, TypeError):
        return None
    if ts is pd.NaT:
        return None
    return ts


def format_date(value: DateLike) -> str:
    """Render a date as e.g. `Jan 5, 2025`; unparseable input is returned as-is."""
    ts = _to_datetime(value)
    if ts is None:
        logger.debug("Could not parse date %r", value)
        return str(value)
    return f"{ts:%b} {ts.day}, {ts.year}"


def format_date_time(value: DateLike) -> str:
    """Render a timestamp as e.g. `Jan 5, 2025, 02:30 PM`."""
    ts = _to_datetime(value)
    if ts is None:
        logger.debug("Could not parse timestamp %r", value)
        return str(value)
    return f"{ts:%b} {ts.day}, {ts.year}, {ts:%I:%M %p}"


def get_transaction_type_color(transaction_type: str) -> StatusColor:
    if transaction_type in ("buy", "deposit", "dividend"):
        return "success"
    if transaction_type in ("sell", "withdrawal"):
        return "error"
    if transaction_type == "fee":
        return "warning"
    return "info"


def get_status_color(status: str) -> StatusColor:
    if status == "completed":
        return "success"
    if status in ("failed", "cancelled"):
        return "error"
    if status == "pending":
        return "warning"
    return "info"

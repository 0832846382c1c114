"""Client-side order checks run before an order is sent to the server.

The server remains authoritative; these checks only catch obviously bad
input early and flag unusual orders for confirmation.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from portfolio_valuation.data_models.order import OrderRequest, OrderSide, OrderValidation

MIN_ORDER_AMOUNT = 1.0
LARGE_ORDER_AMOUNT = 1_000_000.0
MAX_EXPIRY = timedelta(days=90)


def _as_aware(value: datetime) -> datetime:
    # naive timestamps are taken as UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def validate_order(order: OrderRequest, now: Optional[datetime] = None) -> OrderValidation:
    """Validate an order request.

    Errors:
    - quantity must be positive and a whole number
    - price per share must be positive
    - total amount (quantity * price) must be at least $1
    - expiry, when given, must be in the future

    Warnings:
    - buy orders above $1,000,000
    - expiry more than 90 days ahead
    """
    errors: List[str] = []
    warnings: List[str] = []

    if order.quantity <= 0:
        errors.append("Quantity must be greater than 0")

    if order.price_per_share <= 0:
        errors.append("Price per share must be greater than 0")

    if not float(order.quantity).is_integer():
        errors.append("Quantity must be a whole number")

    total_amount = order.quantity * order.price_per_share

    if total_amount < MIN_ORDER_AMOUNT:
        errors.append("Total order amount must be at least $1")

    if order.type == OrderSide.BUY and total_amount > LARGE_ORDER_AMOUNT:
        warnings.append("Large order amount - please verify before placing")

    if order.expires_at is not None:
        current = _as_aware(now) if now is not None else datetime.now(timezone.utc)
        expiry = _as_aware(order.expires_at)

        if expiry <= current:
            errors.append("Expiration date must be in the future")

        if expiry > current + MAX_EXPIRY:
            warnings.append("Order expires more than 90 days from now")

    return OrderValidation(valid=not errors, errors=errors, warnings=warnings)

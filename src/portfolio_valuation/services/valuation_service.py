"""Portfolio valuation computations.

Turns raw holdings plus the latest share prices into a consistent valuation
snapshot: current value, unrealized P&L and percentage return per holding,
and portfolio-level totals.

None of these functions raise on bad numeric input. Missing or non-finite
numbers are treated as 0 so that a partially populated API payload still
renders.
"""
from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Literal, Optional

from portfolio_valuation.data_models.holding import CalculatedHolding, PortfolioHolding, ProductType
from portfolio_valuation.data_models.portfolio_summary import (
    AssetAllocationSlice,
    CalculatedPortfolioSummary,
    PortfolioSummary,
    SectorAllocationSlice,
    TotalReturn,
)

logger = logging.getLogger(__name__)

UNKNOWN_SECTOR = "Unknown"

# every float at or above this magnitude is a whole number
MAX_FRACTIONAL_FLOAT = 2.0 ** 53


def finite_or_zero(value: Optional[float]) -> float:
    """Return `value` as a float, or 0.0 when it is missing, NaN or infinite."""
    if value is None:
        return 0.0
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(v):
        return 0.0
    return v


def round2(value: float) -> float:
    """Round to currency granularity (2 decimals), half away from zero.

    The value is scaled by 100 in floating point first, so results match a
    `Math.round(value * 100) / 100` style computation for positive inputs.
    """
    v = finite_or_zero(value)
    if abs(v) >= MAX_FRACTIONAL_FLOAT:
        return v
    scaled = Decimal(repr(v * 100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    # `or 0.0` folds -0.0 into 0.0
    return (float(scaled) / 100) or 0.0


def _pct_of(numerator: float, denominator: float) -> float:
    return (numerator / denominator) * 100 if denominator > 0 else 0.0


def calculate_holding_pnl(holding: PortfolioHolding) -> CalculatedHolding:
    """Revalue a single holding at its product's current share price.

    current_value = quantity * share_price
    unrealized_pnl = current_value - total_invested
    unrealized_pnl_percentage = unrealized_pnl / total_invested * 100 (0 when nothing invested)

    Each metric is rounded independently with `round2`; the P&L figures are
    derived from the unrounded current value.
    """
    if holding.product.share_price is None or not math.isfinite(holding.product.share_price):
        logger.debug(
            "Holding %s (%s) has no usable share price; valuing at 0",
            holding.id,
            holding.product.symbol,
        )
    current_price = finite_or_zero(holding.product.share_price)
    quantity = finite_or_zero(holding.quantity)
    total_invested = finite_or_zero(holding.total_invested)

    current_value = quantity * current_price
    unrealized_pnl = current_value - total_invested
    unrealized_pnl_percentage = _pct_of(unrealized_pnl, total_invested)

    data = holding.model_dump()
    data.update(
        current_value=round2(current_value),
        unrealized_pnl=round2(unrealized_pnl),
        unrealized_pnl_percentage=round2(unrealized_pnl_percentage),
    )
    return CalculatedHolding.model_validate(data)


def calculate_portfolio_totals(portfolio: PortfolioSummary) -> CalculatedPortfolioSummary:
    """Revalue every holding and recompute the portfolio totals.

    Totals are summed from the already-rounded per-holding values and the
    sums are rounded again. `total_pnl` is `total_value - total_invested`
    on those sums. An empty portfolio yields zeros everywhere.

    Fields other than the holdings and the four totals are carried over
    from the input untouched.
    """
    calculated = [calculate_holding_pnl(h) for h in portfolio.holdings]

    total_value = sum(h.current_value for h in calculated)
    total_invested = sum(finite_or_zero(h.total_invested) for h in calculated)
    total_pnl = total_value - total_invested
    total_pnl_percentage = _pct_of(total_pnl, total_invested)

    data = portfolio.model_dump(exclude={"holdings"})
    data.update(
        holdings=[h.model_dump() for h in calculated],
        total_value=round2(total_value),
        total_invested=round2(total_invested),
        total_pnl=round2(total_pnl),
        total_pnl_percentage=round2(total_pnl_percentage),
    )
    summary = CalculatedPortfolioSummary.model_validate(data)

    logger.debug(
        "Valued portfolio with %d holdings: value=%.2f invested=%.2f pnl=%.2f",
        len(calculated),
        summary.total_value,
        summary.total_invested,
        summary.total_pnl,
    )
    return summary


def calculate_total_return(current_value: float, total_invested: float) -> TotalReturn:
    """Absolute and percentage return of a position or portfolio (unrounded)."""
    cv = finite_or_zero(current_value)
    ti = finite_or_zero(total_invested)
    amount = cv - ti
    return TotalReturn(amount=amount, percentage=_pct_of(amount, ti))


def compute_allocation(
    holdings: Iterable[CalculatedHolding],
    by: Literal["type", "sector"] = "type",
) -> List[AssetAllocationSlice] | List[SectorAllocationSlice]:
    """Group valued holdings by product type or sector.

    Behaviour:
    - Sum `current_value` per group; holdings without a sector fall under
      "Unknown" when grouping by sector.
    - Percentage is the group's share of the summed value (0 when the
      portfolio is worth nothing).
    - Slices are sorted by value, largest first; values and percentages are
      rounded with `round2`.
    """
    if by not in ("type", "sector"):
        raise ValueError(f"Unsupported allocation key: {by!r}")

    groups: Dict[str, float] = {}
    for h in holdings:
        if by == "type":
            key = h.product.type.value
        else:
            key = h.product.sector or UNKNOWN_SECTOR
        groups[key] = groups.get(key, 0.0) + finite_or_zero(h.current_value)

    total = sum(groups.values())
    ordered = sorted(groups.items(), key=lambda kv: kv[1], reverse=True)

    if by == "type":
        return [
            AssetAllocationSlice(type=ProductType(k), value=round2(v), percentage=round2(_pct_of(v, total)))
            for k, v in ordered
        ]
    return [
        SectorAllocationSlice(sector=k, value=round2(v), percentage=round2(_pct_of(v, total)))
        for k, v in ordered
    ]

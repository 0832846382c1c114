"""Holding models.

`PortfolioHolding` is one position in an investment product as returned by
the portfolio API. `CalculatedHolding` is the same position after the
valuation service has recomputed its derived metrics from the latest share
price.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ProductType(str, Enum):
    """Instrument families listed on the marketplace."""

    REIT = "REIT"
    BDC = "BDC"


class Product(BaseModel):
    """The instrument a holding is invested in.

    `share_price` is the latest known market price supplied by the API. It
    may be missing or non-finite; valuation treats that as a price of 0.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = ""
    symbol: str = ""
    type: ProductType = ProductType.REIT
    share_price: Optional[float] = Field(default=None, alias="sharePrice")
    sector: Optional[str] = None
    geography: Optional[str] = None


class PortfolioHolding(BaseModel):
    """A single position as reported by the portfolio API.

    The server-reported `current_value` / `unrealized_pnl` fields are kept
    for completeness but are never trusted: they are recomputed on every
    valuation pass.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    product: Product
    quantity: float = 0.0
    average_cost: float = Field(default=0.0, alias="averageCost")
    # cost basis in currency units, net of sells
    total_invested: float = Field(default=0.0, alias="totalInvested")
    last_updated: Optional[str] = Field(default=None, alias="lastUpdated")

    current_value: Optional[float] = Field(default=None, alias="currentValue")
    unrealized_pnl: Optional[float] = Field(default=None, alias="unrealizedPnL")
    unrealized_pnl_percentage: Optional[float] = Field(default=None, alias="unrealizedPnLPercentage")


class CalculatedHolding(PortfolioHolding):
    """A holding whose derived metrics were produced by `calculate_holding_pnl`.

    All three metrics are rounded to 2 decimal places.
    """

    current_value: float = Field(alias="currentValue")
    unrealized_pnl: float = Field(alias="unrealizedPnL")
    unrealized_pnl_percentage: float = Field(alias="unrealizedPnLPercentage")

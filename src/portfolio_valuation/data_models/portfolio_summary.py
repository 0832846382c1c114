"""Portfolio summary models.

`PortfolioSummary` is the account-level view model fetched from the
portfolio API. `CalculatedPortfolioSummary` is the same summary after the
aggregator has revalued every holding and recomputed the totals.
"""
from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from portfolio_valuation.data_models.holding import CalculatedHolding, PortfolioHolding, ProductType


class AssetAllocationSlice(BaseModel):
    type: ProductType
    value: float
    percentage: float


class SectorAllocationSlice(BaseModel):
    sector: str
    value: float
    percentage: float


class PortfolioSummary(BaseModel):
    """Aggregate over all holdings of one account.

    Attributes:
        holdings: Positions in display order (order is irrelevant to totals).
        total_value / total_invested / total_pnl: Server-reported totals.
        day_change: Server-reported change since the previous close.
        asset_allocation / sector_allocation: Server-reported breakdowns.
    """

    model_config = ConfigDict(populate_by_name=True)

    holdings: List[PortfolioHolding] = Field(default_factory=list)

    total_value: float = Field(default=0.0, alias="totalValue")
    total_invested: float = Field(default=0.0, alias="totalInvested")
    total_pnl: float = Field(default=0.0, alias="totalPnL")
    total_pnl_percentage: Optional[float] = Field(default=None, alias="totalPnLPercentage")

    day_change: float = Field(default=0.0, alias="dayChange")
    day_change_percentage: Optional[float] = Field(default=None, alias="dayChangePercentage")

    asset_allocation: List[AssetAllocationSlice] = Field(default_factory=list, alias="assetAllocation")
    sector_allocation: List[SectorAllocationSlice] = Field(default_factory=list, alias="sectorAllocation")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")


class CalculatedPortfolioSummary(PortfolioSummary):
    """Portfolio summary with revalued holdings and recomputed totals."""

    holdings: List[CalculatedHolding] = Field(default_factory=list)
    total_pnl_percentage: float = Field(default=0.0, alias="totalPnLPercentage")


class TotalReturn(BaseModel):
    amount: float
    percentage: float

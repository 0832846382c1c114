"""Transaction history, performance and statement models."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from portfolio_valuation.data_models.holding import PortfolioHolding, ProductType


class TransactionType(str, Enum):
    BUY = "buy"
    SELL = "sell"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    FEE = "fee"
    DIVIDEND = "dividend"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


PerformancePeriod = Literal["1D", "1W", "1M", "3M", "6M", "1Y", "ALL"]
StatementFormat = Literal["pdf", "csv", "excel"]


class TransactionProduct(BaseModel):
    id: str
    name: str
    symbol: str
    type: ProductType


class Transaction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: TransactionType
    product: Optional[TransactionProduct] = None
    quantity: Optional[float] = None
    price_per_share: Optional[float] = Field(default=None, alias="pricePerShare")
    amount: float = 0.0
    fees: float = 0.0
    status: TransactionStatus = TransactionStatus.PENDING
    description: str = ""
    executed_at: str = Field(alias="executedAt")
    settled_at: Optional[str] = Field(default=None, alias="settledAt")
    failed_at: Optional[str] = Field(default=None, alias="failedAt")
    failure_reason: Optional[str] = Field(default=None, alias="failureReason")
    order_id: Optional[str] = Field(default=None, alias="orderId")
    trade_id: Optional[str] = Field(default=None, alias="tradeId")


class TransactionFilters(BaseModel):
    """Query filters for the transaction history endpoint.

    Only fields that are set are sent; names go out in camelCase.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: Optional[TransactionType] = None
    status: Optional[TransactionStatus] = None
    product_id: Optional[str] = Field(default=None, alias="productId")
    date_from: Optional[str] = Field(default=None, alias="dateFrom")
    date_to: Optional[str] = Field(default=None, alias="dateTo")
    min_amount: Optional[float] = Field(default=None, alias="minAmount")
    max_amount: Optional[float] = Field(default=None, alias="maxAmount")
    limit: Optional[int] = None
    offset: Optional[int] = None
    sort_by: Optional[Literal["executedAt", "amount", "type", "status"]] = Field(default=None, alias="sortBy")
    sort_order: Optional[Literal["asc", "desc"]] = Field(default=None, alias="sortOrder")


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int = 0
    limit: int = 0
    offset: int = 0
    has_more: bool = Field(default=False, alias="hasMore")


class TransactionPage(BaseModel):
    transactions: List[Transaction] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
    summary: Dict[str, Any] = Field(default_factory=dict)


class PerformancePoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    value: float
    pnl: float
    pnl_percentage: float = Field(alias="pnlPercentage")


class PortfolioPerformance(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    period: PerformancePeriod
    data: List[PerformancePoint] = Field(default_factory=list)
    total_return: float = Field(default=0.0, alias="totalReturn")
    total_return_percentage: float = Field(default=0.0, alias="totalReturnPercentage")
    annualized_return: Optional[float] = Field(default=None, alias="annualizedReturn")
    volatility: Optional[float] = None
    sharpe_ratio: Optional[float] = Field(default=None, alias="sharpeRatio")
    max_drawdown: Optional[float] = Field(default=None, alias="maxDrawdown")


class StatementRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["monthly", "quarterly", "annual", "custom"]
    period_start: str = Field(alias="periodStart")
    period_end: str = Field(alias="periodEnd")
    format: StatementFormat = "pdf"
    include_transactions: bool = Field(default=True, alias="includeTransactions")
    include_holdings: bool = Field(default=True, alias="includeHoldings")


class PortfolioStatement(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: Literal["monthly", "quarterly", "annual", "custom"]
    period_start: str = Field(alias="periodStart")
    period_end: str = Field(alias="periodEnd")
    generated_at: str = Field(alias="generatedAt")
    summary: Dict[str, float] = Field(default_factory=dict)
    holdings: List[PortfolioHolding] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")


class StatementPage(BaseModel):
    statements: List[PortfolioStatement] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)

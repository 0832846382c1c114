"""Trading models: order requests, validation outcome, orders and the book."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderStatus(str, Enum):
    PENDING = "pending"
    FILLED = "filled"
    PARTIALLY_FILLED = "partially_filled"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class OrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId")
    type: OrderSide
    order_type: Literal["market", "limit"] = Field(default="market", alias="orderType")
    quantity: float
    price_per_share: float = Field(alias="pricePerShare")
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")


class OrderValidation(BaseModel):
    """Outcome of client-side order checks.

    `errors` block submission; `warnings` are shown but do not.
    """

    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class Order(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: OrderSide
    order_type: Literal["market", "limit"] = Field(default="market", alias="orderType")
    quantity: float
    price_per_share: float = Field(alias="pricePerShare")
    total_amount: float = Field(default=0.0, alias="totalAmount")
    status: OrderStatus = OrderStatus.PENDING
    filled_quantity: float = Field(default=0.0, alias="filledQuantity")
    remaining_quantity: float = Field(default=0.0, alias="remainingQuantity")
    average_fill_price: float = Field(default=0.0, alias="averageFillPrice")
    fees: float = 0.0
    product: Dict[str, Any] = Field(default_factory=dict)
    expires_at: Optional[str] = Field(default=None, alias="expiresAt")
    rejection_reason: Optional[str] = Field(default=None, alias="rejectionReason")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")


class TradingFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Optional[OrderStatus] = None
    type: Optional[OrderSide] = None
    product_id: Optional[str] = Field(default=None, alias="productId")
    limit: Optional[int] = None
    offset: Optional[int] = None
    sort_by: Optional[Literal["createdAt", "pricePerShare", "totalAmount", "status"]] = Field(
        default=None, alias="sortBy"
    )
    sort_order: Optional[Literal["asc", "desc"]] = Field(default=None, alias="sortOrder")


class OrderBookEntry(BaseModel):
    price: float
    quantity: float
    orders: int


class OrderBook(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bids: List[OrderBookEntry] = Field(default_factory=list)
    asks: List[OrderBookEntry] = Field(default_factory=list)
    spread: float = 0.0
    mid_price: float = Field(default=0.0, alias="midPrice")


class RecentTrade(BaseModel):
    id: str
    quantity: float
    price: float
    timestamp: str
    side: OrderSide


class OrderPage(BaseModel):
    orders: List[Order] = Field(default_factory=list)
    pagination: Dict[str, Any] = Field(default_factory=dict)
    summary: Dict[str, Any] = Field(default_factory=dict)


class RecentTradesPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: Optional[str] = Field(default=None, alias="productId")
    trades: List[RecentTrade] = Field(default_factory=list)

"""Trading endpoints of the marketplace API."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional

from portfolio_valuation.config import Settings
from portfolio_valuation.data_models.api_result import ApiResult, Err, Ok
from portfolio_valuation.data_models.order import (
    Order,
    OrderBook,
    OrderPage,
    OrderRequest,
    OrderValidation,
    RecentTradesPage,
    TradingFilters,
)
from portfolio_valuation.services.http_client import HTTPClient
from portfolio_valuation.services.order_validation_service import validate_order
from portfolio_valuation.services.portfolio_api_service import parse_payload

logger = logging.getLogger(__name__)


class TradingApiClient:
    def __init__(self, http: HTTPClient, trading_enabled: bool = True):
        self.http = http
        self.trading_enabled = trading_enabled

    @classmethod
    def from_settings(cls, http: HTTPClient, settings: Settings) -> "TradingApiClient":
        return cls(http, trading_enabled=settings.ENABLE_TRADING)

    def validate_order(self, order: OrderRequest) -> OrderValidation:
        return validate_order(order)

    def place_order(self, order: OrderRequest) -> ApiResult[Order]:
        """Validate locally, then submit. Invalid orders never reach the API."""
        if not self.trading_enabled:
            return Err(message="Trading is disabled")
        validation = self.validate_order(order)
        if not validation.valid:
            logger.info("Rejected order for %s client-side: %s", order.product_id, validation.errors)
            return Err(
                message="; ".join(validation.errors),
                details={"errors": validation.errors, "warnings": validation.warnings},
            )
        return parse_payload(
            self.http.post("/trading/orders", json=order.model_dump(by_alias=True, exclude_none=True, mode="json")),
            Order,
            extract=lambda body: (body.get("data") or {}).get("order"),
        )

    def get_orders(self, filters: Optional[TradingFilters] = None) -> ApiResult[OrderPage]:
        filters = filters or TradingFilters()
        params = filters.model_dump(by_alias=True, exclude_none=True, mode="json")
        return parse_payload(self.http.get("/trading/orders", params=params), OrderPage)

    def get_order_details(self, order_id: str) -> ApiResult[Order]:
        return parse_payload(
            self.http.get(f"/trading/orders/{order_id}"),
            Order,
            extract=lambda body: (body.get("data") or {}).get("order"),
        )

    def cancel_order(self, order_id: str, reason: Optional[str] = None) -> ApiResult[Dict[str, Any]]:
        result = self.http.put(f"/trading/orders/{order_id}/cancel", json={"reason": reason})
        if isinstance(result, Err):
            return result
        return Ok(value={"message": result.value.get("message", "") if isinstance(result.value, dict) else ""})

    def get_order_book(self, product_id: str, depth: int = 10) -> ApiResult[OrderBook]:
        return parse_payload(
            self.http.get(f"/trading/orderbook/{product_id}", params={"depth": depth}),
            OrderBook,
            extract=lambda body: (body.get("data") or {}).get("orderBook"),
        )

    def get_recent_trades(self, product_id: str, limit: int = 50) -> ApiResult[RecentTradesPage]:
        return parse_payload(
            self.http.get(f"/trading/trades/{product_id}", params={"limit": limit}),
            RecentTradesPage,
        )

    def get_user_trades(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        status: Optional[Literal["pending", "settled", "failed"]] = None,
        product_id: Optional[str] = None,
    ) -> ApiResult[List[Dict[str, Any]]]:
        params = {"limit": limit, "offset": offset, "status": status, "productId": product_id}
        result = self.http.get("/trading/user/trades", params=params)
        if isinstance(result, Err):
            return result
        data = result.value.get("data") if isinstance(result.value, dict) else None
        return Ok(value=list((data or {}).get("trades") or []))

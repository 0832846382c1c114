import json

import httpx

from portfolio_valuation.config import Settings
from portfolio_valuation.data_models.api_result import Err, Ok
from portfolio_valuation.data_models.order import OrderRequest, OrderSide, OrderStatus, TradingFilters
from portfolio_valuation.services.http_client import HTTPClient
from portfolio_valuation.services.trading_api_service import TradingApiClient

ORDER = {
    "id": "o1",
    "type": "buy",
    "orderType": "limit",
    "quantity": 10,
    "pricePerShare": 12.5,
    "totalAmount": 125,
    "status": "pending",
    "remainingQuantity": 10,
}


def _trading(handler=None, trading_enabled=True):
    requests = []

    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if handler is None:
            return httpx.Response(500, json={"message": "unexpected call"})
        return handler(request)

    http = HTTPClient(base_url="http://api.test/api", retry_backoff=0, transport=httpx.MockTransport(record))
    return TradingApiClient(http, trading_enabled=trading_enabled), requests


def _order(**overrides) -> OrderRequest:
    data = {"product_id": "p1", "type": OrderSide.BUY, "order_type": "limit", "quantity": 10, "price_per_share": 12.5}
    data.update(overrides)
    return OrderRequest(**data)


def test_place_order_posts_camel_case_body():
    def handler(request):
        return httpx.Response(201, json={"success": True, "data": {"order": ORDER}})

    api, requests = _trading(handler)
    result = api.place_order(_order())

    assert isinstance(result, Ok)
    assert result.value.id == "o1"
    assert result.value.status == OrderStatus.PENDING
    assert requests[0].method == "POST"
    assert requests[0].url.path == "/api/trading/orders"
    body = json.loads(requests[0].content)
    assert body == {"productId": "p1", "type": "buy", "orderType": "limit", "quantity": 10.0, "pricePerShare": 12.5}


def test_invalid_order_is_rejected_before_sending():
    api, requests = _trading()
    result = api.place_order(_order(quantity=0))

    assert isinstance(result, Err)
    assert "Quantity must be greater than 0" in result.message
    assert "Quantity must be greater than 0" in result.details["errors"]
    assert requests == []


def test_trading_disabled_sends_nothing():
    api, requests = _trading(trading_enabled=False)
    result = api.place_order(_order())
    assert isinstance(result, Err)
    assert result.message == "Trading is disabled"
    assert requests == []


def test_server_rejection_is_err():
    def handler(request):
        return httpx.Response(400, json={"success": False, "message": "Insufficient funds"})

    api, _ = _trading(handler)
    result = api.place_order(_order())
    assert isinstance(result, Err)
    assert result.status_code == 400
    assert result.message == "Insufficient funds"


def test_get_orders_with_filters():
    def handler(request):
        return httpx.Response(200, json={"success": True, "data": {"orders": [ORDER], "pagination": {"total": 1}}})

    api, requests = _trading(handler)
    result = api.get_orders(TradingFilters(status=OrderStatus.PENDING, product_id="p1"))

    assert isinstance(result, Ok)
    assert [o.id for o in result.value.orders] == ["o1"]
    assert dict(requests[0].url.params) == {"status": "pending", "productId": "p1"}


def test_get_orders_malformed_is_err():
    def handler(request):
        return httpx.Response(200, json={"success": True, "data": {"orders": [{"id": "o1"}]}})

    api, _ = _trading(handler)
    result = api.get_orders()
    assert isinstance(result, Err)
    assert result.message == "Malformed OrderPage payload"


def test_cancel_order_sends_reason():
    def handler(request):
        return httpx.Response(200, json={"success": True, "message": "Order cancelled"})

    api, requests = _trading(handler)
    result = api.cancel_order("o1", reason="changed my mind")
    assert isinstance(result, Ok)
    assert result.value == {"message": "Order cancelled"}
    assert requests[0].method == "PUT"
    assert requests[0].url.path == "/api/trading/orders/o1/cancel"
    assert json.loads(requests[0].content) == {"reason": "changed my mind"}


def test_get_order_book():
    book = {
        "bids": [{"price": 10.0, "quantity": 5, "orders": 2}],
        "asks": [{"price": 10.2, "quantity": 3, "orders": 1}],
        "spread": 0.2,
        "midPrice": 10.1,
    }

    def handler(request):
        return httpx.Response(200, json={"success": True, "data": {"orderBook": book}})

    api, requests = _trading(handler)
    result = api.get_order_book("p1", depth=5)
    assert isinstance(result, Ok)
    assert result.value.mid_price == 10.1
    assert result.value.bids[0].orders == 2
    assert requests[0].url.params["depth"] == "5"


def test_get_recent_and_user_trades():
    def handler(request):
        if request.url.path == "/api/trading/trades/p1":
            trades = [{"id": "t1", "quantity": 2, "price": 10.0, "timestamp": "2025-09-30T14:30:00Z", "side": "sell"}]
            return httpx.Response(200, json={"success": True, "data": {"productId": "p1", "trades": trades}})
        return httpx.Response(200, json={"success": True, "data": {"trades": [{"id": "u1"}]}})

    api, requests = _trading(handler)

    recent = api.get_recent_trades("p1", limit=1)
    assert isinstance(recent, Ok)
    assert recent.value.product_id == "p1"
    assert recent.value.trades[0].side == OrderSide.SELL

    mine = api.get_user_trades(status="settled")
    assert isinstance(mine, Ok)
    assert mine.value == [{"id": "u1"}]
    assert dict(requests[1].url.params) == {"status": "settled"}


def test_trading_flag_comes_from_settings():
    http = HTTPClient(base_url="http://api.test/api")
    api = TradingApiClient.from_settings(http, Settings(ENABLE_TRADING=False))
    assert not api.trading_enabled
    assert api.place_order(_order()).message == "Trading is disabled"

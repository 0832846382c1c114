import httpx

from portfolio_valuation.config import Settings
from portfolio_valuation.data_models.api_result import Err, Ok
from portfolio_valuation.services.http_client import HTTPClient
from portfolio_valuation.services.session_service import SessionService, StaticTokenProvider


def _client(handler, token_provider=None, max_retries=3) -> HTTPClient:
    return HTTPClient(
        base_url="http://api.test/api",
        token_provider=token_provider,
        max_retries=max_retries,
        retry_backoff=0,
        transport=httpx.MockTransport(handler),
    )


def test_get_returns_ok_with_json_and_bearer_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"success": True, "data": {"x": 1}})

    with _client(handler, StaticTokenProvider("tok-123")) as http:
        result = http.get("/portfolio", params={"a": 1, "skip": None})

    assert isinstance(result, Ok)
    assert result.ok
    assert result.value["data"] == {"x": 1}
    assert seen["url"] == "http://api.test/api/portfolio?a=1"
    assert seen["auth"] == "Bearer tok-123"


def test_no_token_means_no_authorization_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={})

    with _client(handler, SessionService()) as http:
        http.get("/portfolio")
    assert seen["auth"] is None


def test_token_is_read_per_request():
    tokens = []

    def handler(request: httpx.Request) -> httpx.Response:
        tokens.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={})

    session = SessionService()
    with _client(handler, session) as http:
        http.get("/a")
        session.sign_in("first")
        http.get("/b")
        session.sign_out()
        http.get("/c")
    assert tokens == [None, "Bearer first", None]


def test_http_error_becomes_err_with_api_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"success": False, "message": "KYC required"})

    with _client(handler) as http:
        result = http.post("/trading/orders", json={"a": 1})

    assert isinstance(result, Err)
    assert not result.ok
    assert result.status_code == 403
    assert result.message == "KYC required"


def test_http_error_without_json_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    with _client(handler) as http:
        result = http.get("/portfolio")
    assert isinstance(result, Err)
    assert result.status_code == 500
    assert result.message.startswith("HTTP 500")


def test_soft_failure_body_is_err():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "error": "nope"})

    with _client(handler) as http:
        result = http.get("/portfolio")
    assert isinstance(result, Err)
    assert result.message == "nope"
    assert result.status_code == 200


def test_non_json_body_is_err():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    with _client(handler) as http:
        result = http.get("/portfolio")
    assert isinstance(result, Err)
    assert result.message == "Invalid JSON in API response"


def test_connect_errors_are_retried_then_reported():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        raise httpx.ConnectError("refused", request=request)

    with _client(handler, max_retries=3) as http:
        result = http.get("/portfolio")
    assert isinstance(result, Err)
    assert result.status_code is None
    assert result.message.startswith("Connection failed")
    assert len(calls) == 3


def test_timeout_recovers_on_retry():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        if len(calls) == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return httpx.Response(200, json={"ok": True})

    with _client(handler) as http:
        result = http.get("/portfolio")
    assert isinstance(result, Ok)
    assert len(calls) == 2


def test_timeout_exhausted_is_err():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with _client(handler, max_retries=2) as http:
        result = http.get("/portfolio")
    assert isinstance(result, Err)
    assert result.message.startswith("Request timed out")


def test_status_errors_are_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(404, json={"message": "not found"})

    with _client(handler) as http:
        http.get("/missing")
    assert len(calls) == 1


def test_request_bytes_returns_raw_content():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"%PDF-1.4")

    with _client(handler) as http:
        result = http.request_bytes("GET", "/file")
    assert isinstance(result, Ok)
    assert result.value == b"%PDF-1.4"


def test_from_settings():
    settings = Settings(API_BASE_URL="http://example.test/api", REQUEST_TIMEOUT=5, MAX_RETRIES=0)
    http = HTTPClient.from_settings(settings)
    assert http.base_url == "http://example.test/api"
    assert http.timeout == 5
    # at least one attempt is always made
    assert http.max_retries == 1

"""HTTP client for the marketplace REST API.

Wraps `httpx.Client` with retries on transient network failures, bearer
authentication from an injected `TokenProvider`, and conversion of every
outcome into an `ApiResult`. HTTP and network failures come back as `Err`;
only programming errors propagate.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from portfolio_valuation.config import Settings
from portfolio_valuation.data_models.api_result import ApiResult, Err, Ok
from portfolio_valuation.services.session_service import TokenProvider

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (httpx.TimeoutException, httpx.ConnectError)


def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None}


def _error_message(response: httpx.Response) -> str:
    """Prefer the API's own error message over the bare status line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return f"HTTP {response.status_code}: {response.reason_phrase}"


class HTTPClient:
    """Authenticated JSON client bound to one API base URL.

    Example usage:
        session = SessionService()
        session.sign_in(token)
        with HTTPClient.from_settings(get_settings(), token_provider=session) as http:
            result = http.get("/portfolio")
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_backoff: float = 1.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url
        self.token_provider = token_provider
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_backoff = retry_backoff
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "HTTPClient":
        return cls(
            base_url=settings.API_BASE_URL,
            token_provider=token_provider,
            timeout=settings.REQUEST_TIMEOUT,
            max_retries=settings.MAX_RETRIES,
            retry_backoff=settings.RETRY_BACKOFF,
            transport=transport,
        )

    @property
    def client(self) -> httpx.Client:
        """Lazy initialization of the underlying client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _auth_headers(self) -> Dict[str, str]:
        # token is read per request so sign-in/sign-out take effect immediately
        token = self.token_provider.get_token() if self.token_provider is not None else None
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _send(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> httpx.Response:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.retry_backoff, max=10),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                response = self.client.request(
                    method,
                    url,
                    params=_clean_params(params),
                    json=json,
                    headers=self._auth_headers(),
                )
                response.raise_for_status()
        return response

    def _call(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> ApiResult[httpx.Response]:
        try:
            return Ok(value=self._send(method, url, params=params, json=json))
        except httpx.HTTPStatusError as e:
            logger.warning(
                "HTTP %d for %s %s: %s", e.response.status_code, method, url, e.response.text[:200]
            )
            return Err(
                message=_error_message(e.response),
                status_code=e.response.status_code,
                details={"body": e.response.text},
            )
        except httpx.TimeoutException:
            logger.warning("Timeout for %s %s", method, url)
            return Err(message=f"Request timed out: {url}")
        except httpx.RequestError as e:
            logger.warning("Request error for %s %s: %s", method, url, e)
            return Err(message=f"Connection failed: {url}", details={"error": str(e)})

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> ApiResult[Any]:
        """Send a request and return the decoded JSON body.

        A 2xx body of the form `{"success": false, "message": ...}` is also
        reported as `Err`, since the API uses it for soft failures.
        """
        result = self._call(method, url, params=params, json=json)
        if isinstance(result, Err):
            return result

        response = result.value
        try:
            body = response.json()
        except ValueError:
            logger.warning("Non-JSON response for %s %s", method, url)
            return Err(
                message="Invalid JSON in API response",
                status_code=response.status_code,
                details={"body": response.text[:200]},
            )

        if isinstance(body, dict) and body.get("success") is False:
            return Err(
                message=str(body.get("message") or body.get("error") or "Request failed"),
                status_code=response.status_code,
                details=body,
            )
        return Ok(value=body)

    def request_bytes(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> ApiResult[bytes]:
        """Send a request and return the raw body (file downloads)."""
        result = self._call(method, url, params=params)
        if isinstance(result, Err):
            return result
        return Ok(value=result.value.content)

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> ApiResult[Any]:
        return self.request("GET", url, params=params)

    def post(self, url: str, json: Optional[Any] = None) -> ApiResult[Any]:
        return self.request("POST", url, json=json)

    def put(self, url: str, json: Optional[Any] = None) -> ApiResult[Any]:
        return self.request("PUT", url, json=json)

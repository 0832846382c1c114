"""Portfolio endpoints of the marketplace API.

Each method returns an `ApiResult`; payloads are parsed into the models in
`portfolio_valuation.data_models`. A payload that arrives but does not
match its model is reported as `Err` as well.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from portfolio_valuation.data_models.api_result import ApiResult, Err, Ok
from portfolio_valuation.data_models.portfolio_summary import CalculatedPortfolioSummary, PortfolioSummary
from portfolio_valuation.data_models.transaction import (
    PerformancePeriod,
    PortfolioPerformance,
    StatementFormat,
    StatementPage,
    StatementRequest,
    TransactionFilters,
    TransactionPage,
)
from portfolio_valuation.services.http_client import HTTPClient
from portfolio_valuation.services.valuation_service import calculate_portfolio_totals

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def parse_payload(
    result: ApiResult[Any],
    model: Type[M],
    extract: Callable[[Dict[str, Any]], Any] = lambda body: body.get("data"),
) -> ApiResult[M]:
    """Validate the interesting part of a JSON body against `model`."""
    if isinstance(result, Err):
        return result
    body = result.value
    if not isinstance(body, dict):
        return Err(message="Unexpected API response shape", details={"body": body})
    try:
        return Ok(value=model.model_validate(extract(body)))
    except ValidationError as exc:
        logger.warning("Could not parse %s from API response: %s", model.__name__, exc)
        return Err(message=f"Malformed {model.__name__} payload", details={"errors": exc.errors()})


def _message_payload(result: ApiResult[Any]) -> ApiResult[Dict[str, Any]]:
    if isinstance(result, Err):
        return result
    body = result.value if isinstance(result.value, dict) else {}
    return Ok(value={"message": body.get("message", ""), "data": body.get("data")})


class PortfolioApiClient:
    def __init__(self, http: HTTPClient):
        self.http = http

    def get_portfolio(self) -> ApiResult[PortfolioSummary]:
        return parse_payload(
            self.http.get("/portfolio"),
            PortfolioSummary,
            extract=lambda body: (body.get("data") or {}).get("portfolio"),
        )

    def get_valued_portfolio(self) -> ApiResult[CalculatedPortfolioSummary]:
        """Fetch the portfolio and revalue it at the latest share prices."""
        result = self.get_portfolio()
        if isinstance(result, Err):
            return result
        return Ok(value=calculate_portfolio_totals(result.value))

    def refresh_portfolio(self) -> ApiResult[Dict[str, Any]]:
        return _message_payload(self.http.post("/portfolio/refresh"))

    def consolidate_portfolio(self) -> ApiResult[Dict[str, Any]]:
        return _message_payload(self.http.post("/portfolio/consolidate"))

    def cleanup_portfolio(self) -> ApiResult[Dict[str, Any]]:
        return _message_payload(self.http.post("/portfolio/cleanup"))

    def get_transactions(self, filters: Optional[TransactionFilters] = None) -> ApiResult[TransactionPage]:
        filters = filters or TransactionFilters()
        params = filters.model_dump(by_alias=True, exclude_none=True, mode="json")
        return parse_payload(self.http.get("/portfolio/transactions", params=params), TransactionPage)

    def get_performance(self, period: PerformancePeriod = "1M") -> ApiResult[PortfolioPerformance]:
        return parse_payload(
            self.http.get("/portfolio/performance", params={"period": period}),
            PortfolioPerformance,
            extract=lambda body: (body.get("data") or {}).get("performance"),
        )

    def generate_statement(self, request: StatementRequest) -> ApiResult[Dict[str, Any]]:
        result = self.http.post("/portfolio/statements", json=request.model_dump(by_alias=True, mode="json"))
        if isinstance(result, Err):
            return result
        data = result.value.get("data") if isinstance(result.value, dict) else None
        if not isinstance(data, dict) or "statementId" not in data:
            return Err(message="Statement response is missing statementId", details={"body": result.value})
        return Ok(value=data)

    def get_statements(self, limit: int = 20, offset: int = 0) -> ApiResult[StatementPage]:
        return parse_payload(
            self.http.get("/portfolio/statements", params={"limit": limit, "offset": offset}),
            StatementPage,
        )

    def download_statement(self, statement_id: str, format: StatementFormat = "pdf") -> ApiResult[bytes]:
        return self.http.request_bytes(
            "GET", f"/portfolio/statements/{statement_id}/download", params={"format": format}
        )

"""Load portfolio payloads from disk.

Two sources are supported: a JSON dump of the portfolio API response and a
flat holdings CSV. Both produce a `PortfolioSummary` ready for valuation.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List
from io import StringIO
import csv
import json
import logging

from pydantic import ValidationError

from portfolio_valuation.data_models.holding import PortfolioHolding, Product, ProductType
from portfolio_valuation.data_models.portfolio_summary import PortfolioSummary

logger = logging.getLogger(__name__)

REQUIRED_CSV_COLUMNS = {"symbol", "quantity", "total_invested"}


def _unwrap_portfolio_payload(payload: Any) -> Dict[str, Any]:
    """Accept either the API envelope or a bare portfolio object."""
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("portfolio"), dict):
        if payload.get("success") is False:
            raise ValueError("Portfolio payload reports success=false")
        return data["portfolio"]
    if "portfolio" in payload and isinstance(payload["portfolio"], dict):
        return payload["portfolio"]
    return payload


def load_portfolio_from_json(json_path: Path | str) -> PortfolioSummary:
    """Load a portfolio API response saved as JSON.

    Raises:
        FileNotFoundError: the file does not exist.
        ValueError: the file is not JSON or does not describe a portfolio.
    """
    path = Path(json_path)
    if not path.exists():
        raise FileNotFoundError(f"Portfolio JSON file not found: {path}")

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc

    portfolio = _unwrap_portfolio_payload(payload)
    try:
        summary = PortfolioSummary.model_validate(portfolio)
    except ValidationError as exc:
        raise ValueError(f"Malformed portfolio payload in {path}: {exc}") from exc

    logger.info("Loaded portfolio with %d holdings from %s", len(summary.holdings), path)
    return summary


def safe_float(val: str | None) -> float | None:
    if val is None:
        return None
    s = str(val).strip()
    if s == "" or s.lower() in {"unknown", "na", "n/a", "-", "nan"}:
        return None
    # tolerate "$1,234.50" style cells
    s = s.replace("$", "").replace(",", "")
    try:
        return float(s)
    except ValueError:
        return None


def load_holdings_from_csv(csv_path: Path | str) -> PortfolioSummary:
    """Load a flat holdings CSV into a PortfolioSummary.

    Expected columns: symbol, quantity, total_invested; optional name, type,
    share_price, sector, geography, average_cost, id.

    Markdown code fences wrapping the CSV are stripped. Unparseable
    quantity / total_invested cells are treated as 0 (with a warning); an
    unparseable share_price is left missing, which values the holding at 0.
    """
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"Holdings CSV file not found: {path}")

    text = path.read_text(encoding="utf-8")
    cleaned_lines = [ln for ln in text.splitlines() if not ln.strip().startswith("```")]
    reader = csv.DictReader(StringIO("\n".join(cleaned_lines)))
    rows = list(reader)

    if not rows:
        raise ValueError(f"No rows found in {path} after parsing")

    missing = REQUIRED_CSV_COLUMNS - set(reader.fieldnames or [])
    if missing:
        raise ValueError(f"Missing required columns in holdings CSV: {sorted(missing)}")

    holdings: List[PortfolioHolding] = []
    for i, r in enumerate(rows):
        symbol = (r.get("symbol") or "").strip()

        quantity = safe_float(r.get("quantity"))
        if quantity is None:
            logger.warning("Unparseable quantity for row %d (%s); using 0", i, symbol)
            quantity = 0.0

        total_invested = safe_float(r.get("total_invested"))
        if total_invested is None:
            logger.warning("Unparseable total_invested for row %d (%s); using 0", i, symbol)
            total_invested = 0.0

        share_price = safe_float(r.get("share_price"))
        if share_price is None:
            logger.warning("Missing share_price for %s; it will be valued at 0", symbol)

        raw_type = (r.get("type") or "").strip().upper()
        try:
            product_type = ProductType(raw_type) if raw_type else ProductType.REIT
        except ValueError:
            logger.warning("Unknown product type %r for %s; assuming REIT", raw_type, symbol)
            product_type = ProductType.REIT

        product = Product(
            id=r.get("product_id") or symbol,
            name=r.get("name") or symbol,
            symbol=symbol,
            type=product_type,
            share_price=share_price,
            sector=r.get("sector") or None,
            geography=r.get("geography") or None,
        )
        holdings.append(
            PortfolioHolding(
                id=r.get("id") or f"{symbol}-{i}",
                product=product,
                quantity=quantity,
                average_cost=safe_float(r.get("average_cost")) or 0.0,
                total_invested=total_invested,
            )
        )

    logger.info("Loaded %d holdings from %s", len(holdings), path)
    return PortfolioSummary(holdings=holdings)

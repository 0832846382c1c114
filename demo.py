"""Public CLI entrypoint for valuing a portfolio.

Commands:
  run-valuation  - load a portfolio (file or live API), value it, save JSON

This file is a simple, public-facing CLI that wraps the services in
`portfolio_valuation`.
"""
from __future__ import annotations

import logging
import os
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), "src"))
from pathlib import Path
from typing import Optional

import typer

from portfolio_valuation.cli.value_portfolio import load_portfolio, render_table
from portfolio_valuation.config import get_settings
from portfolio_valuation.data_models.api_result import Err
from portfolio_valuation.services.export_service import export_holdings_to_csv
from portfolio_valuation.services.http_client import HTTPClient
from portfolio_valuation.services.portfolio_api_service import PortfolioApiClient
from portfolio_valuation.services.session_service import NotificationService, SessionService
from portfolio_valuation.services.valuation_service import calculate_portfolio_totals

logger = logging.getLogger(__name__)


def run_valuation(
    portfolio_file: Optional[str] = typer.Option(None, help="Portfolio JSON dump or holdings CSV."),
    token: Optional[str] = typer.Option(None, envvar="VALUATION_API_TOKEN", help="Bearer token for the live API."),
    output_dir: str = typer.Option("out", help="Directory for the JSON and CSV outputs."),
):
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    notifications = NotificationService()

    if portfolio_file:
        print(f"Loading portfolio from {portfolio_file}...")
        try:
            portfolio = load_portfolio(Path(portfolio_file))
        except (FileNotFoundError, ValueError) as exc:
            logger.error("Could not load portfolio: %s", exc)
            raise typer.Exit(code=1)
        summary = calculate_portfolio_totals(portfolio)
    else:
        session = SessionService()
        if token:
            session.sign_in(token)
        print(f"Fetching portfolio from {settings.API_BASE_URL}...")
        with HTTPClient.from_settings(settings, token_provider=session) as http:
            result = PortfolioApiClient(http).get_valued_portfolio()
        if isinstance(result, Err):
            notifications.error(f"Could not fetch portfolio: {result.message}")
            for n in notifications.drain():
                print(f"[{n.severity.value}] {n.message}")
            raise typer.Exit(code=1)
        summary = result.value

    print(render_table(summary, settings.CURRENCY))

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    valuation_path = out / "valuation.json"
    valuation_path.write_text(summary.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
    export_holdings_to_csv(summary.holdings, out / "holdings.csv")
    notifications.success(f"Wrote valuation to {valuation_path}")

    for n in notifications.drain():
        print(f"[{n.severity.value}] {n.message}")


if __name__ == "__main__":
    typer.run(run_valuation)

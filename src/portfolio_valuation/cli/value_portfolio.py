"""CLI to value a saved portfolio and print a holdings table.

Reads either a JSON dump of the portfolio API response or a flat holdings
CSV, revalues every holding at its share price and prints the result.
"""
# Example:
#
# python -m portfolio_valuation.cli.value_portfolio \
#   --portfolio-file data/portfolio_sample.json \
#   --export-holdings out/holdings.csv
from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import argparse
import logging
import sys

from portfolio_valuation.config import get_settings
from portfolio_valuation.data_models.portfolio_summary import CalculatedPortfolioSummary, PortfolioSummary
from portfolio_valuation.services.export_service import export_holdings_to_csv
from portfolio_valuation.services.formatting_service import format_currency, format_percentage
from portfolio_valuation.services.portfolio_loader_service import load_holdings_from_csv, load_portfolio_from_json
from portfolio_valuation.services.valuation_service import calculate_portfolio_totals, compute_allocation

logger = logging.getLogger(__name__)


def load_portfolio(path: Path) -> PortfolioSummary:
    if path.suffix.lower() == ".csv":
        return load_holdings_from_csv(path)
    return load_portfolio_from_json(path)


def render_table(summary: CalculatedPortfolioSummary, currency: str = "USD") -> str:
    """Plain-text holdings table followed by portfolio totals and allocation."""
    header = f"{'Symbol':<10}{'Quantity':>12}{'Price':>14}{'Value':>16}{'P&L':>16}{'P&L %':>10}"
    lines: List[str] = [header, "-" * len(header)]
    for h in summary.holdings:
        lines.append(
            f"{h.product.symbol:<10}"
            f"{h.quantity:>12g}"
            f"{format_currency(h.product.share_price, currency):>14}"
            f"{format_currency(h.current_value, currency):>16}"
            f"{format_currency(h.unrealized_pnl, currency):>16}"
            f"{format_percentage(h.unrealized_pnl_percentage):>10}"
        )
    lines.append("-" * len(header))
    lines.append(f"Total value:    {format_currency(summary.total_value, currency)}")
    lines.append(f"Total invested: {format_currency(summary.total_invested, currency)}")
    lines.append(
        f"Total P&L:      {format_currency(summary.total_pnl, currency)} "
        f"({format_percentage(summary.total_pnl_percentage)})"
    )

    allocation = compute_allocation(summary.holdings, by="type")
    if allocation:
        parts = [f"{s.type.value} {s.percentage:.2f}%" for s in allocation]
        lines.append(f"Allocation:     {', '.join(parts)}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Value a saved portfolio at current share prices.")
    parser.add_argument("--portfolio-file", dest="portfolio_file", type=str, required=True,
                        help="Portfolio API JSON dump or holdings CSV.")
    parser.add_argument("--format", dest="output_format", choices=("table", "json"), default="table",
                        help="Output format: table|json (default table).")
    parser.add_argument("--export-holdings", dest="export_holdings", type=str, default=None,
                        help="If provided, write the valued holdings CSV to this path.")
    parser.add_argument("--currency", dest="currency", type=str, default=None,
                        help="Currency code for display (defaults to VALUATION_CURRENCY).")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        portfolio = load_portfolio(Path(args.portfolio_file))
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Could not load portfolio: %s", exc)
        return 1

    summary = calculate_portfolio_totals(portfolio)

    if args.output_format == "json":
        print(summary.model_dump_json(indent=2, by_alias=True))
    else:
        print(render_table(summary, args.currency or settings.CURRENCY))

    if args.export_holdings:
        export_holdings_to_csv(summary.holdings, args.export_holdings)
    return 0


if __name__ == "__main__":
    sys.exit(main())

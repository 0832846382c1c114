"""CSV exports of valued holdings and transaction history."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List
import logging

import pandas as pd

from portfolio_valuation.data_models.holding import CalculatedHolding
from portfolio_valuation.data_models.transaction import Transaction
from portfolio_valuation.services.formatting_service import format_date

logger = logging.getLogger(__name__)

HOLDINGS_COLUMNS = ["Product", "Symbol", "Type", "Quantity", "Avg Cost", "Current Value", "P&L", "P&L %"]
TRANSACTIONS_COLUMNS = ["Date", "Type", "Product", "Quantity", "Price", "Amount", "Fees", "Status"]


def _money(value: float) -> str:
    return f"${value:.2f}"


def _quantity_cell(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def holdings_to_frame(holdings: Iterable[CalculatedHolding]) -> pd.DataFrame:
    rows = [
        {
            "Product": h.product.name,
            "Symbol": h.product.symbol,
            "Type": h.product.type.value,
            "Quantity": _quantity_cell(h.quantity),
            "Avg Cost": _money(h.average_cost),
            "Current Value": _money(h.current_value),
            "P&L": _money(h.unrealized_pnl),
            "P&L %": f"{h.unrealized_pnl_percentage:.2f}%",
        }
        for h in holdings
    ]
    return pd.DataFrame(rows, columns=HOLDINGS_COLUMNS)


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    rows: List[dict] = []
    for tx in transactions:
        rows.append(
            {
                "Date": format_date(tx.executed_at),
                "Type": tx.type.value,
                "Product": tx.product.name if tx.product else "N/A",
                # zero and missing quantities both render as an empty cell
                "Quantity": _quantity_cell(tx.quantity) if tx.quantity else "",
                "Price": _money(tx.price_per_share) if tx.price_per_share else "",
                "Amount": _money(tx.amount),
                "Fees": _money(tx.fees),
                "Status": tx.status.value,
            }
        )
    return pd.DataFrame(rows, columns=TRANSACTIONS_COLUMNS)


def export_holdings_to_csv(holdings: Iterable[CalculatedHolding], path: Path | str = "holdings.csv") -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df = holdings_to_frame(holdings)
    df.to_csv(out, index=False)
    logger.info("Wrote %d holdings to %s", len(df), out)
    return out


def export_transactions_to_csv(transactions: Iterable[Transaction], path: Path | str = "transactions.csv") -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df = transactions_to_frame(transactions)
    df.to_csv(out, index=False)
    logger.info("Wrote %d transactions to %s", len(df), out)
    return out

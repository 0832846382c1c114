from pathlib import Path
import json

import pytest

from portfolio_valuation.data_models.holding import ProductType
from portfolio_valuation.services.portfolio_loader_service import load_holdings_from_csv, load_portfolio_from_json
from portfolio_valuation.services.valuation_service import calculate_portfolio_totals

ROOT = Path(__file__).resolve().parents[1]


def _write_csv(path: Path, header: str, rows: list[str]):
    path.write_text("\n".join([header] + rows), encoding="utf-8")


def _portfolio_payload():
    return {
        "holdings": [
            {
                "id": "h1",
                "product": {"id": "p1", "name": "Demo REIT", "symbol": "DRT", "type": "REIT", "sharePrice": 12},
                "quantity": 100,
                "averageCost": 10,
                "currentValue": 1000,
                "unrealizedPnL": 0,
                "totalInvested": 1000,
                "lastUpdated": "2025-09-30T00:00:00Z",
            }
        ],
        "totalValue": 1000,
        "totalInvested": 1000,
        "totalPnL": 0,
        "dayChange": 0,
        "assetAllocation": [],
        "sectorAllocation": [],
        "updatedAt": "2025-09-30T00:00:00Z",
    }


def test_load_json_envelope(tmp_path):
    p = tmp_path / "portfolio.json"
    p.write_text(json.dumps({"success": True, "data": {"portfolio": _portfolio_payload()}}), encoding="utf-8")

    snap = load_portfolio_from_json(p)
    assert len(snap.holdings) == 1
    assert snap.holdings[0].product.share_price == 12

    out = calculate_portfolio_totals(snap)
    assert out.total_value == 1200.0
    assert out.total_pnl == 200.0


def test_load_bare_json_portfolio(tmp_path):
    p = tmp_path / "portfolio.json"
    p.write_text(json.dumps(_portfolio_payload()), encoding="utf-8")
    snap = load_portfolio_from_json(p)
    assert snap.holdings[0].id == "h1"


def test_load_json_failure_envelope(tmp_path):
    p = tmp_path / "portfolio.json"
    p.write_text(json.dumps({"success": False, "data": {"portfolio": _portfolio_payload()}}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_portfolio_from_json(p)


def test_load_json_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_portfolio_from_json(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_portfolio_from_json(bad)

    wrong = tmp_path / "wrong.json"
    wrong.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_portfolio_from_json(wrong)

    malformed = tmp_path / "malformed.json"
    malformed.write_text(json.dumps({"holdings": [{"quantity": 1}]}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_portfolio_from_json(malformed)


def test_load_sample_json():
    snap = load_portfolio_from_json(ROOT / "data" / "portfolio_sample.json")
    out = calculate_portfolio_totals(snap)
    # 100 * 12 + 250 * 9.85
    assert out.total_value == 3662.5
    assert out.total_invested == 3550.0
    assert out.total_pnl == 112.5


def test_load_holdings_csv(tmp_path):
    p = tmp_path / "holdings.csv"
    header = "symbol,name,type,quantity,total_invested,share_price,sector"
    rows = [
        "AAA,Alpha REIT,REIT,100,1000,12,Office",
        "BBB,Beta BDC,bdc,10,\"$1,000.00\",95.5,Credit",
    ]
    _write_csv(p, header, rows)

    snap = load_holdings_from_csv(p)
    assert len(snap.holdings) == 2
    a, b = snap.holdings
    assert a.product.symbol == "AAA"
    assert a.product.sector == "Office"
    assert b.product.type == ProductType.BDC
    assert b.total_invested == 1000.0

    out = calculate_portfolio_totals(snap)
    assert out.total_value == 2155.0


def test_load_holdings_csv_tolerates_fences_and_bad_cells(tmp_path):
    p = tmp_path / "holdings.csv"
    p.write_text(
        "\n".join(
            [
                "```csv",
                "symbol,quantity,total_invested,share_price,type",
                "AAA,abc,100,n/a,REIT",
                "BBB,5,-,10,WEIRD",
                "```",
            ]
        ),
        encoding="utf-8",
    )
    snap = load_holdings_from_csv(p)
    a, b = snap.holdings
    assert a.quantity == 0.0
    assert a.product.share_price is None
    assert b.total_invested == 0.0
    assert b.product.type == ProductType.REIT

    out = calculate_portfolio_totals(snap)
    assert out.holdings[0].current_value == 0.0
    assert out.holdings[1].current_value == 50.0


def test_load_holdings_csv_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_holdings_from_csv(tmp_path / "missing.csv")

    empty = tmp_path / "empty.csv"
    _write_csv(empty, "symbol,quantity,total_invested", [])
    with pytest.raises(ValueError):
        load_holdings_from_csv(empty)

    no_cols = tmp_path / "nocols.csv"
    _write_csv(no_cols, "symbol,share_price", ["AAA,10"])
    with pytest.raises(ValueError):
        load_holdings_from_csv(no_cols)

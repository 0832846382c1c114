"""Pytest configuration helpers.

Ensure the project's `src/` directory is on `sys.path` so imports like
`from portfolio_valuation...` work during test collection.
"""
from pathlib import Path
import sys

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    # Insert at front so tests prefer local package sources
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Drop cached settings and VALUATION_* overrides from the host env."""
    from portfolio_valuation.config import get_settings
    import os

    for key in list(os.environ):
        if key.startswith("VALUATION_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

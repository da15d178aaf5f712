"""Test configuration for the analytics toolbox."""

from pathlib import Path
import sys

import numpy as np
import pytest


# Ensure the local package is importable when the repo isn't installed.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def example_records() -> list[dict]:
    """Three records with one missing revenue value."""
    return [
        {"revenue": 100, "customers": 10},
        {"revenue": 200, "customers": 20},
        {"revenue": None, "customers": 30},
    ]


@pytest.fixture(scope="session")
def dashboard_records() -> list[dict]:
    """Synthetic dashboard records (120 days, two categories, three regions).

    Revenue depends linearly on customers and market share plus noise, so
    correlation and model tests have a real signal to find.
    """
    rng = np.random.default_rng(7)
    categories = ["Electronics", "Clothing"]
    regions = ["North", "South", "West"]
    records = []
    for i in range(120):
        customers = int(rng.integers(20, 200))
        market_share = float(rng.uniform(5, 30))
        satisfaction = float(np.round(rng.uniform(1, 5), 1))
        revenue = 50.0 * customers + 200.0 * market_share + float(rng.normal(0, 100))
        records.append(
            {
                "date": f"2024-01-{(i % 28) + 1:02d}" if i < 60 else f"2024-02-{(i % 28) + 1:02d}",
                "category": categories[i % 2],
                "region": regions[i % 3],
                "revenue": round(revenue, 2),
                "customers": customers,
                "satisfaction": satisfaction,
                "marketShare": round(market_share, 2),
            },
        )
    return records

"""pytest configuration and shared fixtures."""

from __future__ import annotations

import pandas as pd
import pytest

import arminer

# a/b/c scenario: every pair occurs twice, the triple once
ABC_BASKETS = [["a", "b", "c"], ["a", "b"], ["a", "c"], ["b", "c"]]


@pytest.fixture()
def abc_baskets() -> list[list[str]]:
    return [list(b) for b in ABC_BASKETS]


@pytest.fixture()
def abc_transactions() -> arminer.Transactions:
    return arminer.from_transactions(ABC_BASKETS)


@pytest.fixture()
def order_lines() -> pd.DataFrame:
    """Joined order/product rows, one per order line (the product label carries its department)."""
    return pd.DataFrame(
        {
            "order_id": [10, 10, 10, 11, 11, 12, 12, 12, 13, 13, 14],
            "product": [
                "Banana|produce",
                "Whole Milk|dairy eggs",
                "Bag of Organic Bananas|produce",
                "Banana|produce",
                "Whole Milk|dairy eggs",
                "Banana|produce",
                "Whole Milk|dairy eggs",
                "Organic Strawberries|produce",
                "Bag of Organic Bananas|produce",
                "Organic Strawberries|produce",
                "Banana|produce",
            ],
        }
    )

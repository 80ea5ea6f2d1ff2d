"""Reporting tests."""

from __future__ import annotations

import pandas as pd
import pytest

from arminer import (
    EdgeListRenderer,
    RuleRenderer,
    TableRenderer,
    apriori,
    association_rules,
    inspect,
    to_edges,
)
from arminer.report import format_itemset


@pytest.fixture()
def rules(abc_baskets: list[list[str]]) -> pd.DataFrame:
    return association_rules(apriori(abc_baskets, min_support=0.25), min_confidence=0.1)


def test_format_itemset() -> None:
    assert format_itemset(("a", "b")) == "{a,b}"
    assert format_itemset(()) == "{}"


def test_inspect_columns(rules: pd.DataFrame) -> None:
    table = inspect(rules)
    assert list(table.columns) == ["lhs", "rhs", "support", "confidence", "lift", "count", "chi_squared", "p_value"]
    assert len(table) == len(rules)
    assert table["lift"].is_monotonic_decreasing


def test_inspect_sort_and_top_n(rules: pd.DataFrame) -> None:
    table = inspect(rules, by="support", top_n=3)
    assert len(table) == 3
    assert (table["support"] == 0.5).all()
    assert table["lhs"].str.match(r"^\{[a-c]\}$").all()


def test_inspect_custom_measures(rules: pd.DataFrame) -> None:
    table = inspect(rules, measures=["confidence"])
    assert list(table.columns) == ["lhs", "rhs", "confidence"]


def test_inspect_errors(rules: pd.DataFrame) -> None:
    with pytest.raises(ValueError, match="Cannot sort by 'unicorn'"):
        inspect(rules, by="unicorn")
    with pytest.raises(ValueError, match="not in the rule table"):
        inspect(rules, measures=["unicorn"])


def test_to_edges(rules: pd.DataFrame) -> None:
    edges = to_edges(rules)
    assert list(edges.columns) == ["source", "target", "rule", "support", "confidence", "lift"]

    # {a,b} -> {c} contributes a->c and b->c
    pos = next(
        i for i, (a, c) in enumerate(zip(rules["antecedents"], rules["consequents"])) if a == ("a", "b") and c == ("c",)
    )
    from_rule = edges[edges["rule"] == pos]
    assert sorted(zip(from_rule["source"], from_rule["target"])) == [("a", "c"), ("b", "c")]

    expected = sum(len(a) * len(c) for a, c in zip(rules["antecedents"], rules["consequents"]))
    assert len(edges) == expected


def test_to_edges_missing_weight(rules: pd.DataFrame) -> None:
    with pytest.raises(ValueError, match="Weight column"):
        to_edges(rules, weights=["unicorn"])


def test_renderers(rules: pd.DataFrame) -> None:
    for renderer in (TableRenderer(top_n=2), EdgeListRenderer()):
        assert isinstance(renderer, RuleRenderer)

    pd.testing.assert_frame_equal(TableRenderer(top_n=2).render(rules), inspect(rules, top_n=2))
    pd.testing.assert_frame_equal(EdgeListRenderer().render(rules), to_edges(rules))

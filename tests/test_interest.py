"""Interest measure tests."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from scipy.stats import chi2_contingency

import arminer
from arminer import apriori, association_rules, chi_squared, interest_measures
from arminer.interest import _ALL_MEASURES, rule_measures


@pytest.mark.parametrize(
    "n_ab, n_a, n_b, n",
    [
        (2, 3, 3, 4),
        (10, 40, 25, 100),
        (0, 5, 5, 20),
        (7, 7, 9, 30),
    ],
)
def test_chi_squared_matches_scipy(n_ab: int, n_a: int, n_b: int, n: int) -> None:
    observed = np.array([[n_ab, n_a - n_ab], [n_b - n_ab, n - n_a - n_b + n_ab]])
    stat, p_value, _, _ = chi2_contingency(observed, correction=False)

    got_stat, got_p = chi_squared(n_ab, n_a, n_b, n)
    assert isinstance(got_stat, float)
    assert got_stat == pytest.approx(stat)
    assert got_p == pytest.approx(p_value)


def test_chi_squared_vectorised() -> None:
    stat, p_value = chi_squared(np.array([2, 10]), np.array([3, 40]), np.array([3, 25]), np.array([4, 100]))
    assert stat.shape == (2,)
    assert stat[0] == pytest.approx(4 / 9)
    assert np.all((p_value >= 0) & (p_value <= 1))


def test_chi_squared_degenerate_margin() -> None:
    stat, p_value = chi_squared(3, 3, 4, 4)
    assert np.isnan(stat)
    assert np.isnan(p_value)


def test_independent_items_have_zero_statistic() -> None:
    stat, p_value = chi_squared(25, 50, 50, 100)
    assert stat == pytest.approx(0.0)
    assert p_value == pytest.approx(1.0)


def test_rule_measures_zero_support_is_invariant_error() -> None:
    with pytest.raises(RuntimeError, match="invariant"):
        rule_measures([0], [0], [3], 4)


def test_interest_measures_recount(abc_transactions: arminer.Transactions) -> None:
    rules = association_rules(apriori(abc_transactions, min_support=0.25), min_confidence=0.1)
    stripped = rules[["antecedents", "consequents", "confidence"]]

    recounted = interest_measures(stripped, abc_transactions, measures=_ALL_MEASURES)

    for m in _ALL_MEASURES:
        np.testing.assert_allclose(recounted[m].to_numpy(dtype=float), rules[m].to_numpy(dtype=float))


def test_interest_measures_on_other_sample(abc_transactions: arminer.Transactions) -> None:
    rules = association_rules(apriori(abc_transactions, min_support=0.5), min_confidence=0.5)
    holdout = arminer.from_transactions([["a", "b"], ["a", "b"], ["c"], ["a"]])

    scored = interest_measures(rules, holdout)
    a_b = scored[[tuple(a) == ("a",) and tuple(c) == ("b",) for a, c in zip(scored["antecedents"], scored["consequents"])]]
    # holdout: conf(a -> b) = 2/3, support(b) = 1/2
    assert a_b["lift"].iloc[0] == pytest.approx((2 / 3) / 0.5)
    # confidence is left as mined
    assert a_b["confidence"].iloc[0] == pytest.approx(2 / 3)


def test_interest_measures_unknown_item(abc_transactions: arminer.Transactions) -> None:
    rules = pd.DataFrame({"antecedents": [("a",)], "consequents": [("zzz",)]})
    scored = interest_measures(rules, abc_transactions, measures=_ALL_MEASURES)
    assert scored["consequent support"].iloc[0] == 0.0
    assert np.isnan(scored["lift"].iloc[0])
    assert np.isnan(scored["chi_squared"].iloc[0])


def test_interest_measures_holdout_missing_item() -> None:
    rules = association_rules(
        apriori([["a", "b"], ["a", "b"], ["c", "b"], ["c", "b"]], min_support=0.5), min_confidence=0.5
    )
    holdout = arminer.from_transactions([["a", "b"], ["b"]])

    scored = interest_measures(rules, holdout, measures=_ALL_MEASURES)
    by_rule = {(tuple(row["antecedents"]), tuple(row["consequents"])): row for _, row in scored.iterrows()}

    assert len(by_rule) == 4
    # c never occurs in the holdout
    assert np.isnan(by_rule[(("c",), ("b",))]["confidence"])
    assert np.isnan(by_rule[(("c",), ("b",))]["lift"])
    assert np.isnan(by_rule[(("c",), ("b",))]["conviction"])
    assert np.isnan(by_rule[(("b",), ("c",))]["lift"])
    assert by_rule[(("b",), ("c",))]["confidence"] == 0.0
    # rules over items present in the holdout are still scored
    assert by_rule[(("a",), ("b",))]["lift"] == pytest.approx(1.0)
    assert by_rule[(("b",), ("a",))]["confidence"] == pytest.approx(0.5)


def test_rule_measures_non_strict_empty_transactions() -> None:
    values = rule_measures([0], [0], [0], 0, strict=False)
    assert all(np.isnan(values[m][0]) for m in ("support", "confidence", "lift", "chi_squared"))


def test_interest_measures_unknown_measure(abc_transactions: arminer.Transactions) -> None:
    rules = pd.DataFrame({"antecedents": [("a",)], "consequents": [("b",)]})
    with pytest.raises(ValueError, match="Unknown measure"):
        interest_measures(rules, abc_transactions, measures=["unicorn"])


def test_interest_measures_empty(abc_transactions: arminer.Transactions) -> None:
    rules = pd.DataFrame({"antecedents": pd.Series(dtype=object), "consequents": pd.Series(dtype=object)})
    scored = interest_measures(rules, abc_transactions)
    assert scored.empty
    assert {"lift", "chi_squared", "p_value"} <= set(scored.columns)

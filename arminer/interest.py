"""Interest measures for association rules.

All measures derive from four counts per rule: transactions containing the
antecedent and consequent together (``n_ab``), the antecedent (``n_a``), the
consequent (``n_b``), and the total (``n``).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd
from scipy import stats

from ._support import count_itemsets

if TYPE_CHECKING:
    from .transactions import Transactions

_ALL_MEASURES = [
    "antecedent support",
    "consequent support",
    "support",
    "count",
    "confidence",
    "lift",
    "leverage",
    "conviction",
    "jaccard",
    "chi_squared",
    "p_value",
]

_DEFAULT_RECOUNT = ["lift", "chi_squared", "p_value"]


def chi_squared(n_ab: Any, n_a: Any, n_b: Any, n: Any) -> tuple[Any, Any]:
    """Chi-square statistic and p-value of the 2x2 rule contingency table.

    The table crosses antecedent present/absent with consequent
    present/absent. Expected cells are ``row total * column total / n``
    and no continuity correction is applied. The p-value uses the
    chi-square distribution with one degree of freedom.

    Tables with an empty row or column (an expected cell of zero) have no
    defined statistic; both values are ``nan`` there.

    Accepts scalars or equally shaped arrays; returns the same kind.
    """
    scalar = all(np.ndim(x) == 0 for x in (n_ab, n_a, n_b, n))
    n_ab, n_a, n_b, n = (np.asarray(x, dtype=np.float64) for x in (n_ab, n_a, n_b, n))

    o11 = n_ab
    o10 = n_a - n_ab
    o01 = n_b - n_ab
    o00 = n - n_a - n_b + n_ab
    margins = n_a * n_b * (n - n_a) * (n - n_b)

    with np.errstate(divide="ignore", invalid="ignore"):
        stat = np.where(margins > 0, n * (o11 * o00 - o10 * o01) ** 2 / margins, np.nan)
    p_value = stats.chi2.sf(stat, df=1)

    if scalar:
        return float(stat), float(p_value)
    return stat, p_value


def rule_measures(n_ab: Any, n_a: Any, n_b: Any, n: int, strict: bool = True) -> dict[str, np.ndarray]:
    """Compute every measure in ``_ALL_MEASURES`` from per-rule counts.

    With ``strict=False`` a zero antecedent or consequent count yields ``nan``
    for the ratio measures that divide by it instead of raising.
    """
    n_ab = np.asarray(n_ab, dtype=np.int64)
    n_a = np.asarray(n_a, dtype=np.int64)
    n_b = np.asarray(n_b, dtype=np.int64)

    if strict and (n <= 0 or np.any(n_a <= 0) or np.any(n_b <= 0)):
        raise RuntimeError(
            "Internal invariant violated: rule antecedent or consequent has zero support. "
            "Every side of a rule must be drawn from a frequent itemset."
        )

    with np.errstate(divide="ignore", invalid="ignore"):
        s_ab = n_ab / n if n > 0 else np.full(n_ab.shape, np.nan)
        s_a = n_a / n if n > 0 else np.full(n_a.shape, np.nan)
        s_b = n_b / n if n > 0 else np.full(n_b.shape, np.nan)
        confidence = np.where(n_a > 0, n_ab / n_a, np.nan)
        lift = np.where(n_b > 0, confidence / s_b, np.nan)
        conviction = np.where(
            np.isnan(confidence),
            np.nan,
            np.where(confidence < 1.0, (1.0 - s_b) / (1.0 - confidence), np.inf),
        )
        jaccard = s_ab / (s_a + s_b - s_ab)

    chi, p_value = chi_squared(n_ab, n_a, n_b, np.full(n_ab.shape, n))

    return {
        "antecedent support": s_a,
        "consequent support": s_b,
        "support": s_ab,
        "count": n_ab,
        "confidence": confidence,
        "lift": lift,
        "leverage": s_ab - s_a * s_b,
        "conviction": conviction,
        "jaccard": jaccard,
        "chi_squared": chi,
        "p_value": p_value,
    }


def interest_measures(
    rules: pd.DataFrame,
    transactions: Transactions,
    measures: Sequence[str] | None = None,
    chunk_size: int = 4096,
) -> pd.DataFrame:
    """Recount rule measures against a transaction set.

    Counts for the antecedent, consequent and their union are taken by
    scanning *transactions*, so the rules may come from any source (another
    sample, a saved table, a filtered subset). Ratio measures are ``nan`` for
    rules whose antecedent or consequent never occurs in *transactions*.

    Parameters
    ----------
    rules : pandas.DataFrame
        Rule table with ``antecedents`` and ``consequents`` columns.
    transactions : Transactions
        Baskets to evaluate the rules on.
    measures : Sequence[str] | None, default=None
        Measures to (re)compute. Defaults to ``lift``, ``chi_squared`` and
        ``p_value``. Any name from ``_ALL_MEASURES`` is accepted.

    Returns
    -------
    pandas.DataFrame
        Copy of *rules* with the requested measure columns set.
    """
    if measures is None:
        measures = _DEFAULT_RECOUNT
    unknown = [m for m in measures if m not in _ALL_MEASURES]
    if unknown:
        raise ValueError(f"Unknown measure(s) {unknown}. Choose from {_ALL_MEASURES}.")
    for col in ("antecedents", "consequents"):
        if col not in rules.columns:
            raise ValueError(f"The input DataFrame must contain an '{col}' column")

    result = rules.copy()
    if rules.empty:
        for m in measures:
            if m not in result.columns:
                result[m] = pd.Series(dtype=float)
        return result

    ants = [tuple(a) for a in rules["antecedents"]]
    cons = [tuple(c) for c in rules["consequents"]]
    unions = [a + c for a, c in zip(ants, cons)]

    n_ab = count_itemsets(transactions, unions, chunk_size)
    n_a = count_itemsets(transactions, ants, chunk_size)
    n_b = count_itemsets(transactions, cons, chunk_size)

    values = rule_measures(n_ab, n_a, n_b, transactions.n_transactions, strict=False)
    for m in measures:
        result[m] = values[m]
    return result

from __future__ import annotations

import time
from itertools import combinations
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from ._validation import check_fraction, check_lengths
from .interest import _ALL_MEASURES, interest_measures, rule_measures

if TYPE_CHECKING:
    from .transactions import Transactions

_RULE_COLUMNS = ["antecedents", "consequents"] + _ALL_MEASURES


def association_rules(
    df: pd.DataFrame,
    min_confidence: float = 0.8,
    min_len: int = 1,
    num_itemsets: int | None = None,
    remove_redundant: bool = False,
    transactions: Transactions | None = None,
    verbose: int = 0,
) -> pd.DataFrame:
    """Generate association rules from frequent itemsets.

    Every non-empty proper subset ``A`` of a frequent itemset ``I`` is tried
    as antecedent with ``B = I - A`` as consequent. A rule is kept when
    ``|A| + |B| >= min_len`` and ``confidence(A -> B) >= min_confidence``.

    Parameters
    ----------
    df : pandas.DataFrame
        Frequent itemsets with ``support`` and ``itemsets`` columns (and
        ideally ``count``), as returned by :func:`arminer.apriori`. The table
        must be downward closed: every subset of a listed itemset is listed.
    min_confidence : float, default=0.8
        Minimum confidence in ``(0, 1]``.
    min_len : int, default=1
        Minimum number of items in antecedent plus consequent.
    num_itemsets : int | None, default=None
        Number of transactions the supports refer to. Read from
        ``df.attrs["num_itemsets"]`` when omitted.
    remove_redundant : bool, default=False
        Drop redundant rules, see :func:`arminer.prune_redundant`.
    transactions : Transactions | None, default=None
        When given, ``lift``, ``chi_squared`` and ``p_value`` are recounted
        against these transactions.
    verbose : int, default=0
        Print progress messages when non-zero.

    Returns
    -------
    pandas.DataFrame
        One row per rule with columns ``antecedents``, ``consequents`` (tuples
        in canonical item order) and the measures ``antecedent support``,
        ``consequent support``, ``support``, ``count``, ``confidence``,
        ``lift``, ``leverage``, ``conviction``, ``jaccard``, ``chi_squared``
        and ``p_value``. Sorted by confidence, then lift, descending.
    """
    min_confidence = check_fraction("min_confidence", min_confidence)
    check_lengths(min_len)

    if "support" not in df.columns:
        raise ValueError("The input DataFrame must contain a 'support' column")
    if "itemsets" not in df.columns:
        raise ValueError("The input DataFrame must contain an 'itemsets' column")

    n = _resolve_num_itemsets(df, num_itemsets)

    if df.empty or n == 0:
        return _empty_rules(n)

    t0 = 0.0
    if verbose:
        print(f"[{time.strftime('%X')}] Generating rules from {len(df):,} itemsets (min_confidence={min_confidence})...")
        t0 = time.perf_counter()

    if "count" in df.columns:
        counts = df["count"].to_numpy(dtype=np.int64)
    else:
        counts = np.rint(df["support"].to_numpy(dtype=np.float64) * n).astype(np.int64)

    table: dict[tuple[str, ...], int] = {}
    for iset, cnt in zip(df["itemsets"], counts):
        table[_canonical(iset)] = int(cnt)

    ants: list[tuple[str, ...]] = []
    cons: list[tuple[str, ...]] = []
    n_ab: list[int] = []
    n_a: list[int] = []
    n_b: list[int] = []

    min_size = max(2, min_len)
    for iset, cnt in table.items():
        if len(iset) < min_size:
            continue
        for r in range(1, len(iset)):
            for ant in combinations(iset, r):
                ant_count = table.get(ant, 0)
                if ant_count <= 0:
                    raise RuntimeError(
                        f"Internal invariant violated: antecedent {ant} of frequent itemset {iset} "
                        "has no positive support count. The itemset table is not downward closed."
                    )
                if cnt / ant_count < min_confidence:
                    continue
                con = tuple(x for x in iset if x not in ant)
                ants.append(ant)
                cons.append(con)
                n_ab.append(cnt)
                n_a.append(ant_count)
                n_b.append(table.get(con, 0))

    if not ants:
        return _empty_rules(n)

    measures = rule_measures(n_ab, n_a, n_b, n)
    conf, lift = measures["confidence"], measures["lift"]
    order = sorted(range(len(ants)), key=lambda i: (-conf[i], -lift[i], ants[i], cons[i]))

    result = pd.DataFrame(
        {
            "antecedents": pd.Series([ants[i] for i in order], dtype=object),
            "consequents": pd.Series([cons[i] for i in order], dtype=object),
            **{name: values[order] for name, values in measures.items()},
        },
        columns=_RULE_COLUMNS,
    )
    result.attrs["num_itemsets"] = n

    if remove_redundant:
        from .redundancy import prune_redundant

        result = prune_redundant(result)

    if transactions is not None:
        result = interest_measures(result, transactions)

    if verbose:
        print(f"[{time.strftime('%X')}] Generated {len(result):,} rules in {time.perf_counter() - t0:.2f}s.")

    return result


def _canonical(iset: Any) -> tuple[str, ...]:
    return tuple(sorted(str(x) for x in iset))


def _resolve_num_itemsets(df: pd.DataFrame, num_itemsets: int | None) -> int:
    if num_itemsets is not None:
        return int(num_itemsets)
    # set automatically by apriori()
    if "num_itemsets" in df.attrs:
        return int(df.attrs["num_itemsets"])
    if df.empty:
        return 0
    if "count" in df.columns:
        support = float(df["support"].iloc[0])
        if support > 0:
            return round(float(df["count"].iloc[0]) / support)
    raise ValueError(
        "Cannot infer the number of transactions: pass `num_itemsets` or a DataFrame "
        "with a 'count' column or `attrs['num_itemsets']`."
    )


def _empty_rules(n: int) -> pd.DataFrame:
    result = pd.DataFrame(columns=pd.Index(_RULE_COLUMNS))
    result.attrs["num_itemsets"] = n
    return result

from __future__ import annotations

from itertools import combinations

import pandas as pd


def is_redundant(rules: pd.DataFrame) -> pd.Series:
    """Flag redundant rules.

    A rule ``A -> B`` is redundant when the table also holds a rule
    ``A' -> B`` whose antecedent is a strict, non-empty subset of ``A`` and
    whose confidence is at least as high. Equal confidence counts as
    redundant, so the more general rule is kept.

    Parameters
    ----------
    rules : pandas.DataFrame
        Rule table with ``antecedents``, ``consequents`` and ``confidence``.

    Returns
    -------
    pandas.Series
        Boolean mask aligned with ``rules.index``.
    """
    for col in ("antecedents", "consequents", "confidence"):
        if col not in rules.columns:
            raise ValueError(f"The input DataFrame must contain a '{col}' column")

    ants = [frozenset(a) for a in rules["antecedents"]]
    cons = [frozenset(c) for c in rules["consequents"]]
    conf = rules["confidence"].to_numpy(dtype=float)

    # consequent -> antecedent -> best confidence
    groups: dict[frozenset, dict[frozenset, float]] = {}
    for a, c, v in zip(ants, cons, conf):
        group = groups.setdefault(c, {})
        if v > group.get(a, -1.0):
            group[a] = v

    flags = []
    for a, c, v in zip(ants, cons, conf):
        group = groups[c]
        redundant = False
        # smallest antecedents first; they are the likeliest to dominate
        for size in range(1, len(a)):
            for sub in combinations(a, size):
                better = group.get(frozenset(sub))
                if better is not None and better >= v:
                    redundant = True
                    break
            if redundant:
                break
        flags.append(redundant)

    return pd.Series(flags, index=rules.index, dtype=bool, name="redundant")


def prune_redundant(rules: pd.DataFrame) -> pd.DataFrame:
    """Return *rules* without redundant rules (see :func:`is_redundant`).

    Idempotent: pruning an already pruned table changes nothing.
    """
    if rules.empty:
        return rules.copy()
    result = rules.loc[~is_redundant(rules)].reset_index(drop=True)
    result.attrs = dict(rules.attrs)
    return result

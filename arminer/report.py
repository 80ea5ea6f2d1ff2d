from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from .interest import _ALL_MEASURES

_DISPLAY_MEASURES = ["support", "confidence", "lift", "count", "chi_squared", "p_value"]


def format_itemset(items: Iterable[Any]) -> str:
    """Render an itemset as ``{a,b,c}``."""
    return "{" + ",".join(str(x) for x in items) + "}"


def inspect(
    rules: pd.DataFrame,
    by: str = "lift",
    ascending: bool = False,
    top_n: int | None = None,
    measures: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Display table of rules, strongest first.

    Parameters
    ----------
    rules : pandas.DataFrame
        Rule table from :func:`arminer.association_rules`.
    by : str, default="lift"
        Measure to sort by.
    ascending : bool, default=False
        Sort direction.
    top_n : int | None, default=None
        Keep only the first *top_n* rows after sorting.
    measures : Sequence[str] | None, default=None
        Measure columns to show. Defaults to support, confidence, lift,
        count, chi_squared and p_value when present.

    Returns
    -------
    pandas.DataFrame
        Columns ``lhs`` and ``rhs`` (``{a,b}`` strings) followed by the measures.

    Examples
    --------
    >>> rules = arminer.association_rules(freq, min_confidence=0.5)
    >>> arminer.inspect(rules, by="confidence", top_n=10)
    """
    if by not in rules.columns:
        raise ValueError(f"Cannot sort by '{by}': column not found. Available columns: {list(rules.columns)}")

    if measures is None:
        measures = [m for m in _DISPLAY_MEASURES if m in rules.columns]
    else:
        unknown = [m for m in measures if m not in rules.columns]
        if unknown:
            raise ValueError(f"Measure(s) {unknown} not in the rule table. Known measures: {_ALL_MEASURES}")

    ordered = rules.sort_values(by, ascending=ascending, kind="stable")
    if top_n is not None:
        ordered = ordered.head(top_n)

    table = pd.DataFrame(
        {
            "lhs": [format_itemset(a) for a in ordered["antecedents"]],
            "rhs": [format_itemset(c) for c in ordered["consequents"]],
        },
        index=ordered.index,
    )
    for m in measures:
        table[m] = ordered[m].to_numpy()
    return table.reset_index(drop=True)


def to_edges(rules: pd.DataFrame, weights: Sequence[str] = ("support", "confidence", "lift")) -> pd.DataFrame:
    """Flatten rules into item-to-item edges for graph tools.

    Every rule ``A -> B`` yields one edge per pair ``(a, b)`` with ``a`` in
    ``A`` and ``b`` in ``B``. The ``rule`` column holds the row position of
    the originating rule.
    """
    missing = [w for w in weights if w not in rules.columns]
    if missing:
        raise ValueError(f"Weight column(s) {missing} not in the rule table")

    rows: list[dict[str, Any]] = []
    for pos, (ant, con) in enumerate(zip(rules["antecedents"], rules["consequents"])):
        for a in ant:
            for c in con:
                row: dict[str, Any] = {"source": a, "target": c, "rule": pos}
                for w in weights:
                    row[w] = rules[w].iat[pos]
                rows.append(row)

    return pd.DataFrame(rows, columns=["source", "target", "rule", *weights])


@dataclass(frozen=True)
class TableRenderer:
    """Renders rules with :func:`inspect`."""

    by: str = "lift"
    top_n: int | None = None

    def render(self, rules: pd.DataFrame) -> pd.DataFrame:
        return inspect(rules, by=self.by, top_n=self.top_n)


@dataclass(frozen=True)
class EdgeListRenderer:
    """Renders rules with :func:`to_edges`."""

    weights: tuple[str, ...] = ("support", "confidence", "lift")

    def render(self, rules: pd.DataFrame) -> pd.DataFrame:
        return to_edges(rules, self.weights)

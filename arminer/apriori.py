from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from ._support import count_support
from ._validation import check_fraction, check_lengths, min_count
from .model import Miner, RuleMinerMixin
from .transactions import Transactions, from_transactions

if TYPE_CHECKING:
    from .config import MiningConfig

logger = logging.getLogger(__name__)

_ITEMSET_COLUMNS = ["support", "count", "itemsets"]


def apriori(
    data: Transactions | pd.DataFrame | Any,
    min_support: float = 0.5,
    max_len: int | None = None,
    chunk_size: int = 4096,
    verbose: int = 0,
) -> pd.DataFrame:
    """Find frequent itemsets with the apriori algorithm.

    Parameters
    ----------
    data : Transactions | pandas.DataFrame | Any
        Baskets, or anything :func:`arminer.from_transactions` accepts.
    min_support : float, default=0.5
        Minimum support in ``(0, 1]``, as a fraction of transactions.
    max_len : int | None, default=None
        Maximum itemset length. ``None`` means no limit.
    chunk_size : int, default=4096
        Transaction rows scanned per shard while counting support.
    verbose : int, default=0
        Print progress messages when non-zero.

    Returns
    -------
    pandas.DataFrame
        Columns ``support``, ``count`` and ``itemsets`` (tuples of item labels
        in canonical order), ordered by length then canonical order.
        ``attrs["num_itemsets"]`` holds the number of transactions.

    Examples
    --------
    >>> import arminer
    >>> baskets = [["a", "b", "c"], ["a", "b"], ["a", "c"], ["b", "c"]]
    >>> freq = arminer.apriori(baskets, min_support=0.5)
    >>> freq["itemsets"].tolist()
    [('a',), ('b',), ('c',), ('a', 'b'), ('a', 'c'), ('b', 'c')]
    """
    min_support = check_fraction("min_support", min_support)
    check_lengths(1, max_len)

    txns = from_transactions(data, verbose=verbose)
    n = txns.n_transactions

    if n == 0 or txns.n_items == 0:
        return _build_result([], [], txns)

    threshold = min_count(min_support, n)

    t0 = 0.0
    if verbose:
        print(
            f"[{time.strftime('%X')}] Mining {n:,} transactions x {txns.n_items:,} items "
            f"(min_count={threshold})..."
        )
        t0 = time.perf_counter()

    item_counts = txns.item_counts
    level = [(int(j),) for j in np.flatnonzero(item_counts >= threshold)]
    found: list[tuple[int, ...]] = list(level)
    counts: list[int] = [int(item_counts[j[0]]) for j in level]
    logger.debug("level 1: %d frequent items of %d", len(level), txns.n_items)

    k = 1
    while level and (max_len is None or k < max_len):
        candidates = generate_candidates(level)
        logger.debug("level %d: %d candidates", k + 1, len(candidates))
        if not candidates:
            break

        cand_counts = count_support(txns.matrix, np.array(candidates, dtype=np.int64), chunk_size, verbose=verbose)
        level = [c for c, cnt in zip(candidates, cand_counts) if cnt >= threshold]
        found.extend(level)
        counts.extend(int(cnt) for cnt in cand_counts if cnt >= threshold)
        logger.debug("level %d: %d frequent", k + 1, len(level))
        k += 1

    if verbose:
        print(f"[{time.strftime('%X')}] Found {len(found):,} frequent itemsets in {time.perf_counter() - t0:.2f}s.")

    return _build_result(found, counts, txns)


def generate_candidates(level: Sequence[tuple[int, ...]]) -> list[tuple[int, ...]]:
    """Apriori join and prune step.

    *level* holds the frequent ``k``-itemsets as sorted tuples of column
    indices, in lexicographic order. Two itemsets are joined when they share
    their first ``k - 1`` items; a joined candidate is kept only if each of its
    ``k``-subsets is in *level*.
    """
    frequent = set(level)
    ordered = sorted(level)
    candidates: list[tuple[int, ...]] = []

    start = 0
    while start < len(ordered):
        prefix = ordered[start][:-1]
        end = start
        while end < len(ordered) and ordered[end][:-1] == prefix:
            end += 1

        for i in range(start, end):
            for j in range(i + 1, end):
                cand = ordered[i] + (ordered[j][-1],)
                # the two subsets missing one of the last two items are the joined parents
                if all(cand[:m] + cand[m + 1 :] in frequent for m in range(len(cand) - 2)):
                    candidates.append(cand)
        start = end

    return candidates


def _build_result(
    found: list[tuple[int, ...]],
    counts: list[int],
    txns: Transactions,
) -> pd.DataFrame:
    n = txns.n_transactions
    if not found:
        result = pd.DataFrame({col: pd.Series(dtype=dt) for col, dt in zip(_ITEMSET_COLUMNS, [float, np.int64, object])})
    else:
        count_arr = np.asarray(counts, dtype=np.int64)
        result = pd.DataFrame(
            {
                "support": count_arr / n,
                "count": count_arr,
                "itemsets": [tuple(txns.items[j] for j in iset) for iset in found],
            }
        )
    result.attrs["num_itemsets"] = n
    return result


class Apriori(Miner, RuleMinerMixin):
    """Apriori frequent itemset and association rule miner.

    Examples
    --------
    >>> model = Apriori.from_transactions(orders, "order_id", "product", min_support=0.01)
    >>> freq = model.mine()
    >>> rules = model.association_rules(min_confidence=0.5, remove_redundant=True)
    """

    def __init__(
        self,
        data: Transactions | pd.DataFrame | Any,
        config: MiningConfig | None = None,
        chunk_size: int = 4096,
        verbose: int = 0,
        **kwargs: Any,
    ):
        """Initialize the Apriori miner.

        Parameters
        ----------
        data : Transactions | pandas.DataFrame | Any
            Baskets, or anything :func:`arminer.from_transactions` accepts.
        config : MiningConfig | None, default=None
            Thresholds for the run.
        chunk_size : int, default=4096
            Transaction rows scanned per shard while counting support.
        verbose : int, default=0
            If > 0, print progress details to standard output.
        **kwargs
            ``min_support``, ``min_confidence``, ``min_len`` or ``max_len``
            overriding fields of *config*.
        """
        super().__init__(data, config=config, verbose=verbose, **kwargs)
        self.chunk_size = chunk_size
        self._freq_itemsets: pd.DataFrame | None = None

    def mine(self, **kwargs: Any) -> pd.DataFrame:
        """Execute the apriori algorithm on the stored transactions.

        Keyword arguments (``min_support``, ``max_len``) override the
        configuration for this call only.

        Returns
        -------
        pandas.DataFrame
            Columns ``support``, ``count`` and ``itemsets``.
        """
        if kwargs:
            cfg = self.config.replace(**kwargs)
            return apriori(self.transactions, cfg.min_support, cfg.max_len, self.chunk_size, self.verbose)

        if self._freq_itemsets is None:
            self._freq_itemsets = apriori(
                self.transactions,
                min_support=self.config.min_support,
                max_len=self.config.max_len,
                chunk_size=self.chunk_size,
                verbose=self.verbose,
            )
            self._invalidate_rules_cache()
        return self._freq_itemsets.copy()

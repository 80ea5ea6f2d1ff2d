"""Support counting over the one-hot transaction matrix."""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from scipy import sparse as sp

    from .transactions import Transactions

# Candidates per block; bounds the dense hit matrix at chunk_size * _CANDIDATE_BLOCK bools
_CANDIDATE_BLOCK = 4096


def count_support(
    matrix: sp.csr_matrix,
    candidates: np.ndarray,
    chunk_size: int = 4096,
    verbose: int = 0,
) -> np.ndarray:
    """Count the transactions containing each candidate itemset.

    Parameters
    ----------
    matrix : scipy.sparse.csr_matrix
        Boolean ``n_transactions x n_items`` matrix.
    candidates : numpy.ndarray
        ``(n_candidates, k)`` array of column indices, all candidates of the same length.
    chunk_size : int, default=4096
        Number of transaction rows scanned per shard. Partial counts are
        summed, so the result does not depend on this value.

    Returns
    -------
    numpy.ndarray
        ``int64`` support count per candidate.
    """
    candidates = np.asarray(candidates, dtype=np.int64)
    if candidates.ndim != 2:
        raise ValueError(f"`candidates` must be a 2-D array, got shape {candidates.shape}")
    if chunk_size < 1:
        raise ValueError(f"`chunk_size` must be a positive integer. Got {chunk_size}.")

    n_rows = matrix.shape[0]
    n_cand = candidates.shape[0]
    counts = np.zeros(n_cand, dtype=np.int64)
    if n_cand == 0 or n_rows == 0:
        return counts

    # Only materialise the columns the candidates touch
    cols = np.unique(candidates)
    sub = matrix[:, cols].tocsr()
    local = np.searchsorted(cols, candidates)

    starts: Any = range(0, n_rows, chunk_size)
    if verbose:
        print(f"[{time.strftime('%X')}] Counting {n_cand:,} candidates of length {candidates.shape[1]}...")
        try:
            from tqdm.auto import tqdm

            starts = tqdm(starts, total=-(-n_rows // chunk_size), desc="Support")
        except ImportError:
            pass

    for start in starts:
        dense = sub[start : start + chunk_size].toarray().astype(bool, copy=False)
        for lo in range(0, n_cand, _CANDIDATE_BLOCK):
            block = local[lo : lo + _CANDIDATE_BLOCK]
            hits = dense[:, block[:, 0]]
            for j in range(1, block.shape[1]):
                hits &= dense[:, block[:, j]]
            counts[lo : lo + len(block)] += hits.sum(axis=0)

    return counts


def count_itemsets(
    transactions: Transactions,
    itemsets: Sequence[Sequence[Any]],
    chunk_size: int = 4096,
) -> np.ndarray:
    """Support counts for itemsets given as item labels, of any mix of lengths.

    Labels unknown to *transactions* give a count of 0.
    """
    index = {label: j for j, label in enumerate(transactions.items)}
    counts = np.zeros(len(itemsets), dtype=np.int64)

    by_len: dict[int, list[int]] = {}
    encoded: list[tuple[int, ...] | None] = []
    for pos, iset in enumerate(itemsets):
        try:
            cols = tuple(sorted({index[str(x)] for x in iset}))
        except KeyError:
            encoded.append(None)
            continue
        encoded.append(cols)
        by_len.setdefault(len(cols), []).append(pos)

    for length, positions in by_len.items():
        if length == 0:
            counts[positions] = transactions.n_transactions
            continue
        cand = np.array([encoded[p] for p in positions], dtype=np.int64)
        counts[positions] = count_support(transactions.matrix, cand, chunk_size)

    return counts

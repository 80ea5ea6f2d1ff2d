from __future__ import annotations

import inspect
import os
import time
import typing
import warnings
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd
from scipy import sparse as sp

from ._compat import frame_kind, to_pandas

if TYPE_CHECKING:
    import polars as pl
    import pyarrow as pa

    from ._compat import DataFrame


@dataclass(frozen=True, eq=False)
class Transactions:
    """Immutable set of baskets.

    Parameters
    ----------
    items : tuple[str, ...]
        Item labels in canonical (sorted) order; column ``j`` of *matrix* is ``items[j]``.
    ids : tuple
        Transaction identifiers in first-seen order; row ``i`` of *matrix* is ``ids[i]``.
    matrix : scipy.sparse.csr_matrix
        Boolean ``n_transactions x n_items`` incidence matrix.
    """

    items: tuple[str, ...]
    ids: tuple[Any, ...]
    matrix: sp.csr_matrix

    def __post_init__(self) -> None:
        n_rows, n_cols = self.matrix.shape
        if n_rows != len(self.ids) or n_cols != len(self.items):
            raise ValueError(
                f"Matrix shape {self.matrix.shape} does not match "
                f"{len(self.ids)} transaction ids and {len(self.items)} items."
            )

    @property
    def n_transactions(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def n_items(self) -> int:
        return int(self.matrix.shape[1])

    @property
    def item_counts(self) -> np.ndarray:
        """Number of transactions containing each item, aligned with :attr:`items`."""
        return np.asarray(self.matrix.sum(axis=0), dtype=np.int64).ravel()

    def __len__(self) -> int:
        return self.n_transactions

    def baskets(self) -> Iterator[frozenset[str]]:
        """Iterate over the transactions as frozensets of item labels."""
        indptr, indices = self.matrix.indptr, self.matrix.indices
        for i in range(self.n_transactions):
            yield frozenset(self.items[j] for j in indices[indptr[i] : indptr[i + 1]])

    def to_frame(self) -> pd.DataFrame:
        """One-hot boolean DataFrame (sparse-backed) indexed by transaction id."""
        return pd.DataFrame.sparse.from_spmatrix(
            self.matrix,
            index=pd.Index(list(self.ids)),
            columns=list(self.items),
        ).astype(pd.SparseDtype("bool", fill_value=False))

    def __repr__(self) -> str:
        return f"Transactions(n_transactions={self.n_transactions}, n_items={self.n_items})"


def from_transactions(
    data: DataFrame | Sequence[Iterable[Any]] | Mapping[Any, Iterable[Any]] | Iterable[Mapping[str, Any]] | Any,
    transaction_col: str | None = None,
    item_col: str | None = None,
    min_item_count: int = 1,
    verbose: int = 0,
) -> Transactions:
    """Build baskets from transactional data.

    Parameters
    ----------
    data
        One of:

        - **Pandas / Polars DataFrame or PyArrow Table** in long format with
          (at least) two columns: one for the transaction identifier and one
          for the item.
        - **One-hot DataFrame** with one bool (or 0/1 integer) column per item
          and one row per transaction; the index gives the transaction ids.
          Used when neither *transaction_col* nor *item_col* is given.
        - **List of lists** where each inner list contains the items of a
          single transaction, e.g. ``[["bread", "milk"], ["bread", "eggs"]]``.
        - **Mapping** of transaction id to items, e.g. ``{101: ["bread", "milk"]}``.
        - **Iterable of records** (mappings), e.g.
          ``[{"order_id": 1, "product": "milk"}, ...]``.

    transaction_col
        Name of the column that identifies transactions.  If ``None`` the
        first column is used.  Ignored for list-of-lists and mapping input.

    item_col
        Name of the column that contains item values.  If ``None`` the
        second column is used.  Ignored for list-of-lists and mapping input.

    min_item_count
        Minimum number of transactions an item must appear in to be kept.
        Default is 1 (keep everything).

    verbose
        Print progress messages when non-zero.

    Returns
    -------
    Transactions
        Deduplicated baskets ready for :func:`arminer.apriori`.  Items are
        stored as strings.

    Examples
    --------
    >>> import arminer
    >>> import pandas as pd
    >>> df = pd.DataFrame({
    ...     "order_id": [1, 1, 1, 2, 2, 3],
    ...     "item": ["milk", "bread", "eggs", "milk", "eggs", "jam"],
    ... })
    >>> txns = arminer.from_transactions(df)
    >>> txns.items
    ('bread', 'eggs', 'jam', 'milk')
    """
    if isinstance(data, Transactions):
        return data

    if frame_kind(data) is not None:
        df = typing.cast("pd.DataFrame", to_pandas(data))
        return _from_dataframe(df, transaction_col, item_col, min_item_count=min_item_count, verbose=verbose)

    if isinstance(data, Mapping):
        return _from_baskets(list(data.keys()), list(data.values()), min_item_count, verbose)

    if isinstance(data, (str, bytes)) or not isinstance(data, Iterable):
        raise TypeError(
            "Expected a Pandas/Polars DataFrame, PyArrow Table, list of baskets, "
            f"mapping or iterable of records, got {type(data)}"
        )

    rows = list(data)
    if rows and all(isinstance(row, Mapping) for row in rows):
        return from_records(rows, transaction_col, item_col, min_item_count=min_item_count, verbose=verbose)

    return _from_baskets(list(range(len(rows))), rows, min_item_count, verbose)


def from_records(
    records: Iterable[Mapping[str, Any]],
    transaction_col: str | None = None,
    item_col: str | None = None,
    min_item_count: int = 1,
    verbose: int = 0,
) -> Transactions:
    """Build baskets from a stream of mapping records (one per order line)."""
    df = pd.DataFrame.from_records(list(records))
    if df.empty and len(df.columns) == 0:
        return _empty()
    return _from_dataframe(df, transaction_col, item_col, min_item_count=min_item_count, verbose=verbose)


def from_pandas(
    df: pd.DataFrame,
    transaction_col: str | None = None,
    item_col: str | None = None,
    min_item_count: int = 1,
    verbose: int = 0,
) -> Transactions:
    """Shorthand for ``from_transactions(df, transaction_col, item_col)``."""
    return from_transactions(
        df, transaction_col=transaction_col, item_col=item_col, min_item_count=min_item_count, verbose=verbose
    )


def from_polars(
    df: pl.DataFrame,
    transaction_col: str | None = None,
    item_col: str | None = None,
    min_item_count: int = 1,
    verbose: int = 0,
) -> Transactions:
    """Shorthand for ``from_transactions(df, transaction_col, item_col)``."""
    return from_transactions(
        df, transaction_col=transaction_col, item_col=item_col, min_item_count=min_item_count, verbose=verbose
    )


def from_arrow(
    table: pa.Table,
    transaction_col: str | None = None,
    item_col: str | None = None,
    min_item_count: int = 1,
    verbose: int = 0,
) -> Transactions:
    """Shorthand for ``from_transactions(table, transaction_col, item_col)``."""
    return from_transactions(
        table, transaction_col=transaction_col, item_col=item_col, min_item_count=min_item_count, verbose=verbose
    )


def item_frequency(
    transactions: Transactions,
    kind: str = "relative",
    top_n: int | None = None,
) -> pd.Series:
    """Per-item frequency, most frequent first.

    Parameters
    ----------
    transactions : Transactions
        Baskets from :func:`from_transactions`.
    kind : str, default="relative"
        ``"relative"`` for the fraction of transactions containing the item,
        ``"absolute"`` for the raw count.
    top_n : int | None, default=None
        Return only the first *top_n* items.

    Returns
    -------
    pandas.Series
        Indexed by item label. Ties keep the canonical item order.
    """
    if kind not in ("relative", "absolute"):
        raise ValueError(f"`kind` must be 'relative' or 'absolute'. Got {kind!r}.")

    counts = transactions.item_counts
    order = np.lexsort((np.arange(len(counts)), -counts))
    labels = [transactions.items[j] for j in order]

    if kind == "absolute":
        values: np.ndarray = counts[order]
    else:
        n = transactions.n_transactions
        values = counts[order] / n if n else counts[order].astype(float)

    result = pd.Series(values, index=pd.Index(labels, name="item"), name="frequency")
    if top_n is not None:
        result = result.iloc[:top_n]
    return result


def _empty() -> Transactions:
    return Transactions(items=(), ids=(), matrix=sp.csr_matrix((0, 0), dtype=bool))


def _from_baskets(
    ids: list[Any],
    baskets: Sequence[Iterable[Any]],
    min_item_count: int,
    verbose: int,
) -> Transactions:
    t0 = 0.0
    if verbose:
        print(f"[{time.strftime('%X')}] Extracting items from {len(baskets):,} baskets...")
        t0 = time.perf_counter()

    row_idx: list[int] = []
    labels: list[str] = []
    for i, basket in enumerate(baskets):
        if isinstance(basket, (str, bytes)) or not isinstance(basket, Iterable):
            raise TypeError(f"Each transaction must be an iterable of items, got {type(basket)} at position {i}")
        for item in basket:
            row_idx.append(i)
            labels.append(str(item))

    result = _build(np.asarray(row_idx, dtype=np.int64), labels, ids, min_item_count, verbose)

    if verbose:
        print(f"[{time.strftime('%X')}] Baskets built in {time.perf_counter() - t0:.2f}s.")
    return result


def _from_dataframe(
    df: pd.DataFrame,
    transaction_col: str | None,
    item_col: str | None,
    min_item_count: int = 1,
    verbose: int = 0,
) -> Transactions:
    t0 = 0.0
    if verbose:
        print(f"[{time.strftime('%X')}] Building baskets from DataFrame (shape={df.shape})...")
        t0 = time.perf_counter()

    if transaction_col is None and item_col is None and _is_one_hot(df):
        result = _from_one_hot(df, min_item_count, verbose)
        if verbose:
            print(f"[{time.strftime('%X')}] Baskets built in {time.perf_counter() - t0:.2f}s.")
        return result

    cols = list(df.columns)

    if len(cols) < 2 and (transaction_col is None or item_col is None):
        raise ValueError(f"DataFrame must have at least 2 columns (transaction id + item), got {len(cols)}: {cols}")

    txn_col = transaction_col if transaction_col is not None else cols[0]
    itm_col = item_col if item_col is not None else cols[1]

    if txn_col not in df.columns:
        raise ValueError(f"Transaction column '{txn_col}' not found. Available columns: {cols}")
    if itm_col not in df.columns:
        raise ValueError(f"Item column '{itm_col}' not found. Available columns: {cols}")

    txn_codes, txn_uniques = pd.factorize(df[txn_col], sort=False)

    # order lines without an item still define a (possibly empty) transaction
    has_item = df[itm_col].notna().to_numpy() & (txn_codes >= 0)
    labels = df.loc[has_item, itm_col].astype(str).tolist()

    result = _build(
        txn_codes[has_item].astype(np.int64),
        labels,
        list(txn_uniques),
        min_item_count,
        verbose,
    )

    if verbose:
        print(f"[{time.strftime('%X')}] Baskets built in {time.perf_counter() - t0:.2f}s.")
    return result


def _build(
    row_idx: np.ndarray,
    labels: list[str],
    ids: list[Any],
    min_item_count: int,
    verbose: int,
) -> Transactions:
    n_txn = len(ids)

    # distinct items per basket
    pairs = pd.DataFrame({"row": row_idx, "item": pd.Series(labels, dtype=object)}).drop_duplicates()

    if min_item_count > 1:
        if verbose:
            print(f"[{time.strftime('%X')}] Filtering items bought in < {min_item_count} transactions...")
        counts = pairs["item"].value_counts()
        keep = typing.cast("pd.Index", counts[counts >= min_item_count].index)
        before = pairs["row"].nunique()
        pairs = pairs.loc[pairs["item"].isin(keep)]
        dropped = before - pairs["row"].nunique()
        if dropped:
            warnings.warn(
                f"{dropped} transaction(s) contain only items below min_item_count={min_item_count} "
                "and are kept as empty baskets.",
                stacklevel=_find_stack_level(),
            )

    item_codes, item_uniques = pd.factorize(pairs["item"], sort=True)

    data = np.ones(len(item_codes), dtype=np.int8)
    csr = sp.csr_matrix(
        (data, (pairs["row"].to_numpy(dtype=np.int64), item_codes.astype(np.int64))),
        shape=(n_txn, len(item_uniques)),
    )
    csr.data = np.minimum(csr.data, 1)
    csr.sort_indices()

    if verbose:
        print(f"[{time.strftime('%X')}] Found {n_txn:,} transactions and {len(item_uniques):,} unique items.")

    return Transactions(
        items=tuple(str(c) for c in item_uniques),
        ids=tuple(ids),
        matrix=csr.astype(bool),
    )


def _is_one_hot(df: pd.DataFrame) -> bool:
    """True for wide frames whose columns are all bool or 0/1 integers."""
    if df.shape[1] == 0 or df.shape[0] == 0:
        return False

    all_sparse = True
    for dtype in df.dtypes:
        if isinstance(dtype, pd.SparseDtype):
            dtype = dtype.subtype
        else:
            all_sparse = False
        if not (pd.api.types.is_bool_dtype(dtype) or pd.api.types.is_integer_dtype(dtype)):
            return False

    if all_sparse:
        values = df.sparse.to_coo().data
    elif df.isna().to_numpy().any():
        return False
    else:
        values = df.to_numpy(dtype=np.int64)
    return bool(np.isin(values, (0, 1)).all())


def _from_one_hot(df: pd.DataFrame, min_item_count: int, verbose: int) -> Transactions:
    if verbose:
        print(f"[{time.strftime('%X')}] Reading one-hot DataFrame ({df.shape[0]:,} rows x {df.shape[1]:,} items)...")

    if all(isinstance(dtype, pd.SparseDtype) for dtype in df.dtypes):
        coo = df.sparse.to_coo()
        mask = coo.data != 0
        rows, cols = coo.row[mask], coo.col[mask]
    else:
        rows, cols = np.nonzero(df.to_numpy(dtype=bool))

    labels = np.asarray([str(c) for c in df.columns], dtype=object)[cols].tolist()
    return _build(rows.astype(np.int64), labels, list(df.index), min_item_count, verbose)


def _find_stack_level() -> int:
    """Stack level of the first frame outside this package, for ``warnings.warn``."""
    pkg_dir = os.path.join(os.path.dirname(__file__), "")
    frame = inspect.currentframe()
    n = 0
    try:
        while frame is not None and frame.f_code.co_filename.startswith(pkg_dir):
            frame = frame.f_back
            n += 1
    finally:
        del frame
    return n

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .config import MiningConfig
from .transactions import Transactions, from_transactions

if TYPE_CHECKING:
    import pandas as pd
    import polars as pl
    import pyarrow as pa
    from typing_extensions import Self


class RuleMinerMixin:
    """Mixin for association rules on frequent itemset miners."""

    config: MiningConfig
    transactions: Transactions

    # Cache: (min_confidence, min_len, remove_redundant) -> rules DataFrame
    _rules_cache: dict[tuple[float, int, bool], Any] | None = None

    def _invalidate_rules_cache(self) -> None:
        """Clear the cached association rules (call after re-mining)."""
        self._rules_cache = None

    def association_rules(
        self,
        min_confidence: float | None = None,
        min_len: int | None = None,
        remove_redundant: bool = False,
    ) -> pd.DataFrame:
        """Generate association rules from the mined frequent itemsets.

        Parameters
        ----------
        min_confidence : float | None, default=None
            Minimum confidence. Defaults to the miner's configured value.
        min_len : int | None, default=None
            Minimum number of items in a rule. Defaults to the miner's configured value.
        remove_redundant : bool, default=False
            Drop rules for which a more general rule with the same consequent
            has at least the same confidence.

        Returns
        -------
        pd.DataFrame
            DataFrame of strong association rules with interest measures.
        """
        from .association_rules import association_rules as _assoc_rules

        overrides: dict[str, Any] = {}
        if min_confidence is not None:
            overrides["min_confidence"] = min_confidence
        if min_len is not None:
            overrides["min_len"] = min_len
        cfg = self.config.replace(**overrides) if overrides else self.config

        key = (cfg.min_confidence, cfg.min_len, remove_redundant)
        if self._rules_cache is None:
            self._rules_cache = {}
        if key not in self._rules_cache:
            # self.mine() must be implemented by the subclass
            df_freq = self.mine()  # type: ignore[attr-defined]
            self._rules_cache[key] = _assoc_rules(
                df_freq,
                min_confidence=cfg.min_confidence,
                min_len=cfg.min_len,
                num_itemsets=self.transactions.n_transactions,
                remove_redundant=remove_redundant,
                verbose=getattr(self, "verbose", 0),
            )
        return self._rules_cache[key].copy()


class Miner(ABC):
    """Base class for pattern mining algorithms.

    Provides unified data ingestion (from_transactions, from_pandas, ...) and
    holds the :class:`~arminer.config.MiningConfig` for a run.
    """

    def __init__(
        self,
        data: Transactions | pd.DataFrame | Any,
        config: MiningConfig | None = None,
        verbose: int = 0,
        **kwargs: Any,
    ):
        """Initialize the miner.

        Parameters
        ----------
        data : Transactions | pd.DataFrame | Any
            Baskets, or anything :func:`arminer.from_transactions` accepts.
        config : MiningConfig, optional
            Thresholds. Keyword arguments (``min_support``, ``min_confidence``,
            ``min_len``, ``max_len``) override individual fields.
        verbose : int, default=0
            Print progress messages when non-zero.
        """
        self.transactions = from_transactions(data, verbose=verbose)
        config = config or MiningConfig()
        self.config = config.replace(**kwargs) if kwargs else config
        self.verbose = verbose

    def __dir__(self) -> list[str]:
        """Filter out internal attributes starting with underscores."""
        return [k for k in super().__dir__() if not k.startswith("_")]

    @classmethod
    def from_transactions(
        cls,
        data: pd.DataFrame | Any,
        transaction_col: str | None = None,
        item_col: str | None = None,
        min_item_count: int = 1,
        verbose: int = 0,
        **kwargs: Any,
    ) -> Self:
        """Load long-format transactional data into the algorithm.

        Parameters
        ----------
        data
            Long-format DataFrame, list of baskets, mapping or record stream.
        transaction_col
            Name of the column that identifies transactions. If ``None`` the
            first column is used.
        item_col
            Name of the column that contains item values. If ``None`` the
            second column is used.
        min_item_count
            Drop items bought in fewer transactions than this.
        verbose : int, default=0
            Whether to print progress details.
        **kwargs
            Mining parameters saved into the Miner (e.g., ``min_support``).

        Returns
        -------
        Miner
            Configured miner instance, ready to call ``.mine()``.
        """
        txns = from_transactions(
            data,
            transaction_col=transaction_col,
            item_col=item_col,
            min_item_count=min_item_count,
            verbose=verbose,
        )
        return cls(txns, verbose=verbose, **kwargs)

    @classmethod
    def from_pandas(
        cls,
        df: pd.DataFrame,
        transaction_col: str | None = None,
        item_col: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Shorthand for ``from_transactions(df, transaction_col, item_col)``."""
        return cls.from_transactions(df, transaction_col=transaction_col, item_col=item_col, **kwargs)

    @classmethod
    def from_polars(
        cls,
        df: pl.DataFrame,
        transaction_col: str | None = None,
        item_col: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Shorthand for ``from_transactions(df, transaction_col, item_col)``."""
        return cls.from_transactions(df, transaction_col=transaction_col, item_col=item_col, **kwargs)

    @classmethod
    def from_arrow(
        cls,
        table: pa.Table,
        transaction_col: str | None = None,
        item_col: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Shorthand for ``from_transactions(table, transaction_col, item_col)``."""
        return cls.from_transactions(table, transaction_col=transaction_col, item_col=item_col, **kwargs)

    @abstractmethod
    def mine(self, **kwargs: Any) -> pd.DataFrame:
        """Execute the mining algorithm and return frequent itemsets.

        Must be implemented by subclasses.
        """
        pass

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"n_transactions={self.transactions.n_transactions}, "
            f"min_support={self.config.min_support}, "
            f"min_confidence={self.config.min_confidence})"
        )

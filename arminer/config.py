from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from ._validation import check_fraction, check_lengths


@dataclass(frozen=True)
class MiningConfig:
    """Thresholds for one mining run.

    Parameters
    ----------
    min_support : float, default=0.5
        Minimum fraction of transactions an itemset must occur in, ``(0, 1]``.
    min_confidence : float, default=0.8
        Minimum rule confidence, ``(0, 1]``.
    min_len : int, default=1
        Minimum number of items in a rule (antecedent plus consequent).
        Rules always hold at least two items since empty antecedents are
        never generated.
    max_len : int | None, default=None
        Maximum itemset length. ``None`` means no limit.
    """

    min_support: float = 0.5
    min_confidence: float = 0.8
    min_len: int = 1
    max_len: int | None = None

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "min_support", check_fraction("min_support", self.min_support))
        object.__setattr__(self, "min_confidence", check_fraction("min_confidence", self.min_confidence))
        check_lengths(self.min_len, self.max_len)
        object.__setattr__(self, "min_len", int(self.min_len))
        if self.max_len is not None:
            object.__setattr__(self, "max_len", int(self.max_len))

    def replace(self, **changes: Any) -> MiningConfig:
        """Return a validated copy with *changes* applied."""
        return dataclasses.replace(self, **changes)

"""Parameter validation shared by the miners and the rule generator."""

from __future__ import annotations

import math


def check_fraction(name: str, value: float) -> float:
    """Reject thresholds outside the interval ``(0, 1]``."""
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"`{name}` must be a number within the interval `(0, 1]`. Got {value!r}.") from e
    if math.isnan(value) or value <= 0.0 or value > 1.0:
        raise ValueError(f"`{name}` must be a positive number within the interval `(0, 1]`. Got {value}.")
    return value


def check_lengths(min_len: int = 1, max_len: int | None = None) -> None:
    if int(min_len) < 1:
        raise ValueError(f"`min_len` must be at least 1. Got {min_len}.")
    if max_len is not None:
        if int(max_len) < 1:
            raise ValueError(f"`max_len` must be at least 1 or None. Got {max_len}.")
        if int(min_len) > int(max_len):
            raise ValueError(f"`min_len` ({min_len}) cannot exceed `max_len` ({max_len}).")


def min_count(min_support: float, n_transactions: int) -> int:
    """Smallest transaction count that satisfies ``min_support``.

    The product is rounded before ``ceil`` so that e.g. ``0.6 * 5`` gives 3.
    """
    return max(1, math.ceil(round(min_support * n_transactions, 9)))

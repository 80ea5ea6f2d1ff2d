"""MiningConfig validation tests."""

from __future__ import annotations

import dataclasses

import pytest

from arminer import MiningConfig


def test_defaults() -> None:
    cfg = MiningConfig()
    assert cfg.min_support == 0.5
    assert cfg.min_confidence == 0.8
    assert cfg.min_len == 1
    assert cfg.max_len is None


def test_frozen() -> None:
    cfg = MiningConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.min_support = 0.1  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs, match",
    [
        ({"min_support": 0}, "min_support"),
        ({"min_support": 1.2}, "min_support"),
        ({"min_support": "high"}, "min_support"),
        ({"min_confidence": 0}, "min_confidence"),
        ({"min_confidence": -0.5}, "min_confidence"),
        ({"min_len": 0}, "min_len"),
        ({"max_len": 0}, "max_len"),
        ({"min_len": 3, "max_len": 2}, "cannot exceed"),
    ],
)
def test_invalid(kwargs: dict, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        MiningConfig(**kwargs)


def test_replace_validates() -> None:
    cfg = MiningConfig(min_support=0.1)
    assert cfg.replace(min_confidence=0.3).min_confidence == 0.3
    assert cfg.replace(min_confidence=0.3).min_support == 0.1
    with pytest.raises(ValueError, match="min_confidence"):
        cfg.replace(min_confidence=2)


def test_normalises_types() -> None:
    cfg = MiningConfig(min_support=1, min_len=2.0, max_len=3.0)  # type: ignore[arg-type]
    assert isinstance(cfg.min_support, float)
    assert cfg.min_len == 2 and isinstance(cfg.min_len, int)
    assert cfg.max_len == 3 and isinstance(cfg.max_len, int)

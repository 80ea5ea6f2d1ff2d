"""Lazy imports for the optional extras declared in pyproject.toml."""

from __future__ import annotations

import importlib
import types

# top-level package -> arminer extra that installs it
_EXTRAS = {
    "polars": "polars",
    "pyarrow": "arrow",
    "tqdm": "progress",
}


def import_optional_dependency(name: str, extra: str = "") -> types.ModuleType:
    """Import *name*, or raise an ImportError naming the extra that provides it.

    Parameters
    ----------
    name : str
        Module to import, e.g. ``"pyarrow"`` or ``"tqdm.auto"``.
    extra : str
        Additional text appended to the error message.
    """
    package = name.split(".")[0]
    try:
        return importlib.import_module(name)
    except ImportError as err:
        hint = f"arminer[{_EXTRAS[package]}]" if package in _EXTRAS else package
        msg = f"Missing optional dependency '{package}'. Use pip to install {hint}."
        if extra:
            msg += f" {extra}"
        raise ImportError(msg) from err

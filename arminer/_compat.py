from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

import pandas as pd

if TYPE_CHECKING:
    import polars as pl
    import pyarrow as pa

    #: Union of the tabular inputs accepted by the transaction builder:
    #:
    #: * ``pandas.DataFrame`` (and subclasses)
    #: * ``polars.DataFrame`` – converted to pandas
    #: * ``pyarrow.Table`` – converted to pandas
    DataFrame = Union[pd.DataFrame, pl.DataFrame, pa.Table]  # noqa: UP007


def frame_kind(data: Any) -> str | None:
    """Return ``"pandas"``, ``"polars"`` or ``"pyarrow"`` for tabular inputs, else ``None``."""
    if isinstance(data, pd.DataFrame):
        return "pandas"
    _type = type(data)
    mod = getattr(_type, "__module__", "") or ""
    if _type.__name__ == "Table" and mod.startswith("pyarrow"):
        return "pyarrow"
    if _type.__name__ == "DataFrame" and mod.startswith("polars"):
        return "polars"
    return None


def to_pandas(data: Any) -> Any:
    """Coerce Polars/PyArrow tables to a pandas DataFrame; return everything else unchanged."""
    kind = frame_kind(data)

    if kind == "pyarrow":
        from arminer._dependencies import import_optional_dependency

        import_optional_dependency("pyarrow")
        return data.to_pandas()

    if kind == "polars":
        from arminer._dependencies import import_optional_dependency

        # polars needs pyarrow for the pandas round-trip
        import_optional_dependency("pyarrow", extra="Polars inputs are converted to pandas via Arrow.")
        return data.to_pandas()

    return data

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    import pandas as pd


@runtime_checkable
class RuleRenderer(Protocol):
    """Protocol for anything that turns a rule table into a display artefact.

    Rendering sits outside the mining core: a renderer receives the rule
    DataFrame produced by :func:`arminer.association_rules` and returns
    whatever its consumer needs (a formatted table, an edge list for a graph
    library, ...).
    """

    def render(self, rules: pd.DataFrame) -> Any: ...

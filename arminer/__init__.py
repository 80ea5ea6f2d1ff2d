from .apriori import Apriori, apriori
from .association_rules import association_rules
from .config import MiningConfig
from .interest import chi_squared, interest_measures
from .model import Miner
from .redundancy import is_redundant, prune_redundant
from .report import EdgeListRenderer, TableRenderer, inspect, to_edges
from .transactions import (
    Transactions,
    from_arrow,
    from_pandas,
    from_polars,
    from_records,
    from_transactions,
    item_frequency,
)
from .typing import RuleRenderer

__all__ = [
    "apriori",
    "Apriori",
    "Miner",
    "MiningConfig",
    "association_rules",
    "is_redundant",
    "prune_redundant",
    "chi_squared",
    "interest_measures",
    "Transactions",
    "from_transactions",
    "from_records",
    "from_pandas",
    "from_polars",
    "from_arrow",
    "item_frequency",
    "inspect",
    "to_edges",
    "RuleRenderer",
    "TableRenderer",
    "EdgeListRenderer",
]

"""
arminer: Getting Started
========================

Build baskets from order lines, mine frequent itemsets with apriori,
generate association rules, prune redundant ones and print a report.
"""

import pandas as pd

import arminer

# Order lines after joining orders with products (product|department labels)
order_lines = pd.DataFrame(
    {
        "order_id": [1, 1, 1, 2, 2, 3, 3, 3, 4, 4, 5, 5, 5, 6],
        "product": [
            "Banana|produce",
            "Whole Milk|dairy eggs",
            "Bag of Organic Bananas|produce",
            "Banana|produce",
            "Whole Milk|dairy eggs",
            "Banana|produce",
            "Whole Milk|dairy eggs",
            "Organic Strawberries|produce",
            "Bag of Organic Bananas|produce",
            "Organic Strawberries|produce",
            "Banana|produce",
            "Organic Strawberries|produce",
            "Whole Milk|dairy eggs",
            "Banana|produce",
        ],
    }
)

# ── 1. Baskets and item frequencies ─────────────────────────────────────────
txns = arminer.from_transactions(order_lines, "order_id", "product")
print(txns)
print(arminer.item_frequency(txns).to_string())
print()

# ── 2. Frequent itemsets ────────────────────────────────────────────────────
freq = arminer.apriori(txns, min_support=0.3)
print("Frequent itemsets (min_support=0.3):")
print(freq.to_string(index=False))
print()

# ── 3. Rules, redundancy pruning, interest measures ─────────────────────────
rules = arminer.association_rules(freq, min_confidence=0.6, min_len=2, remove_redundant=True)

print("Association rules (confidence ≥ 0.6, redundant rules removed):")
print(arminer.inspect(rules, by="lift").to_string(index=False))

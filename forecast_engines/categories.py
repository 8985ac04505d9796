"""
Module: forecast_engines.categories
Responsibility:
    Attribute each customer to a single product category by majority
    vote over their recurring transaction history.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Recency-ordered tally: qualifying transactions are counted newest
      first (stable for equal dates), and the winner is the first category
      to reach the highest count (a strictly greater count is required to
      displace it).  Ties therefore go to the most recent category,
      whatever order the caller passes the history in.
    - Transactions without a customer or a category are ignored.
    - Lookup of an unknown customer returns the uncategorized label.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from forecast_kernel.domain.records import RECURRING_SOURCE, Transaction

UNCATEGORIZED = "Uncategorized"


def build_customer_category_map(
    transactions: Iterable[Transaction],
    recurring_source: str = RECURRING_SOURCE,
) -> dict[str, str]:
    """Customer name -> most frequent category among recurring transactions."""
    qualifying = sorted(
        (
            tx for tx in transactions
            if tx.source == recurring_source
            and tx.customer_name
            and tx.product_category
        ),
        key=lambda tx: tx.transaction_date,
        reverse=True,
    )

    tallies: dict[str, dict[str, int]] = {}
    for tx in qualifying:
        counts = tallies.setdefault(tx.customer_name, {})
        counts[tx.product_category] = counts.get(tx.product_category, 0) + 1

    category_map: dict[str, str] = {}
    for customer, counts in tallies.items():
        best_category = ""
        best_count = 0
        for category, count in counts.items():
            if count > best_count:
                best_category, best_count = category, count
        category_map[customer] = best_category
    return category_map


def resolve_category(
    category_map: Mapping[str, str],
    customer_name: str | None,
    default: str = UNCATEGORIZED,
) -> str:
    if not customer_name:
        return default
    return category_map.get(customer_name, default)

"""
Module: forecast_engines.breakdown
Responsibility:
    Day-bucketed revenue detail shared by the actual-revenue aggregator
    and the projection generator: per calendar day an amount, a count,
    the distinct customers, and an optional per-category split of the
    same shape.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Sparse: only days with at least one entry appear (no zero-fill).
    - Days ascending; categories within a day descending by amount, equal
      amounts keep first-seen order.
    - Customers are distinct per bucket, listed in first-seen order;
      ``count`` still counts every entry.
    - Decimal-only arithmetic for all amounts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from forecast_kernel.domain.dates import format_ymd


@dataclass(frozen=True)
class CategoryBreakdown:
    """One category's share of a day."""

    category: str
    amount: Decimal
    count: int
    customers: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "amount": str(self.amount),
            "count": self.count,
            "customers": list(self.customers),
        }


@dataclass(frozen=True)
class DailyBreakdown:
    """
    One calendar day of revenue.

    ``category_breakdown`` is empty when the producer does not attribute
    categories.
    """

    date: str
    amount: Decimal
    count: int
    customers: tuple[str, ...]
    category_breakdown: tuple[CategoryBreakdown, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "amount": str(self.amount),
            "count": self.count,
            "customers": list(self.customers),
            "categoryBreakdown": [c.to_dict() for c in self.category_breakdown],
        }


@dataclass
class _Bucket:
    amount: Decimal = Decimal("0")
    count: int = 0
    # dict as an insertion-ordered set
    customers: dict[str, None] = field(default_factory=dict)
    categories: dict[str, _Bucket] = field(default_factory=dict)

    def add(self, amount: Decimal, customer: str) -> None:
        self.amount += amount
        self.count += 1
        self.customers.setdefault(customer, None)


class BreakdownAccumulator:
    """
    Upserts entries into day buckets and freezes them into
    ``DailyBreakdown`` tuples.

    Not thread-safe; create one per aggregation.
    """

    def __init__(self, track_categories: bool = True):
        self._track_categories = track_categories
        self._days: dict[date, _Bucket] = {}

    def add(
        self,
        day: date,
        amount: Decimal,
        customer: str,
        category: str | None = None,
    ) -> None:
        bucket = self._days.setdefault(day, _Bucket())
        bucket.add(amount, customer)
        if self._track_categories and category is not None:
            bucket.categories.setdefault(category, _Bucket()).add(amount, customer)

    @property
    def total(self) -> Decimal:
        return sum((b.amount for b in self._days.values()), Decimal("0"))

    @property
    def count(self) -> int:
        return sum(b.count for b in self._days.values())

    def build(self) -> tuple[DailyBreakdown, ...]:
        result: list[DailyBreakdown] = []
        for day in sorted(self._days):
            bucket = self._days[day]
            categories = sorted(
                (
                    CategoryBreakdown(
                        category=name,
                        amount=cat.amount,
                        count=cat.count,
                        customers=tuple(cat.customers),
                    )
                    for name, cat in bucket.categories.items()
                ),
                key=lambda c: c.amount,
                reverse=True,
            )
            result.append(
                DailyBreakdown(
                    date=format_ymd(day),
                    amount=bucket.amount,
                    count=bucket.count,
                    customers=tuple(bucket.customers),
                    category_breakdown=tuple(categories),
                )
            )
        return tuple(result)

"""
Module: forecast_engines.actuals
Responsibility:
    Sum realized revenue over the half-open window ``[window_start, cutoff)``
    and break it down by day and category.  The cutoff day itself belongs
    to the projected side of a report.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import forecast_kernel.

Invariants enforced:
    - Realized means status in ``realized_statuses`` (Approved, Settled).
    - Sales and returns are split on the processor's type tag, never on
      the sign of the amount.
    - total = sum(sales) - |sum(returns)|.
    - Declined transactions are counted but never summed.
    - Division guard: average_transaction is 0 when there are no sales.

Failure modes:
    None raised.  Empty input yields an all-zero summary.

Usage:
    from forecast_engines.actuals import aggregate_actual_revenue

    summary = aggregate_actual_revenue(transactions, start, cutoff)
    summary.total, summary.daily_breakdown
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from forecast_kernel.domain.records import (
    RETURN_TYPE,
    Transaction,
    TransactionStatus,
)
from forecast_kernel.logging_config import get_logger
from forecast_engines.breakdown import BreakdownAccumulator, DailyBreakdown
from forecast_engines.categories import UNCATEGORIZED
from forecast_engines.tracer import traced_engine

logger = get_logger("engines.actuals")

UNKNOWN_CUSTOMER = "Unknown"
REALIZED_STATUSES: frozenset[str] = frozenset({
    TransactionStatus.APPROVED.value,
    TransactionStatus.SETTLED.value,
})

_ZERO = Decimal("0")


@dataclass(frozen=True)
class ActualRevenueSummary:
    """Realized revenue over ``[window_start, cutoff)``."""

    window_start: date
    cutoff: date
    total: Decimal
    transaction_count: int
    average_transaction: Decimal
    daily_breakdown: tuple[DailyBreakdown, ...]
    total_transactions: int
    approved_transactions: int
    declined_transactions: int
    return_count: int
    returns_total: Decimal
    gross_sales: Decimal


@traced_engine(
    "actual_revenue", "1.0",
    fingerprint_fields=("window_start", "cutoff"),
)
def aggregate_actual_revenue(
    transactions: Iterable[Transaction],
    window_start: date,
    cutoff: date,
    realized_statuses: frozenset[str] = REALIZED_STATUSES,
    declined_status: str = TransactionStatus.DECLINED.value,
    return_type: str = RETURN_TYPE,
    uncategorized_label: str = UNCATEGORIZED,
    unknown_customer_label: str = UNKNOWN_CUSTOMER,
) -> ActualRevenueSummary:
    acc = BreakdownAccumulator()
    in_window = 0
    declined = 0
    return_count = 0
    returns_sum = _ZERO

    for tx in transactions:
        if not (window_start <= tx.transaction_date < cutoff):
            continue
        in_window += 1
        if tx.status == declined_status:
            declined += 1
            continue
        if tx.status not in realized_statuses:
            continue
        if tx.transaction_type == return_type:
            return_count += 1
            returns_sum += tx.amount
            continue
        acc.add(
            tx.transaction_date,
            tx.amount,
            tx.customer_name or unknown_customer_label,
            tx.product_category or uncategorized_label,
        )

    gross_sales = acc.total
    sales_count = acc.count
    returns_total = abs(returns_sum)
    average = gross_sales / sales_count if sales_count else _ZERO

    summary = ActualRevenueSummary(
        window_start=window_start,
        cutoff=cutoff,
        total=gross_sales - returns_total,
        transaction_count=sales_count,
        average_transaction=average,
        daily_breakdown=acc.build(),
        total_transactions=in_window,
        approved_transactions=sales_count,
        declined_transactions=declined,
        return_count=return_count,
        returns_total=returns_total,
        gross_sales=gross_sales,
    )
    logger.debug("actual_revenue_aggregated", extra={
        "window_start": window_start,
        "cutoff": cutoff,
        "sales": sales_count,
        "returns": return_count,
        "declined": declined,
        "total": str(summary.total),
    })
    return summary

"""
Module: forecast_engines.projection
Responsibility:
    Simulate every Active contract's billing schedule over a window and
    bucket the resulting occurrences by calendar day (and, optionally, by
    the customer's category).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import forecast_kernel.

Invariants enforced:
    - Additivity: the projected total of a contract set equals the sum of
      the projected totals of its members.
    - ``calculate_projected_revenue`` agrees exactly with the sum of the
      day-bucketed amounts (both are Decimal sums of the same occurrences).
    - A repeat customer on the same day is counted in ``count`` but listed
      once in ``customers``.

Failure modes:
    None raised.  Contracts that cannot be projected contribute nothing.

Usage:
    from forecast_engines.projection import ProjectionGenerator

    result = ProjectionGenerator().generate(
        contracts, window_start, window_end, category_map=category_map,
    )
    result.total, result.occurrence_count, result.daily_breakdown
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from forecast_kernel.domain.records import Contract, ContractStatus
from forecast_kernel.logging_config import get_logger
from forecast_engines.breakdown import BreakdownAccumulator, DailyBreakdown
from forecast_engines.categories import UNCATEGORIZED, resolve_category
from forecast_engines.occurrences import enumerate_occurrences
from forecast_engines.tracer import traced_engine

logger = get_logger("engines.projection")


@dataclass(frozen=True)
class ProjectionResult:
    """Projected revenue over a window."""

    window_start: date
    window_end: date
    total: Decimal
    occurrence_count: int
    daily_breakdown: tuple[DailyBreakdown, ...]


def _accumulate(
    contracts: Sequence[Contract],
    window_start: date,
    window_end: date,
    category_map: Mapping[str, str] | None,
    uncategorized_label: str,
    active_status: str,
) -> BreakdownAccumulator:
    acc = BreakdownAccumulator(track_categories=category_map is not None)
    for contract in contracts:
        occurrences = enumerate_occurrences(contract, window_start, window_end, active_status)
        if not occurrences:
            continue
        category = None
        if category_map is not None:
            category = resolve_category(
                category_map, contract.customer_name, uncategorized_label,
            )
        for day in occurrences:
            acc.add(day, contract.amount, contract.customer_name, category)
    return acc


def get_daily_projections(
    contracts: Sequence[Contract],
    window_start: date,
    window_end: date,
    active_status: str = ContractStatus.ACTIVE.value,
) -> tuple[DailyBreakdown, ...]:
    """Sparse per-day projection without category attribution."""
    return _accumulate(
        contracts, window_start, window_end, None, UNCATEGORIZED, active_status,
    ).build()


def get_daily_projections_with_categories(
    contracts: Sequence[Contract],
    window_start: date,
    window_end: date,
    category_map: Mapping[str, str],
    uncategorized_label: str = UNCATEGORIZED,
    active_status: str = ContractStatus.ACTIVE.value,
) -> tuple[DailyBreakdown, ...]:
    """Sparse per-day projection with a per-category split of each day."""
    return _accumulate(
        contracts, window_start, window_end, category_map, uncategorized_label, active_status,
    ).build()


def calculate_projected_revenue(
    contracts: Sequence[Contract],
    window_start: date,
    window_end: date,
    active_status: str = ContractStatus.ACTIVE.value,
) -> Decimal:
    """Sum of all occurrence amounts in ``[window_start, window_end]``."""
    total = Decimal("0")
    for contract in contracts:
        occurrences = enumerate_occurrences(contract, window_start, window_end, active_status)
        total += contract.amount * len(occurrences)
    return total


class ProjectionGenerator:
    """
    Stateless projection engine.

    Holds only the vocabulary it was configured with; every call is
    independent and reentrant.
    """

    def __init__(
        self,
        uncategorized_label: str = UNCATEGORIZED,
        active_status: str = ContractStatus.ACTIVE.value,
    ):
        self._uncategorized_label = uncategorized_label
        self._active_status = active_status

    @traced_engine(
        "projection", "1.0",
        fingerprint_fields=("window_start", "window_end"),
    )
    def generate(
        self,
        contracts: Sequence[Contract],
        window_start: date,
        window_end: date,
        category_map: Mapping[str, str] | None = None,
    ) -> ProjectionResult:
        """
        Project ``contracts`` over ``[window_start, window_end]``.

        When ``category_map`` is given, each day carries a category
        breakdown; customers absent from the map fall under the
        uncategorized label.
        """
        acc = _accumulate(
            contracts,
            window_start,
            window_end,
            category_map,
            self._uncategorized_label,
            self._active_status,
        )
        result = ProjectionResult(
            window_start=window_start,
            window_end=window_end,
            total=acc.total,
            occurrence_count=acc.count,
            daily_breakdown=acc.build(),
        )
        logger.debug("projection_generated", extra={
            "window_start": window_start,
            "window_end": window_end,
            "contracts": len(contracts),
            "occurrences": result.occurrence_count,
            "total": str(result.total),
        })
        return result

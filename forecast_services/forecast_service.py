"""
ForecastService -- Report assembler for revenue forecasts.

Composes the pure forecast engines (actuals, categories, projection, MRR)
with clock injection and YAML-backed settings into a single
``ForecastReport``.

Architecture: forecast_services -- imperative shell.
    The caller fetches the contract and transaction snapshots (tenant
    scoped) and hands them in as immutable records.  This layer resolves
    the report window from an injected clock, runs the engines, and
    reconciles their totals.  It performs no I/O beyond logging.

Invariants enforced:
    - Actual revenue covers ``[start, cutoff)``; projected revenue covers
      ``[cutoff, end]``.  The cutoff day is never counted twice.  A window
      already closed is all actual, its end day included.
    - expected = actual + projected.
    - actual_percentage + projected_percentage == 100 whenever expected
      is positive; both are 0 otherwise.
    - Idempotence: identical inputs and clock yield an identical report.

Failure modes:
    - ``InvalidRangeSpecError`` -- unknown preset or unusable explicit range.
    - ``InvalidDateFormatError`` -- malformed explicit date string.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from forecast_config import ForecastConfig
from forecast_engines import (
    ActualRevenueSummary,
    DailyBreakdown,
    ProjectionGenerator,
    ProjectionResult,
    aggregate_actual_revenue,
    build_customer_category_map,
    calculate_total_mrr,
)
from forecast_kernel.domain.clock import Clock, SystemClock
from forecast_kernel.domain.date_range import DateRange, RangeSpec, resolve_date_range
from forecast_kernel.domain.dates import ClockLike, today as utc_today
from forecast_kernel.domain.records import Contract, ContractStatus, Transaction
from forecast_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.forecast")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


# ---------------------------------------------------------------------------
# Report DTOs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ActualRevenue:
    total: Decimal
    transaction_count: int
    average_transaction: Decimal
    daily_breakdown: tuple[DailyBreakdown, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": str(self.total),
            "transactionCount": self.transaction_count,
            "averageTransaction": str(self.average_transaction),
            "dailyBreakdown": [d.to_dict() for d in self.daily_breakdown],
        }


@dataclass(frozen=True)
class ProjectedRevenue:
    total: Decimal
    contract_count: int
    upcoming_payments: tuple[DailyBreakdown, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": str(self.total),
            "contractCount": self.contract_count,
            "upcomingPayments": [d.to_dict() for d in self.upcoming_payments],
        }


@dataclass(frozen=True)
class MonthlyTotal:
    expected: Decimal
    actual_percentage: Decimal
    projected_percentage: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "expected": str(self.expected),
            "actualPercentage": str(self.actual_percentage),
            "projectedPercentage": str(self.projected_percentage),
        }


@dataclass(frozen=True)
class ForecastMetrics:
    total_transactions: int
    approved_transactions: int
    declined_transactions: int
    active_contracts: int
    cancelled_contracts: int
    completed_contracts: int
    monthly_recurring_revenue: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalTransactions": self.total_transactions,
            "approvedTransactions": self.approved_transactions,
            "declinedTransactions": self.declined_transactions,
            "activeContracts": self.active_contracts,
            "cancelledContracts": self.cancelled_contracts,
            "completedContracts": self.completed_contracts,
            "monthlyRecurringRevenue": str(self.monthly_recurring_revenue),
        }


@dataclass(frozen=True)
class ForecastReport:
    """Blended actual + projected revenue for one window.

    ``to_dict()`` is the JSON-ready form handed to the boundary layer:
    camelCase keys, Decimals as strings, dates as ``YYYY-MM-DD``.
    """

    date_range: DateRange
    actual_revenue: ActualRevenue
    projected_revenue: ProjectedRevenue
    monthly_total: MonthlyTotal
    metrics: ForecastMetrics
    last_synced_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "dateRange": self.date_range.to_dict(),
            "actualRevenue": self.actual_revenue.to_dict(),
            "projectedRevenue": self.projected_revenue.to_dict(),
            "monthlyTotal": self.monthly_total.to_dict(),
            "metrics": self.metrics.to_dict(),
            "lastSyncedAt": (
                self.last_synced_at.isoformat() if self.last_synced_at else None
            ),
        }


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def _percentages(actual: Decimal, expected: Decimal) -> tuple[Decimal, Decimal]:
    # Shares are undefined unless the expected total is positive
    if expected <= _ZERO:
        return _ZERO, _ZERO
    actual_pct = actual / expected * _HUNDRED
    # Complement keeps the pair summing to exactly 100
    return actual_pct, _HUNDRED - actual_pct


def _latest_sync(contracts: Sequence[Contract]) -> datetime | None:
    stamps = [c.last_synced_at for c in contracts if c.last_synced_at is not None]
    return max(stamps) if stamps else None


def _count_status(contracts: Sequence[Contract], status: str) -> int:
    return sum(1 for c in contracts if c.status == status)


def generate_forecast(
    contracts: Sequence[Contract],
    transactions: Sequence[Transaction],
    range_spec: RangeSpec | Mapping[str, Any],
    clock: Clock | ClockLike | None = None,
    config: ForecastConfig | None = None,
) -> ForecastReport:
    """
    Build a ``ForecastReport`` from in-memory snapshots.

    Contract:
        ``contracts`` and ``transactions`` are not mutated.  ``clock``
        supplies "today" (UTC); the system clock is used only when it is
        omitted.  ``config`` defaults to the in-code defaults, which equal
        the shipped ``defaults.yaml``.

    Raises:
        InvalidRangeSpecError: unknown preset, partial or inverted range.
        InvalidDateFormatError: malformed explicit date string.
    """
    config = config or ForecastConfig()
    if not isinstance(range_spec, RangeSpec):
        range_spec = RangeSpec.from_mapping(range_spec)

    date_range = resolve_date_range(range_spec, utc_today(clock), config.presets)

    actual: ActualRevenueSummary = aggregate_actual_revenue(
        transactions,
        window_start=date_range.start,
        cutoff=date_range.actual_until,
        realized_statuses=config.realized_statuses,
        declined_status=config.declined_status,
        return_type=config.return_type,
        uncategorized_label=config.uncategorized_label,
        unknown_customer_label=config.unknown_customer_label,
    )

    category_map = build_customer_category_map(
        transactions, recurring_source=config.recurring_source,
    )

    generator = ProjectionGenerator(
        uncategorized_label=config.uncategorized_label,
        active_status=config.active_status,
    )
    projection: ProjectionResult = generator.generate(
        contracts,
        window_start=date_range.projection_start,
        window_end=date_range.end,
        category_map=category_map,
    )

    expected = actual.total + projection.total
    actual_pct, projected_pct = _percentages(actual.total, expected)

    report = ForecastReport(
        date_range=date_range,
        actual_revenue=ActualRevenue(
            total=actual.total,
            transaction_count=actual.transaction_count,
            average_transaction=actual.average_transaction,
            daily_breakdown=actual.daily_breakdown,
        ),
        projected_revenue=ProjectedRevenue(
            total=projection.total,
            contract_count=projection.occurrence_count,
            upcoming_payments=projection.daily_breakdown,
        ),
        monthly_total=MonthlyTotal(
            expected=expected,
            actual_percentage=actual_pct,
            projected_percentage=projected_pct,
        ),
        metrics=ForecastMetrics(
            total_transactions=actual.total_transactions,
            approved_transactions=actual.approved_transactions,
            declined_transactions=actual.declined_transactions,
            active_contracts=_count_status(contracts, config.active_status),
            cancelled_contracts=_count_status(contracts, ContractStatus.CANCELLED.value),
            completed_contracts=_count_status(contracts, ContractStatus.COMPLETED.value),
            monthly_recurring_revenue=calculate_total_mrr(
                contracts,
                weeks_per_month=config.weeks_per_month,
                active_status=config.active_status,
            ),
        ),
        last_synced_at=_latest_sync(contracts),
    )

    logger.info("forecast_report_generated", extra={
        "start": date_range.start,
        "end": date_range.end,
        "cutoff": date_range.cutoff,
        "actual_total": str(actual.total),
        "projected_total": str(projection.total),
        "expected_total": str(expected),
        "contracts": len(contracts),
        "transactions": len(transactions),
    })
    return report


class ForecastService:
    """Service that generates forecast reports from pre-fetched snapshots.

    Contract:
        - ``generate()`` builds one report from the given snapshots.
        - Settings come from the injected ``ForecastConfig``; "today"
          comes from the injected ``Clock``.

    Non-goals:
        - Does NOT fetch or tenant-filter data (caller provides snapshots).
        - Does NOT persist or cache reports.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        config: ForecastConfig | None = None,
    ) -> None:
        self._clock = clock or SystemClock()
        self._config = config or ForecastConfig()

    @property
    def config(self) -> ForecastConfig:
        return self._config

    def generate(
        self,
        contracts: Sequence[Contract],
        transactions: Sequence[Transaction],
        range_spec: RangeSpec | Mapping[str, Any],
        tenant_id: str | None = None,
    ) -> ForecastReport:
        """Generate a report with a request-scoped logging context."""
        with LogContext.bind(
            tenant_id=tenant_id,
            report_id=str(uuid4()),
            producer="forecast_service",
        ):
            return generate_forecast(
                contracts,
                transactions,
                range_spec,
                clock=self._clock,
                config=self._config,
            )

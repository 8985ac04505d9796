"""
Module: forecast_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for the
    service layer.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import forecast_kernel (and sibling engine modules).
    MUST NOT import forecast_services or forecast_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Windows and cutoffs are passed in as explicit parameters.
    - Decimal-only arithmetic for every revenue amount.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - Engines raise nothing themselves. Soft conditions (missing next bill
      date, unparseable cadence, inactive contract) contribute nothing.

Usage:
    from forecast_engines import (
        ProjectionGenerator,
        aggregate_actual_revenue,
        build_customer_category_map,
        calculate_total_mrr,
    )
"""

from forecast_kernel.logging_config import get_logger

logger = get_logger("engines")

from forecast_engines.actuals import (
    REALIZED_STATUSES,
    UNKNOWN_CUSTOMER,
    ActualRevenueSummary,
    aggregate_actual_revenue,
)
from forecast_engines.breakdown import (
    BreakdownAccumulator,
    CategoryBreakdown,
    DailyBreakdown,
)
from forecast_engines.categories import (
    UNCATEGORIZED,
    build_customer_category_map,
    resolve_category,
)
from forecast_engines.mrr import (
    WEEKS_PER_MONTH,
    ContractStatistics,
    MRRLine,
    calculate_contract_statistics,
    calculate_mrr,
    calculate_mrr_breakdown,
    calculate_total_mrr,
    payments_per_month,
)
from forecast_engines.occurrences import enumerate_occurrences, schedule_occurrences
from forecast_engines.projection import (
    ProjectionGenerator,
    ProjectionResult,
    calculate_projected_revenue,
    get_daily_projections,
    get_daily_projections_with_categories,
)
from forecast_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # Actuals
    "ActualRevenueSummary",
    "REALIZED_STATUSES",
    "UNKNOWN_CUSTOMER",
    "aggregate_actual_revenue",
    # Breakdown
    "BreakdownAccumulator",
    "CategoryBreakdown",
    "DailyBreakdown",
    # Categories
    "UNCATEGORIZED",
    "build_customer_category_map",
    "resolve_category",
    # MRR
    "ContractStatistics",
    "MRRLine",
    "WEEKS_PER_MONTH",
    "calculate_contract_statistics",
    "calculate_mrr",
    "calculate_mrr_breakdown",
    "calculate_total_mrr",
    "payments_per_month",
    # Occurrences
    "enumerate_occurrences",
    "schedule_occurrences",
    # Projection
    "ProjectionGenerator",
    "ProjectionResult",
    "calculate_projected_revenue",
    "get_daily_projections",
    "get_daily_projections_with_categories",
    # Tracer
    "compute_input_fingerprint",
    "traced_engine",
]

"""
Pure domain layer.

This module contains immutable records and pure date/schedule logic
with NO dependencies on:
- Persistence
- Wall-clock time (except through an injected Clock)
- I/O

All domain objects are immutable and deterministic.
"""

from forecast_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from forecast_kernel.domain.date_range import (
    DEFAULT_PRESETS,
    DateRange,
    PresetKind,
    RangePreset,
    RangeSpec,
    resolve_date_range,
)
from forecast_kernel.domain.dates import (
    add_days,
    add_months,
    diff_days,
    end_of_month,
    extract_date_only,
    format_ymd,
    is_valid_date_string,
    is_within_range,
    parse_utc,
    start_of_month,
    to_utc_date,
    today,
)
from forecast_kernel.domain.records import (
    Contract,
    ContractStatus,
    Transaction,
    TransactionStatus,
    contract_from_row,
    transaction_from_row,
)
from forecast_kernel.domain.schedule import (
    BillingSchedule,
    ScheduleKind,
    parse_schedule,
)

__all__ = [
    "BillingSchedule",
    "Clock",
    "Contract",
    "ContractStatus",
    "DEFAULT_PRESETS",
    "DateRange",
    "DeterministicClock",
    "PresetKind",
    "RangePreset",
    "RangeSpec",
    "ScheduleKind",
    "SystemClock",
    "Transaction",
    "TransactionStatus",
    "add_days",
    "add_months",
    "contract_from_row",
    "diff_days",
    "end_of_month",
    "extract_date_only",
    "format_ymd",
    "is_valid_date_string",
    "is_within_range",
    "parse_schedule",
    "parse_utc",
    "resolve_date_range",
    "start_of_month",
    "to_utc_date",
    "today",
    "transaction_from_row",
]

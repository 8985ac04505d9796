"""
Module: forecast_engines.occurrences
Responsibility:
    Enumerate the dates on which a contract would bill inside a window.
    This is the billing schedule interpreter: it consumes the
    ``BillingSchedule`` parsed onto each ``Contract`` and simulates it.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import forecast_kernel.

Invariants enforced:
    - Phase alignment: recurring occurrences are ``anchor + k * step`` for
      integer ``k >= 0`` where the anchor is ``next_bill_date``.  The first
      emitted occurrence is the first such date on or after
      ``max(anchor, window_start)``; stepping never restarts from the
      window start.
    - Monthly steps are calendar months computed from the anchor each
      time (``anchor + k*N months``), so a 31st anchor lands on the 28th
      in February and back on the 31st in March.
    - ONCE yields at most one occurrence, on the anchor, iff in window.
    - Purity: no clock access.

Failure modes:
    None raised.  A contract without a next bill date, with an
    unrecognized schedule, or not Active yields no occurrences.

Usage:
    from forecast_engines.occurrences import enumerate_occurrences

    dates = enumerate_occurrences(contract, date(2025, 1, 1), date(2025, 3, 31))
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date

from forecast_kernel.domain.dates import add_days, add_months, diff_days, is_within_range
from forecast_kernel.domain.records import Contract, ContractStatus
from forecast_kernel.domain.schedule import BillingSchedule, ScheduleKind
from forecast_kernel.logging_config import get_logger

logger = get_logger("engines.occurrences")


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def _weekly(anchor: date, step_weeks: int, lower: date, upper: date) -> Iterator[date]:
    step_days = 7 * step_weeks
    k = _ceil_div(diff_days(anchor, lower), step_days)
    current = add_days(anchor, k * step_days)
    while current <= upper:
        yield current
        k += 1
        current = add_days(anchor, k * step_days)


def _monthly(anchor: date, step_months: int, lower: date, upper: date) -> Iterator[date]:
    months_between = (lower.year - anchor.year) * 12 + (lower.month - anchor.month)
    k = max(0, _ceil_div(months_between, step_months))
    current = add_months(anchor, k * step_months)
    # Same month as ``lower`` but an earlier day (or a clamped day)
    while current < lower:
        k += 1
        current = add_months(anchor, k * step_months)
    while current <= upper:
        yield current
        k += 1
        current = add_months(anchor, k * step_months)


def schedule_occurrences(
    schedule: BillingSchedule,
    anchor: date,
    window_start: date,
    window_end: date,
) -> tuple[date, ...]:
    """
    Occurrences of ``schedule`` anchored at ``anchor`` within
    ``[window_start, window_end]`` (inclusive), ascending.
    """
    if window_start > window_end:
        return ()

    if schedule.kind == ScheduleKind.ONCE:
        if is_within_range(anchor, window_start, window_end):
            return (anchor,)
        return ()

    lower = max(anchor, window_start)
    if schedule.kind == ScheduleKind.WEEKLY:
        return tuple(_weekly(anchor, schedule.step, lower, window_end))
    if schedule.kind == ScheduleKind.MONTHLY:
        return tuple(_monthly(anchor, schedule.step, lower, window_end))
    return ()


def enumerate_occurrences(
    contract: Contract,
    window_start: date,
    window_end: date,
    active_status: str = ContractStatus.ACTIVE.value,
) -> tuple[date, ...]:
    """
    Billing dates of ``contract`` within ``[window_start, window_end]``.

    Returns an empty tuple for non-active contracts, contracts without a
    next bill date, and contracts whose schedule could not be parsed.
    """
    if contract.status != active_status:
        return ()
    if contract.next_bill_date is None:
        logger.debug("occurrence_skipped", extra={
            "contract_id": contract.contract_id,
            "reason": "no_next_bill_date",
        })
        return ()
    if contract.schedule.kind == ScheduleKind.UNRECOGNIZED:
        logger.debug("occurrence_skipped", extra={
            "contract_id": contract.contract_id,
            "reason": "unrecognized_schedule",
            "billing_interval": contract.billing_interval,
            "billing_frequency": contract.billing_frequency,
        })
        return ()

    return schedule_occurrences(
        contract.schedule,
        contract.next_bill_date,
        window_start,
        window_end,
    )

"""
Module: forecast_engines.mrr
Responsibility:
    Normalize arbitrary billing cadences into Monthly Recurring Revenue
    (MRR) and summarize a contract book by status.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import forecast_kernel.

Invariants enforced:
    - Payments per month: Weekly step N -> weeks_per_month / N;
      Monthly step N -> 1 / N; Once and unrecognized -> 0.
    - Only Active contracts contribute to MRR.
    - Decimal-only arithmetic; no division by zero (average over an
      empty Active set is 0).

Usage:
    from forecast_engines.mrr import calculate_mrr, calculate_total_mrr

    calculate_total_mrr(contracts)  # Decimal
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from forecast_kernel.domain.records import Contract, ContractStatus
from forecast_kernel.domain.schedule import BillingSchedule, ScheduleKind
from forecast_kernel.logging_config import get_logger
from forecast_engines.tracer import traced_engine

logger = get_logger("engines.mrr")

# Average weeks per calendar month (52.14 weeks / 12)
WEEKS_PER_MONTH = Decimal("4.345")

_ZERO = Decimal("0")
_ONE = Decimal("1")


@dataclass(frozen=True)
class MRRLine:
    """MRR contribution of one Active recurring contract."""

    contract_id: str | None
    customer_name: str
    amount: Decimal
    billing_interval: str
    billing_frequency: str
    payments_per_month: Decimal
    mrr: Decimal


@dataclass(frozen=True)
class ContractStatistics:
    """Status counts and value summary of a contract book."""

    total: int
    active: int
    completed: int
    cancelled: int
    inactive: int
    total_mrr: Decimal
    average_contract_value: Decimal


def payments_per_month(
    schedule: BillingSchedule,
    weeks_per_month: Decimal = WEEKS_PER_MONTH,
) -> Decimal:
    """Number of billing events per average month for ``schedule``."""
    if schedule.kind == ScheduleKind.WEEKLY:
        return weeks_per_month / Decimal(schedule.step)
    if schedule.kind == ScheduleKind.MONTHLY:
        return _ONE / Decimal(schedule.step)
    return _ZERO


def calculate_mrr(
    contract: Contract,
    weeks_per_month: Decimal = WEEKS_PER_MONTH,
    active_status: str = ContractStatus.ACTIVE.value,
) -> Decimal:
    """Monthly-equivalent revenue of one contract (0 unless Active)."""
    if contract.status != active_status:
        return _ZERO
    return contract.amount * payments_per_month(contract.schedule, weeks_per_month)


def calculate_total_mrr(
    contracts: Sequence[Contract],
    weeks_per_month: Decimal = WEEKS_PER_MONTH,
    active_status: str = ContractStatus.ACTIVE.value,
) -> Decimal:
    """Sum of ``calculate_mrr`` over the Active contracts."""
    return sum(
        (
            calculate_mrr(c, weeks_per_month, active_status)
            for c in contracts
            if c.status == active_status
        ),
        _ZERO,
    )


def calculate_mrr_breakdown(
    contracts: Sequence[Contract],
    weeks_per_month: Decimal = WEEKS_PER_MONTH,
    active_status: str = ContractStatus.ACTIVE.value,
) -> tuple[MRRLine, ...]:
    """Per-contract MRR lines for Active contracts with a recurring schedule."""
    lines: list[MRRLine] = []
    for contract in contracts:
        if contract.status != active_status or not contract.schedule.is_recurring:
            continue
        lines.append(
            MRRLine(
                contract_id=contract.contract_id,
                customer_name=contract.customer_name,
                amount=contract.amount,
                billing_interval=contract.billing_interval or "",
                billing_frequency=contract.billing_frequency or "",
                payments_per_month=payments_per_month(contract.schedule, weeks_per_month),
                mrr=calculate_mrr(contract, weeks_per_month, active_status),
            )
        )
    return tuple(lines)


@traced_engine("contract_statistics", "1.0")
def calculate_contract_statistics(
    contracts: Sequence[Contract],
    weeks_per_month: Decimal = WEEKS_PER_MONTH,
) -> ContractStatistics:
    """
    Status counts, total MRR, and mean amount of Active contracts.

    Statuses outside the known set count toward ``total`` only.
    """
    counts = {status.value: 0 for status in ContractStatus}
    active_amount = _ZERO
    for contract in contracts:
        if contract.status in counts:
            counts[contract.status] += 1
        if contract.status == ContractStatus.ACTIVE.value:
            active_amount += contract.amount

    active = counts[ContractStatus.ACTIVE.value]
    average = active_amount / active if active else _ZERO

    stats = ContractStatistics(
        total=len(contracts),
        active=active,
        completed=counts[ContractStatus.COMPLETED.value],
        cancelled=counts[ContractStatus.CANCELLED.value],
        inactive=counts[ContractStatus.INACTIVE.value],
        total_mrr=calculate_total_mrr(contracts, weeks_per_month),
        average_contract_value=average,
    )
    logger.debug("contract_statistics_calculated", extra={
        "total": stats.total,
        "active": stats.active,
        "total_mrr": str(stats.total_mrr),
    })
    return stats

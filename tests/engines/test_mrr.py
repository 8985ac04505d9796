"""
Tests for MRR normalization and contract statistics (forecast_engines/mrr.py).
"""

from decimal import Decimal

import pytest

from forecast_engines.mrr import (
    WEEKS_PER_MONTH,
    calculate_contract_statistics,
    calculate_mrr,
    calculate_mrr_breakdown,
    calculate_total_mrr,
    payments_per_month,
)
from forecast_kernel.domain.schedule import BillingSchedule


class TestPaymentsPerMonth:
    """Cadence to monthly rate."""

    @pytest.mark.parametrize(
        ("schedule", "expected"),
        [
            (BillingSchedule.weekly(1), Decimal("4.345")),
            (BillingSchedule.weekly(4), Decimal("4.345") / 4),
            (BillingSchedule.monthly(1), Decimal("1")),
            (BillingSchedule.monthly(3), Decimal("1") / 3),
            (BillingSchedule.once(), Decimal("0")),
            (BillingSchedule.unrecognized(), Decimal("0")),
        ],
    )
    def test_mapping(self, schedule, expected):
        assert payments_per_month(schedule) == expected

    def test_weeks_per_month_override(self):
        assert payments_per_month(BillingSchedule.weekly(1), Decimal("4.33")) == Decimal("4.33")


class TestCalculateMrr:
    """Single-contract and aggregate MRR."""

    def test_weekly_25(self, make_contract):
        contract = make_contract(amount="25", billing_interval="Weekly", billing_frequency="1 Week")
        assert calculate_mrr(contract) == Decimal("108.625")
        assert calculate_total_mrr([contract]) == Decimal("108.625")

    def test_monthly_100(self, make_contract):
        assert calculate_total_mrr([make_contract(amount="100")]) == Decimal("100")

    def test_once_contributes_nothing(self, make_contract):
        contract = make_contract(billing_interval="Once", billing_frequency="Once")
        assert calculate_mrr(contract) == Decimal("0")

    def test_interval_decides_unit(self, make_contract):
        contract = make_contract(amount="50", billing_interval="Weekly", billing_frequency="3 Months")
        assert calculate_mrr(contract, weeks_per_month=Decimal("4.5")) == Decimal("75")

    def test_inactive_excluded(self, make_contract):
        contracts = [
            make_contract(amount="100"),
            make_contract(amount="500", status="Cancelled"),
            make_contract(amount="700", status="Inactive"),
        ]
        assert calculate_total_mrr(contracts) == Decimal("100")

    def test_empty(self):
        assert calculate_total_mrr([]) == Decimal("0")

    def test_default_constant(self):
        assert WEEKS_PER_MONTH == Decimal("4.345")


class TestMrrBreakdown:
    """Per-contract MRR lines."""

    def test_only_active_recurring(self, make_contract):
        contracts = [
            make_contract(amount="25", billing_interval="Weekly", billing_frequency="1 Week",
                          contract_id="w"),
            make_contract(amount="100", contract_id="m"),
            make_contract(billing_interval="Once", billing_frequency="Once", contract_id="o"),
            make_contract(status="Cancelled", contract_id="x"),
        ]
        lines = calculate_mrr_breakdown(contracts)
        assert [line.contract_id for line in lines] == ["w", "m"]
        assert lines[0].mrr == Decimal("108.625")
        assert lines[0].payments_per_month == Decimal("4.345")
        assert lines[1].billing_frequency == "1 Month"
        assert sum(line.mrr for line in lines) == calculate_total_mrr(contracts)


class TestContractStatistics:
    """Status counts and averages."""

    def test_counts_and_average(self, make_contract):
        contracts = [
            make_contract(amount="100"),
            make_contract(amount="50"),
            make_contract(status="Completed"),
            make_contract(status="Cancelled"),
            make_contract(status="Cancelled"),
            make_contract(status="Inactive"),
            make_contract(status="Paused"),
        ]
        stats = calculate_contract_statistics(contracts)
        assert stats.total == 7
        assert stats.active == 2
        assert stats.completed == 1
        assert stats.cancelled == 2
        assert stats.inactive == 1
        assert stats.total_mrr == Decimal("150")
        assert stats.average_contract_value == Decimal("75")

    def test_no_active_contracts(self, make_contract):
        stats = calculate_contract_statistics([make_contract(status="Completed")])
        assert stats.active == 0
        assert stats.average_contract_value == Decimal("0")
        assert stats.total_mrr == Decimal("0")

    def test_emits_engine_trace(self, make_contract, captured_logs):
        calculate_contract_statistics([make_contract()])
        traces = [r for r in captured_logs() if r["message"] == "FORECAST_ENGINE_TRACE"]
        assert traces[0]["engine_name"] == "contract_statistics"

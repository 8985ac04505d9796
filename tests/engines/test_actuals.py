"""
Tests for realized revenue aggregation (forecast_engines/actuals.py).
"""

from datetime import date
from decimal import Decimal

from hypothesis import given
from hypothesis import strategies as st

from forecast_engines.actuals import aggregate_actual_revenue
from forecast_kernel.domain.records import Transaction

START = date(2025, 1, 1)
CUTOFF = date(2025, 1, 20)


class TestTotals:
    """Sales, returns and averages."""

    def test_sale_minus_return(self, make_transaction):
        txs = [
            make_transaction(amount="100", transaction_type="Sale"),
            make_transaction(amount="-20", transaction_type="Return"),
        ]
        summary = aggregate_actual_revenue(txs, START, CUTOFF)
        assert summary.total == Decimal("80")
        assert summary.gross_sales == Decimal("100")
        assert summary.returns_total == Decimal("20")
        assert summary.return_count == 1
        assert summary.transaction_count == 1
        assert summary.average_transaction == Decimal("100")

    def test_positive_return_amount_still_subtracted(self, make_transaction):
        """Returns are identified by type tag, not by sign."""
        txs = [
            make_transaction(amount="100"),
            make_transaction(amount="20", transaction_type="Return"),
        ]
        assert aggregate_actual_revenue(txs, START, CUTOFF).total == Decimal("80")

    def test_settled_counts_as_realized(self, make_transaction):
        txs = [make_transaction(status="Settled", amount="30")]
        assert aggregate_actual_revenue(txs, START, CUTOFF).total == Decimal("30")

    def test_average(self, make_transaction):
        txs = [make_transaction(amount="10"), make_transaction(amount="20")]
        summary = aggregate_actual_revenue(txs, START, CUTOFF)
        assert summary.average_transaction == Decimal("15")

    def test_empty_is_all_zero(self):
        summary = aggregate_actual_revenue([], START, CUTOFF)
        assert summary.total == Decimal("0")
        assert summary.average_transaction == Decimal("0")
        assert summary.daily_breakdown == ()
        assert summary.total_transactions == 0


class TestStatusHandling:
    """Declined and unknown statuses."""

    def test_declined_counted_not_summed(self, make_transaction):
        txs = [
            make_transaction(amount="100"),
            make_transaction(amount="999", status="Declined"),
        ]
        summary = aggregate_actual_revenue(txs, START, CUTOFF)
        assert summary.total == Decimal("100")
        assert summary.declined_transactions == 1
        assert summary.approved_transactions == 1
        assert summary.total_transactions == 2

    def test_unknown_status_ignored(self, make_transaction):
        txs = [make_transaction(status="Pending")]
        summary = aggregate_actual_revenue(txs, START, CUTOFF)
        assert summary.total == Decimal("0")
        assert summary.total_transactions == 1

    @given(
        st.lists(
            st.tuples(
                st.decimals(min_value=Decimal("-1000"), max_value=Decimal("1000"), places=2),
                st.sampled_from(["Approved", "Settled", "Declined"]),
                st.sampled_from(["Sale", "Return", None]),
            ),
            max_size=20,
        ),
    )
    def test_declined_never_affects_total(self, rows):
        txs = [
            Transaction(amount=a, status=s, transaction_date=START, transaction_type=t)
            for a, s, t in rows
        ]
        without_declined = [tx for tx in txs if tx.status != "Declined"]
        assert (
            aggregate_actual_revenue(txs, START, CUTOFF).total
            == aggregate_actual_revenue(without_declined, START, CUTOFF).total
        )


class TestWindow:
    """Half-open [start, cutoff)."""

    def test_cutoff_day_excluded(self, make_transaction):
        txs = [
            make_transaction(transaction_date=START, amount="1"),
            make_transaction(transaction_date=date(2025, 1, 19), amount="2"),
            make_transaction(transaction_date=CUTOFF, amount="4"),
            make_transaction(transaction_date=date(2024, 12, 31), amount="8"),
        ]
        summary = aggregate_actual_revenue(txs, START, CUTOFF)
        assert summary.total == Decimal("3")
        assert summary.total_transactions == 2

    def test_cutoff_equal_to_start_is_empty(self, make_transaction):
        summary = aggregate_actual_revenue([make_transaction(transaction_date=START)], START, START)
        assert summary.total == Decimal("0")


class TestDailyBreakdown:
    """Per-day detail of sales."""

    def test_defaults_for_missing_customer_and_category(self, make_transaction):
        txs = [make_transaction(customer_name=None, product_category=None)]
        (day,) = aggregate_actual_revenue(txs, START, CUTOFF).daily_breakdown
        assert day.customers == ("Unknown",)
        assert day.category_breakdown[0].category == "Uncategorized"

    def test_returns_not_in_breakdown(self, make_transaction):
        txs = [
            make_transaction(amount="100", transaction_date=date(2025, 1, 3)),
            make_transaction(amount="-20", transaction_type="Return",
                             transaction_date=date(2025, 1, 4)),
        ]
        days = aggregate_actual_revenue(txs, START, CUTOFF).daily_breakdown
        assert [d.date for d in days] == ["2025-01-03"]

    def test_days_ascending_and_categories_descending(self, make_transaction):
        txs = [
            make_transaction(transaction_date=date(2025, 1, 9), amount="5", product_category="Retail"),
            make_transaction(transaction_date=date(2025, 1, 2), amount="5"),
            make_transaction(transaction_date=date(2025, 1, 9), amount="50"),
        ]
        days = aggregate_actual_revenue(txs, START, CUTOFF).daily_breakdown
        assert [d.date for d in days] == ["2025-01-02", "2025-01-09"]
        assert [c.category for c in days[1].category_breakdown] == ["Memberships", "Retail"]

    def test_custom_labels(self, make_transaction):
        txs = [make_transaction(customer_name=None, product_category=None)]
        (day,) = aggregate_actual_revenue(
            txs, START, CUTOFF,
            uncategorized_label="Other",
            unknown_customer_label="Walk-in",
        ).daily_breakdown
        assert day.customers == ("Walk-in",)
        assert day.category_breakdown[0].category == "Other"

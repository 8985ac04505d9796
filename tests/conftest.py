"""
Pytest fixtures for the forecast engine test suite.

Provides:
- Structured logging setup and a ``captured_logs`` reader
- A deterministic clock pinned to a known UTC day
- Contract and transaction factories with sensible defaults
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from forecast_kernel.domain.clock import DeterministicClock
from forecast_kernel.domain.records import Contract, Transaction
from forecast_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture forecast_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            generate_forecast(...)
            logs = captured_logs()
            assert any(r["message"] == "forecast_report_generated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("forecast_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock
# =============================================================================


TODAY = date(2025, 1, 20)


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    """Clock pinned to noon UTC on 2025-01-20."""
    return DeterministicClock.on(TODAY)


# =============================================================================
# Record factories
# =============================================================================


@pytest.fixture
def make_contract():
    """Factory for ``Contract`` records; every field can be overridden."""

    def _make(**overrides) -> Contract:
        fields = {
            "amount": Decimal("100"),
            "billing_interval": "Monthly",
            "billing_frequency": "1 Month",
            "next_bill_date": date(2025, 1, 15),
            "status": "Active",
            "customer_name": "Acme Co",
        }
        fields.update(overrides)
        return Contract(**fields)

    return _make


@pytest.fixture
def make_transaction():
    """Factory for ``Transaction`` records; every field can be overridden."""

    def _make(**overrides) -> Transaction:
        fields = {
            "amount": Decimal("100"),
            "status": "Approved",
            "transaction_date": date(2025, 1, 10),
            "transaction_type": "Sale",
            "customer_name": "Acme Co",
            "product_category": "Memberships",
            "source": "Recurring",
        }
        fields.update(overrides)
        return Transaction(**fields)

    return _make

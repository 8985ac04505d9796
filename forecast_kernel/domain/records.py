"""
forecast_kernel.domain.records -- Immutable input snapshots.

Contracts and transactions are read once per report from the persistence
layer and handed to the engine as frozen dataclasses.  The engine never
mutates them.

Known status vocabularies are ``str`` enums, but status fields stay plain
strings on the records because the upstream processor may send values
outside the known set; those are carried through and simply never match.

Invariants enforced:
    - Amounts are ``Decimal`` (coerced through ``str`` so floats never
      leak binary drift into sums).
    - Dates are UTC calendar days produced by ``forecast_kernel.domain.dates``.
    - ``Contract.schedule`` is parsed once from interval/frequency.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from forecast_kernel.domain.dates import parse_utc, to_utc_date
from forecast_kernel.domain.schedule import BillingSchedule, parse_schedule


class ContractStatus(str, Enum):
    """Known contract lifecycle states.

    ACTIVE contracts are future revenue; COMPLETED ones are historical;
    CANCELLED ones are churn; INACTIVE ones are paused.
    """

    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    INACTIVE = "Inactive"


class TransactionStatus(str, Enum):
    """Known payment outcomes."""

    APPROVED = "Approved"
    SETTLED = "Settled"
    DECLINED = "Declined"


RETURN_TYPE = "Return"
RECURRING_SOURCE = "Recurring"

_SHORT_OFFSET_RE = re.compile(r"T.*[+-]\d{2}$")


def to_decimal(value: Any) -> Decimal:
    """Coerce a numeric or numeric string to ``Decimal`` via ``str``."""
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to Decimal")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Cannot convert {value!r} to Decimal") from exc


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_date(value: Any) -> date | None:
    if isinstance(value, str):
        value = value.strip()
    if value is None or value == "":
        return None
    return to_utc_date(value)


def _optional_timestamp(value: Any) -> datetime | None:
    """Last-sync timestamps keep their time of day (UTC)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    text = str(value).strip()
    day = parse_utc(text)  # shape check; raises InvalidDateFormatError
    normalized = text.replace(" ", "T", 1).replace("Z", "+00:00")
    if _SHORT_OFFSET_RE.search(normalized):
        normalized += ":00"  # PostgreSQL "+00" -> "+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        parsed = datetime(day.year, day.month, day.day)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class Contract:
    """
    A recurring billing agreement.

    Contract:
        ``schedule`` is derived from ``billing_interval`` and
        ``billing_frequency`` and never re-parsed downstream.
    Guarantees:
        - ``amount`` is a ``Decimal``.
        - ``next_bill_date`` is a UTC calendar day or None.
    """

    amount: Decimal
    billing_interval: str | None
    billing_frequency: str | None
    next_bill_date: date | None
    status: str
    customer_name: str
    contract_id: str | None = None
    billing_day: str | None = None
    last_synced_at: datetime | None = None
    schedule: BillingSchedule = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        if self.next_bill_date is not None:
            object.__setattr__(self, "next_bill_date", to_utc_date(self.next_bill_date))
        object.__setattr__(
            self,
            "schedule",
            parse_schedule(self.billing_interval, self.billing_frequency),
        )

    @property
    def is_active(self) -> bool:
        return self.status == ContractStatus.ACTIVE.value


@dataclass(frozen=True)
class Transaction:
    """
    A historical payment event (settled, approved, or declined).

    ``transaction_type`` is the processor's own type tag; ``"Return"``
    marks a refund regardless of the amount's sign.
    """

    amount: Decimal
    status: str
    transaction_date: date
    transaction_type: str | None = None
    customer_name: str | None = None
    product_category: str | None = None
    source: str | None = None
    transaction_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(self, "transaction_date", to_utc_date(self.transaction_date))


def contract_from_row(row: Mapping[str, Any]) -> Contract:
    """
    Build a ``Contract`` from a persistence row.

    Expected keys: ``amount``, ``billing_interval``, ``billing_frequency``,
    ``next_bill_date``, ``status``, ``customer_name``; optional ``id``,
    ``billing_day``, ``last_synced_at``.

    Raises:
        KeyError: required key missing.
        ValueError: ``amount`` not numeric.
        InvalidDateFormatError: malformed ``next_bill_date``.
    """
    return Contract(
        amount=to_decimal(row["amount"]),
        billing_interval=_optional_str(row.get("billing_interval")),
        billing_frequency=_optional_str(row.get("billing_frequency")),
        next_bill_date=_optional_date(row.get("next_bill_date")),
        status=str(row["status"]),
        customer_name=str(row.get("customer_name") or ""),
        contract_id=_optional_str(row.get("id")),
        billing_day=_optional_str(row.get("billing_day")),
        last_synced_at=_optional_timestamp(row.get("last_synced_at") or row.get("updated_at")),
    )


def transaction_from_row(row: Mapping[str, Any]) -> Transaction:
    """
    Build a ``Transaction`` from a persistence row.

    The type tag is read from ``raw_data["type"]`` (the processor payload)
    and falls back to a top-level ``type`` key.
    """
    raw_data = row.get("raw_data") or {}
    tx_type = raw_data.get("type") if isinstance(raw_data, Mapping) else None
    if tx_type is None:
        tx_type = row.get("type")
    return Transaction(
        amount=to_decimal(row["amount"]),
        status=str(row["status"]),
        transaction_date=to_utc_date(row["transaction_date"]),
        transaction_type=_optional_str(tx_type),
        customer_name=_optional_str(row.get("customer_name")),
        product_category=_optional_str(row.get("product_category")),
        source=_optional_str(row.get("source")),
        transaction_id=_optional_str(row.get("id")),
    )

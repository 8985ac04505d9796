"""
Billing schedule parsing.

Contracts describe their cadence as a loosely-typed pair of strings:
``billing_interval`` (``"Weekly"``, ``"Monthly"``, ``"Once"``, ...) and
``billing_frequency`` (``"1 Week"``, ``"4 Weeks"``, ``"10 Weeks"``,
``"Once"``).  ``parse_schedule`` turns that pair into a ``BillingSchedule``
once, at record construction, so engines never look at the strings.

Architecture: forecast_kernel/domain.  ZERO I/O.  Never raises: anything
that cannot be interpreted becomes ``ScheduleKind.UNRECOGNIZED`` and
contributes nothing downstream.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class ScheduleKind(str, Enum):
    """Cadence family of a billing schedule."""

    ONCE = "once"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class BillingSchedule:
    """Parsed billing cadence.

    ``step`` is the number of units between occurrences (weeks for WEEKLY,
    months for MONTHLY).  ONCE and UNRECOGNIZED carry ``step == 0``.
    """

    kind: ScheduleKind
    step: int = 0

    def __post_init__(self) -> None:
        if self.kind in (ScheduleKind.WEEKLY, ScheduleKind.MONTHLY):
            if self.step < 1:
                raise ValueError("recurring schedules require step >= 1")
        elif self.step != 0:
            raise ValueError(f"{self.kind.value} schedules carry step 0")

    @property
    def is_recurring(self) -> bool:
        return self.kind in (ScheduleKind.WEEKLY, ScheduleKind.MONTHLY)

    @classmethod
    def once(cls) -> BillingSchedule:
        return cls(ScheduleKind.ONCE)

    @classmethod
    def weekly(cls, step: int = 1) -> BillingSchedule:
        return cls(ScheduleKind.WEEKLY, step)

    @classmethod
    def monthly(cls, step: int = 1) -> BillingSchedule:
        return cls(ScheduleKind.MONTHLY, step)

    @classmethod
    def unrecognized(cls) -> BillingSchedule:
        return cls(ScheduleKind.UNRECOGNIZED)


UNRECOGNIZED = BillingSchedule.unrecognized()

_INTERVAL_UNITS = {
    "weekly": ScheduleKind.WEEKLY,
    "week": ScheduleKind.WEEKLY,
    "weeks": ScheduleKind.WEEKLY,
    "monthly": ScheduleKind.MONTHLY,
    "month": ScheduleKind.MONTHLY,
    "months": ScheduleKind.MONTHLY,
}

# "4 Weeks", "1 week", "2", "Weeks" -- leading count and/or trailing unit
_FREQUENCY_RE = re.compile(r"^(?P<count>[+-]?\d+)?\s*(?P<unit>[A-Za-z]+)?$")


def _normalize(value: str | None) -> str:
    return " ".join((value or "").split()).lower()


def parse_schedule(
    billing_interval: str | None,
    billing_frequency: str | None,
) -> BillingSchedule:
    """
    Interpret an (interval, frequency) pair.

    Rules:
        - ``"Once"`` in either field -> ONCE.
        - Unit from the interval when it is Weekly/Monthly; the frequency's
          unit word is consulted only when the interval is ambiguous, so
          ``("Weekly", "3 Months")`` is every 3 weeks.
        - Step from the leading integer of the frequency; 1 if the
          frequency is blank.
        - Zero/negative steps, non-numeric counts, or no resolvable unit
          -> UNRECOGNIZED.
    """
    interval = _normalize(billing_interval)
    frequency = _normalize(billing_frequency)

    if interval == "once" or frequency == "once":
        return BillingSchedule.once()

    m = _FREQUENCY_RE.match(frequency)
    if frequency and m is None:
        return UNRECOGNIZED

    count = m.group("count") if m else None
    freq_unit = m.group("unit") if m else None

    kind = _INTERVAL_UNITS.get(interval)
    if kind is None and freq_unit is not None:
        kind = _INTERVAL_UNITS.get(freq_unit)
    if kind is None:
        return UNRECOGNIZED

    step = int(count) if count is not None else 1
    if step < 1:
        return UNRECOGNIZED

    return BillingSchedule(kind, step)

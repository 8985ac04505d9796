"""
UTC Date Kernel -- calendar-day parsing and arithmetic.

Responsibility:
    Every date the forecast engine compares is a UTC calendar day,
    represented as a ``datetime.date``.  This module is the only place
    that turns strings and timestamps into those days, and the only place
    that does arithmetic on them.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Accepted string shapes (anything else, surrounding whitespace included,
raises ``InvalidDateFormatError``):
    - ISO-8601 with ``T``:      ``2025-12-25T12:00:00Z``, ``2025-12-25T12:00:00.123+00:00``
    - PostgreSQL timestamp:     ``2025-12-25 00:00:00+00``, ``2025-12-25 00:00:00.5-05:30``
    - Bare calendar day:        ``2025-12-25``

    Time-of-day and offset are discarded: stored timestamps are UTC, so
    the written calendar day is the UTC day.

Invariants enforced:
    - ``format_ymd(parse_utc(s)) == s`` for every valid ``YYYY-MM-DD``.
    - ``diff_days(d, add_days(d, n)) == n``.
    - Month arithmetic is calendar-based (never a 30-day approximation).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from typing import Union

from dateutil.relativedelta import relativedelta

from forecast_kernel.domain.clock import Clock, SystemClock
from forecast_kernel.exceptions import InvalidDateFormatError

_DATE = r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
_TIME = r"(?P<hour>\d{2}):(?P<minute>\d{2})"
_OFFSET = r"[+-]\d{2}(?::?\d{2})?"

_YMD_RE = re.compile(rf"^{_DATE}$")
_ISO_RE = re.compile(
    rf"^{_DATE}T{_TIME}(?::(?P<second>\d{{2}})(?:\.\d+)?)?(?:Z|{_OFFSET})?$"
)
_PG_RE = re.compile(
    rf"^{_DATE} {_TIME}:(?P<second>\d{{2}})(?:\.\d+)?{_OFFSET}$"
)

ClockLike = Union[Clock, Callable[[], Union[date, datetime]]]


def _match(value: str) -> re.Match[str]:
    for pattern in (_YMD_RE, _ISO_RE, _PG_RE):
        m = pattern.fullmatch(value)
        if m is not None:
            return m
    raise InvalidDateFormatError(value)


def _calendar_day(m: re.Match[str], value: str) -> date:
    groups = m.groupdict()
    if groups.get("hour") is not None:
        hour = int(groups["hour"])
        minute = int(groups["minute"])
        second = int(groups["second"] or 0)
        if hour > 23 or minute > 59 or second > 59:
            raise InvalidDateFormatError(value, "time component out of range")
    try:
        return date(int(groups["year"]), int(groups["month"]), int(groups["day"]))
    except ValueError as exc:
        raise InvalidDateFormatError(value, str(exc)) from exc


def parse_utc(value: str) -> date:
    """
    Parse a date string into its UTC calendar day.

    Raises:
        InvalidDateFormatError: empty, non-string, padded with whitespace,
            unrecognized shape, or an impossible calendar date such as
            ``2025-02-30``.
    """
    if not isinstance(value, str) or not value:
        raise InvalidDateFormatError(value, "empty or non-string value")
    return _calendar_day(_match(value), value)


def to_utc_date(value: date | datetime | str) -> date:
    """Coerce a date, datetime, or accepted string to a UTC calendar day.

    Aware datetimes are converted to UTC first; naive datetimes are taken
    to already be UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    return parse_utc(value)


def today(clock: ClockLike | None = None) -> date:
    """Current UTC calendar day from ``clock`` (system clock if omitted)."""
    if clock is None:
        clock = SystemClock()
    if isinstance(clock, Clock):
        return clock.today_utc()
    return to_utc_date(clock())


def add_days(d: date, n: int) -> date:
    """Shift ``d`` by ``n`` days (negative allowed)."""
    return d + timedelta(days=n)


def add_months(d: date, n: int) -> date:
    """Shift ``d`` by ``n`` calendar months, clamping to the month's last day."""
    return d + relativedelta(months=n)


def diff_days(a: date, b: date) -> int:
    """Signed whole days from ``a`` to ``b`` (``b - a``)."""
    return (b - a).days


def format_ymd(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def is_within_range(d: date, start: date, end: date) -> bool:
    """True if ``start <= d <= end``."""
    return start <= d <= end


def is_valid_date_string(value: str) -> bool:
    """Strict ``YYYY-MM-DD`` check that also rejects impossible days."""
    if not isinstance(value, str) or _YMD_RE.match(value) is None:
        return False
    try:
        parse_utc(value)
    except InvalidDateFormatError:
        return False
    return True


def extract_date_only(value: str) -> str:
    """Return the ``YYYY-MM-DD`` part of any accepted date string."""
    return format_ymd(parse_utc(value))


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    return start_of_month(d) + relativedelta(months=1, days=-1)

"""
Report date ranges.

Responsibility:
    Resolve a caller's range request -- a named preset or an explicit
    start/end pair -- plus "today" into a concrete ``DateRange`` with the
    actual/projected cutoff and day counts.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  "Today" is a parameter; callers
    obtain it from an injected ``Clock``.

Invariants enforced:
    - ``start <= cutoff <= end``.
    - ``days_completed == max(0, cutoff - start)`` and
      ``days_remaining == max(0, end - cutoff)`` in whole days.
    - A preset, when given, takes precedence over explicit dates.

Failure modes:
    - ``InvalidRangeSpecError`` for an unknown preset, a partial explicit
      range, no range at all, or ``start > end``.
    - ``InvalidDateFormatError`` propagates from malformed date strings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from forecast_kernel.domain.dates import (
    add_days,
    add_months,
    diff_days,
    end_of_month,
    format_ymd,
    parse_utc,
    start_of_month,
)
from forecast_kernel.exceptions import InvalidRangeSpecError


class PresetKind(str, Enum):
    """How a preset derives its window from today."""

    CALENDAR_MONTH = "calendar_month"  # whole month, offset from today's month
    DAYS_AHEAD = "days_ahead"  # today .. today + N days


@dataclass(frozen=True)
class RangePreset:
    """A named window relative to today."""

    name: str
    kind: PresetKind
    months_ahead: int = 0
    days: int = 0

    def __post_init__(self) -> None:
        if self.kind == PresetKind.DAYS_AHEAD and self.days < 0:
            raise ValueError("days_ahead presets require days >= 0")

    def window(self, today: date) -> tuple[date, date]:
        if self.kind == PresetKind.CALENDAR_MONTH:
            start = add_months(start_of_month(today), self.months_ahead)
            return start, end_of_month(start)
        return today, add_days(today, self.days)


DEFAULT_PRESETS: tuple[RangePreset, ...] = (
    RangePreset("thisMonth", PresetKind.CALENDAR_MONTH, months_ahead=0),
    RangePreset("nextMonth", PresetKind.CALENDAR_MONTH, months_ahead=1),
    RangePreset("next7days", PresetKind.DAYS_AHEAD, days=7),
    RangePreset("next30days", PresetKind.DAYS_AHEAD, days=30),
    RangePreset("next90days", PresetKind.DAYS_AHEAD, days=90),
    RangePreset("7days", PresetKind.DAYS_AHEAD, days=7),
    RangePreset("30days", PresetKind.DAYS_AHEAD, days=30),
    RangePreset("90days", PresetKind.DAYS_AHEAD, days=90),
)


@dataclass(frozen=True)
class RangeSpec:
    """Caller's range request: a preset name or explicit ISO date strings."""

    preset: str | None = None
    start_date: str | None = None
    end_date: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> RangeSpec:
        """Accept request-body keys (``startDate``) or snake_case keys."""
        data = data or {}
        return cls(
            preset=data.get("preset") or None,
            start_date=data.get("startDate") or data.get("start_date") or None,
            end_date=data.get("endDate") or data.get("end_date") or None,
        )


@dataclass(frozen=True)
class DateRange:
    """
    Resolved report window.

    Actual revenue covers ``[start, cutoff)``; projected revenue covers
    ``[cutoff, end]``.  Once the window has closed (today after ``end``)
    the cutoff rests on ``end`` but the actual side runs through ``end``
    inclusive and nothing is projected.
    """

    start: date
    end: date
    cutoff: date
    window_closed: bool = False

    def __post_init__(self) -> None:
        if not (self.start <= self.cutoff <= self.end):
            raise ValueError(
                f"DateRange requires start <= cutoff <= end, got "
                f"{self.start} / {self.cutoff} / {self.end}"
            )
        if self.window_closed and self.cutoff != self.end:
            raise ValueError("a closed DateRange has its cutoff on the end date")

    @property
    def actual_until(self) -> date:
        """Exclusive upper bound of the actual-revenue window."""
        return add_days(self.end, 1) if self.window_closed else self.cutoff

    @property
    def projection_start(self) -> date:
        """First projected day; after ``end`` (an empty window) once closed."""
        return add_days(self.end, 1) if self.window_closed else self.cutoff

    @property
    def days(self) -> int:
        return diff_days(self.start, self.end)

    @property
    def days_completed(self) -> int:
        return max(0, diff_days(self.start, self.cutoff))

    @property
    def days_remaining(self) -> int:
        return max(0, diff_days(self.cutoff, self.end))

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": format_ymd(self.start),
            "end": format_ymd(self.end),
            "days": self.days,
            "cutoffDate": format_ymd(self.cutoff),
            "daysCompleted": self.days_completed,
            "daysRemaining": self.days_remaining,
        }


def _clamp(d: date, lower: date, upper: date) -> date:
    return min(max(d, lower), upper)


def resolve_date_range(
    range_spec: RangeSpec,
    today: date,
    presets: tuple[RangePreset, ...] = DEFAULT_PRESETS,
) -> DateRange:
    """
    Resolve ``range_spec`` against ``today``.

    The cutoff is today clamped into the window.  A window entirely in
    the future is all projected; one entirely in the past is marked
    ``window_closed`` and is all actual, its last day included.
    """
    if range_spec.preset:
        by_name = {p.name: p for p in presets}
        preset = by_name.get(range_spec.preset)
        if preset is None:
            raise InvalidRangeSpecError(
                "unknown preset",
                preset=range_spec.preset,
                start_date=range_spec.start_date,
                end_date=range_spec.end_date,
            )
        start, end = preset.window(today)
    elif range_spec.start_date and range_spec.end_date:
        start = parse_utc(range_spec.start_date)
        end = parse_utc(range_spec.end_date)
        if start > end:
            raise InvalidRangeSpecError(
                "start date is after end date",
                start_date=range_spec.start_date,
                end_date=range_spec.end_date,
            )
    else:
        raise InvalidRangeSpecError(
            "a preset or both start and end dates are required",
            start_date=range_spec.start_date,
            end_date=range_spec.end_date,
        )

    return DateRange(
        start=start,
        end=end,
        cutoff=_clamp(today, start, end),
        window_closed=today > end,
    )

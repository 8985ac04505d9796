"""
Tests for report window resolution (forecast_kernel/domain/date_range.py).
"""

from datetime import date

import pytest
from hypothesis import given
from hypothesis import strategies as st

from forecast_kernel.domain.date_range import (
    DEFAULT_PRESETS,
    DateRange,
    PresetKind,
    RangePreset,
    RangeSpec,
    resolve_date_range,
)
from forecast_kernel.exceptions import InvalidDateFormatError, InvalidRangeSpecError

TODAY = date(2025, 1, 20)


class TestPresets:
    """Named windows relative to today."""

    def test_this_month(self):
        r = resolve_date_range(RangeSpec(preset="thisMonth"), TODAY)
        assert (r.start, r.end, r.cutoff) == (date(2025, 1, 1), date(2025, 1, 31), TODAY)
        assert r.days == 30
        assert r.days_completed == 19
        assert r.days_remaining == 11

    def test_next_month_crosses_year(self):
        r = resolve_date_range(RangeSpec(preset="nextMonth"), date(2024, 12, 5))
        assert (r.start, r.end) == (date(2025, 1, 1), date(2025, 1, 31))
        # window entirely in the future: everything is projected
        assert r.cutoff == r.start
        assert r.days_completed == 0

    def test_next_month_leap_february(self):
        r = resolve_date_range(RangeSpec(preset="nextMonth"), date(2024, 1, 31))
        assert (r.start, r.end) == (date(2024, 2, 1), date(2024, 2, 29))

    @pytest.mark.parametrize(
        ("name", "days"),
        [("next7days", 7), ("next30days", 30), ("next90days", 90),
         ("7days", 7), ("30days", 30), ("90days", 90)],
    )
    def test_days_ahead(self, name, days):
        r = resolve_date_range(RangeSpec(preset=name), TODAY)
        assert r.start == TODAY
        assert r.days == days
        assert r.cutoff == TODAY
        assert r.days_remaining == days

    def test_preset_wins_over_explicit_dates(self):
        spec = RangeSpec(preset="thisMonth", start_date="2020-01-01", end_date="2020-12-31")
        r = resolve_date_range(spec, TODAY)
        assert r.start == date(2025, 1, 1)

    def test_unknown_preset(self):
        with pytest.raises(InvalidRangeSpecError) as exc_info:
            resolve_date_range(RangeSpec(preset="lastYear"), TODAY)
        assert exc_info.value.preset == "lastYear"
        assert exc_info.value.code == "INVALID_RANGE_SPEC"

    def test_custom_preset_table(self):
        presets = (RangePreset("fortnight", PresetKind.DAYS_AHEAD, days=14),)
        r = resolve_date_range(RangeSpec(preset="fortnight"), TODAY, presets)
        assert r.end == date(2025, 2, 3)
        with pytest.raises(InvalidRangeSpecError):
            resolve_date_range(RangeSpec(preset="thisMonth"), TODAY, presets)

    def test_default_preset_names(self):
        names = {p.name for p in DEFAULT_PRESETS}
        assert {"thisMonth", "nextMonth", "next7days", "next30days", "next90days"} <= names


class TestExplicitRange:
    """Start/end supplied by the caller."""

    def test_past_window_is_all_actual(self):
        spec = RangeSpec(start_date="2024-11-01", end_date="2024-11-30")
        r = resolve_date_range(spec, TODAY)
        assert r.cutoff == r.end
        assert r.days_remaining == 0
        assert r.window_closed
        # actual side runs through the last day; nothing left to project
        assert r.actual_until == date(2024, 12, 1)
        assert r.projection_start > r.end

    def test_window_ending_today_is_open(self):
        r = resolve_date_range(RangeSpec(start_date="2025-01-01", end_date="2025-01-20"), TODAY)
        assert not r.window_closed
        assert r.actual_until == r.projection_start == TODAY

    def test_accepts_timestamps(self):
        spec = RangeSpec(start_date="2025-01-01T00:00:00Z", end_date="2025-01-31 23:59:59+00")
        r = resolve_date_range(spec, TODAY)
        assert (r.start, r.end) == (date(2025, 1, 1), date(2025, 1, 31))

    def test_single_day_window(self):
        r = resolve_date_range(RangeSpec(start_date="2025-01-20", end_date="2025-01-20"), TODAY)
        assert r.days == 0
        assert r.cutoff == TODAY

    def test_start_after_end(self):
        with pytest.raises(InvalidRangeSpecError):
            resolve_date_range(RangeSpec(start_date="2025-02-01", end_date="2025-01-01"), TODAY)

    @pytest.mark.parametrize(
        "spec",
        [
            RangeSpec(),
            RangeSpec(start_date="2025-01-01"),
            RangeSpec(end_date="2025-01-31"),
        ],
    )
    def test_missing_or_partial(self, spec):
        with pytest.raises(InvalidRangeSpecError):
            resolve_date_range(spec, TODAY)

    def test_malformed_date(self):
        with pytest.raises(InvalidDateFormatError):
            resolve_date_range(RangeSpec(start_date="01/01/2025", end_date="2025-01-31"), TODAY)


class TestRangeSpecFromMapping:
    """Request-body shaped input."""

    def test_camel_case(self):
        spec = RangeSpec.from_mapping({"startDate": "2025-01-01", "endDate": "2025-01-31"})
        assert spec == RangeSpec(start_date="2025-01-01", end_date="2025-01-31")

    def test_snake_case_and_empty_values(self):
        spec = RangeSpec.from_mapping({"preset": "", "start_date": "2025-01-01"})
        assert spec == RangeSpec(start_date="2025-01-01")

    def test_none(self):
        assert RangeSpec.from_mapping(None) == RangeSpec()


class TestDateRangeInvariant:
    """start <= cutoff <= end always holds."""

    def test_rejects_cutoff_outside_window(self):
        with pytest.raises(ValueError):
            DateRange(start=date(2025, 1, 1), end=date(2025, 1, 31), cutoff=date(2025, 2, 1))

    def test_closed_range_requires_cutoff_on_end(self):
        with pytest.raises(ValueError):
            DateRange(
                start=date(2025, 1, 1), end=date(2025, 1, 31), cutoff=TODAY,
                window_closed=True,
            )

    def test_to_dict(self):
        r = DateRange(start=date(2025, 1, 1), end=date(2025, 1, 31), cutoff=TODAY)
        assert r.to_dict() == {
            "start": "2025-01-01",
            "end": "2025-01-31",
            "days": 30,
            "cutoffDate": "2025-01-20",
            "daysCompleted": 19,
            "daysRemaining": 11,
        }

    @given(
        st.sampled_from([p.name for p in DEFAULT_PRESETS]),
        st.dates(min_value=date(2000, 1, 1), max_value=date(2100, 12, 31)),
    )
    def test_every_preset_respects_ordering(self, name, today):
        r = resolve_date_range(RangeSpec(preset=name), today)
        assert r.start <= r.cutoff <= r.end
        assert not r.window_closed
        assert r.days_completed + r.days_remaining == r.days

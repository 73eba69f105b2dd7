"""Tests for due date computation."""

import calendar
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, settings, strategies as st
from pydantic import ValidationError as PydanticValidationError

from pm_engine.domain.maintenance.value_objects import (
    Frequency,
    IntervalFields,
    add_months,
    add_years,
    apply_interval,
    as_utc,
    interval_for,
    next_due,
    utc_now,
)

anchors = st.datetimes(
    min_value=datetime(1970, 1, 1), max_value=datetime(2100, 12, 31)
)


class TestFixedOffsets:
    @given(anchors)
    @settings(max_examples=200, deadline=None)
    def test_weekly_is_exactly_seven_days(self, anchor):
        assert next_due(Frequency.WEEKLY, anchor) == anchor + timedelta(days=7)

    @given(anchors)
    @settings(max_examples=100, deadline=None)
    def test_daily_is_exactly_one_day(self, anchor):
        assert next_due(Frequency.DAILY, anchor) == anchor + timedelta(days=1)

    def test_weekly_crosses_year_boundary(self):
        anchor = datetime(2024, 12, 28, 9, 15)
        assert next_due(Frequency.WEEKLY, anchor) == datetime(2025, 1, 4, 9, 15)

    def test_weekly_crosses_month_boundary(self):
        assert next_due(Frequency.WEEKLY, datetime(2023, 2, 25)) == datetime(
            2023, 3, 4
        )


class TestCalendarArithmetic:
    @pytest.mark.parametrize(
        "anchor, expected",
        [
            (datetime(2023, 1, 31), datetime(2023, 3, 3)),
            (datetime(2024, 1, 31), datetime(2024, 3, 2)),
            (datetime(2023, 3, 31), datetime(2023, 5, 1)),
            (datetime(2023, 1, 15), datetime(2023, 2, 15)),
            (datetime(2023, 12, 15), datetime(2024, 1, 15)),
            (datetime(2023, 12, 31), datetime(2024, 1, 31)),
        ],
    )
    def test_monthly_rolls_overflow_forward(self, anchor, expected):
        assert next_due(Frequency.MONTHLY, anchor) == expected

    def test_monthly_jan_31_is_deterministic(self):
        anchor = datetime(2025, 1, 31, 8, 0)
        results = {next_due(Frequency.MONTHLY, anchor) for _ in range(10)}
        assert results == {datetime(2025, 3, 3, 8, 0)}

    def test_time_of_day_is_preserved(self):
        anchor = datetime(2024, 1, 31, 14, 30, 45, 123)
        assert next_due(Frequency.MONTHLY, anchor) == datetime(
            2024, 3, 2, 14, 30, 45, 123
        )

    def test_quarterly_adds_three_months(self):
        assert next_due(Frequency.QUARTERLY, datetime(2023, 5, 10)) == datetime(
            2023, 8, 10
        )
        assert next_due(Frequency.QUARTERLY, datetime(2023, 11, 30)) == datetime(
            2024, 3, 1
        )

    def test_yearly_from_leap_day(self):
        assert next_due(Frequency.YEARLY, datetime(2024, 2, 29)) == datetime(
            2025, 3, 1
        )
        assert add_years(datetime(2024, 2, 29), 4) == datetime(2028, 2, 29)

    def test_unknown_frequency_defaults_to_one_month(self):
        assert next_due(None, datetime(2023, 4, 10)) == datetime(2023, 5, 10)

    @given(anchors)
    @settings(max_examples=200, deadline=None)
    def test_monthly_offset_equals_length_of_anchor_month(self, anchor):
        days_in_month = calendar.monthrange(anchor.year, anchor.month)[1]
        assert next_due(Frequency.MONTHLY, anchor) - anchor == timedelta(
            days=days_in_month
        )

    @given(anchors, st.integers(min_value=0, max_value=36))
    @settings(max_examples=100, deadline=None)
    def test_add_months_keeps_day_when_it_fits(self, anchor, months):
        result = add_months(anchor, months)
        if anchor.day <= 28:
            assert result.day == anchor.day
        assert result.time() == anchor.time()
        assert result >= anchor


class TestIntervals:
    @pytest.mark.parametrize(
        "frequency, expected",
        [
            (Frequency.DAILY, IntervalFields(days=1)),
            (Frequency.WEEKLY, IntervalFields(weeks=1)),
            (Frequency.MONTHLY, IntervalFields(months=1)),
            (Frequency.QUARTERLY, IntervalFields(months=3)),
            (Frequency.YEARLY, IntervalFields(months=12)),
            (None, IntervalFields(months=1)),
        ],
    )
    def test_interval_for_frequency(self, frequency, expected):
        assert interval_for(frequency) == expected

    def test_apply_interval(self):
        anchor = datetime(2024, 1, 31, 6, 0)
        assert apply_interval(IntervalFields(days=3), anchor) == datetime(
            2024, 2, 3, 6, 0
        )
        assert apply_interval(IntervalFields(weeks=2), anchor) == datetime(
            2024, 2, 14, 6, 0
        )
        assert apply_interval(IntervalFields(months=1), anchor) == datetime(
            2024, 3, 2, 6, 0
        )
        assert apply_interval(IntervalFields(months=12), anchor) == datetime(
            2025, 1, 31, 6, 0
        )

    @pytest.mark.parametrize(
        "fields",
        [{}, {"days": 1, "weeks": 1}, {"months": 0}, {"weeks": -2}],
    )
    def test_exactly_one_positive_interval_required(self, fields):
        with pytest.raises(PydanticValidationError):
            IntervalFields(**fields)


class TestUtcTimestamps:
    def test_now_is_aware_utc(self):
        assert utc_now().utcoffset() == timedelta(0)

    def test_naive_is_taken_as_utc(self):
        assert as_utc(datetime(2025, 1, 31, 8, 0)) == datetime(
            2025, 1, 31, 8, 0, tzinfo=timezone.utc
        )

    def test_offset_is_shifted_to_utc(self):
        local = datetime(2025, 1, 1, 1, 30, tzinfo=timezone(timedelta(hours=5)))
        converted = as_utc(local)

        assert converted == datetime(2024, 12, 31, 20, 30, tzinfo=timezone.utc)
        assert converted.tzinfo == timezone.utc

    def test_month_rollover_keeps_timezone(self):
        anchor = datetime(2025, 1, 31, 8, 0, tzinfo=timezone.utc)
        assert next_due(Frequency.MONTHLY, anchor) == datetime(
            2025, 3, 3, 8, 0, tzinfo=timezone.utc
        )

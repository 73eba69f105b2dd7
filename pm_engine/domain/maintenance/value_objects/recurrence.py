"""
Recurrence calculation.

Calendar-month arithmetic keeps the day of month and lets any excess roll
forward into the following month, so Jan 31 + 1 month is Mar 3 (Mar 2 in a
leap year) and Feb 29 + 1 year is Mar 1. Due dates stored by the platform
were produced with this rule, so it is reproduced here rather than clamping
to the end of the month.
"""

import calendar
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, model_validator

from .enums import Frequency


class IntervalFields(BaseModel):
    """Interval columns of a time-based trigger. Exactly one is set."""

    model_config = {"frozen": True}

    days: int | None = None
    weeks: int | None = None
    months: int | None = None

    @model_validator(mode="after")
    def _exactly_one_interval(self) -> "IntervalFields":
        set_fields = [v for v in (self.days, self.weeks, self.months) if v is not None]
        if len(set_fields) != 1:
            raise ValueError("Exactly one of days, weeks or months must be set")
        if set_fields[0] < 1:
            raise ValueError("Interval must be a positive number")
        return self


_FREQUENCY_INTERVALS: dict[Frequency, IntervalFields] = {
    Frequency.DAILY: IntervalFields(days=1),
    Frequency.WEEKLY: IntervalFields(weeks=1),
    Frequency.MONTHLY: IntervalFields(months=1),
    Frequency.QUARTERLY: IntervalFields(months=3),
    Frequency.YEARLY: IntervalFields(months=12),
}

DEFAULT_INTERVAL = IntervalFields(months=1)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime, the form stored in the database."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Convert a timestamp to aware UTC.

    Naive values are taken to be UTC already; values with an offset are
    shifted to UTC.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def add_months(anchor: datetime, months: int) -> datetime:
    """Add calendar months, rolling day-of-month overflow into the next month."""
    month_index = anchor.month - 1 + months
    year = anchor.year + month_index // 12
    month = month_index % 12 + 1

    last_day = calendar.monthrange(year, month)[1]
    if anchor.day <= last_day:
        return anchor.replace(year=year, month=month)

    overflow = anchor.day - last_day
    return anchor.replace(year=year, month=month, day=last_day) + timedelta(
        days=overflow
    )


def add_years(anchor: datetime, years: int) -> datetime:
    return add_months(anchor, 12 * years)


def interval_for(frequency: Frequency | None) -> IntervalFields:
    """Trigger interval fields for a canonical frequency."""
    return _FREQUENCY_INTERVALS.get(frequency, DEFAULT_INTERVAL)


def apply_interval(fields: IntervalFields, anchor: datetime) -> datetime:
    """Advance an anchor by a trigger's interval."""
    if fields.days is not None:
        return anchor + timedelta(days=fields.days)
    if fields.weeks is not None:
        return anchor + timedelta(days=7 * fields.weeks)
    return add_months(anchor, fields.months or 1)


def next_due(frequency: Frequency | None, anchor: datetime) -> datetime:
    """Next due timestamp for a schedule of the given frequency."""
    if frequency == Frequency.DAILY:
        return anchor + timedelta(days=1)
    if frequency == Frequency.WEEKLY:
        return anchor + timedelta(days=7)
    if frequency == Frequency.QUARTERLY:
        return add_months(anchor, 3)
    if frequency == Frequency.YEARLY:
        return add_years(anchor, 1)
    return add_months(anchor, 1)

"""
Frequency normalization.

Maps free-text and vendor-exported recurrence descriptions onto the closed
set of canonical frequencies. Matching is an ordered list of rules; the first
rule that recognises the input decides, and anything unrecognised falls back
to monthly.
"""

import re
from collections.abc import Callable
from typing import Any, NamedTuple

from .enums import Frequency

DEFAULT_FREQUENCY = Frequency.MONTHLY

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_COMPOUND_BASE = re.compile(r"^\s*(daily|weekly|monthly|quarterly|yearly|annual)")
_NUMERIC_WEEKS = re.compile(r"(\d+)\s*weeks?\b")
_NUMERIC_MONTHS = re.compile(r"(\d+)\s*months?\b")

_BASE_UNITS = {
    "daily": Frequency.DAILY,
    "weekly": Frequency.WEEKLY,
    "monthly": Frequency.MONTHLY,
    "quarterly": Frequency.QUARTERLY,
    "yearly": Frequency.YEARLY,
    "annual": Frequency.YEARLY,
}

# Checked in order; "day" must win over "week" etc. exactly as listed.
_KEYWORDS: tuple[tuple[tuple[str, ...], Frequency], ...] = (
    (("daily", "day"), Frequency.DAILY),
    (("weekly", "week"), Frequency.WEEKLY),
    (("monthly", "month"), Frequency.MONTHLY),
    (("quarterly", "quarter"), Frequency.QUARTERLY),
    (("yearly", "year", "annual"), Frequency.YEARLY),
)


class FrequencyRule(NamedTuple):
    """A named matcher returning a frequency, or None to defer to the next rule."""

    name: str
    match: Callable[[str], Frequency | None]


def _compound_vendor_pattern(text: str) -> Frequency | None:
    # e.g. "monthlybyweekday|1|first_mon", "weekly|6|monday", "yearly|1"
    if "|" not in text:
        return None
    head = text.split("|", 1)[0]
    found = _COMPOUND_BASE.match(head)
    if not found:
        return None
    return _BASE_UNITS[found.group(1)]


def _numeric_magnitude(text: str) -> Frequency | None:
    if _NUMERIC_WEEKS.search(text):
        return Frequency.WEEKLY

    found = _NUMERIC_MONTHS.search(text)
    if not found:
        return None
    months = int(found.group(1))
    if months >= 12:
        return Frequency.YEARLY
    if months >= 3:
        return Frequency.QUARTERLY
    return Frequency.MONTHLY


def _monthly_with_qualifier(text: str) -> Frequency | None:
    if "monthly" not in text:
        return None
    if "first" in text or "last" in text:
        return Frequency.MONTHLY
    if any(day in text for day in WEEKDAY_NAMES):
        return Frequency.MONTHLY
    return None


def _keyword_containment(text: str) -> Frequency | None:
    for keywords, frequency in _KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return frequency
    return None


FREQUENCY_RULES: tuple[FrequencyRule, ...] = (
    FrequencyRule("compound_vendor_pattern", _compound_vendor_pattern),
    FrequencyRule("numeric_magnitude", _numeric_magnitude),
    FrequencyRule("monthly_with_qualifier", _monthly_with_qualifier),
    FrequencyRule("keyword_containment", _keyword_containment),
)


def match_rule(raw: Any) -> tuple[Frequency, str | None]:
    """
    Normalize a recurrence description and report which rule decided it.

    Returns:
        The canonical frequency and the name of the matching rule, or None
        as the rule name when the monthly fallback applied.
    """
    if isinstance(raw, Frequency):
        return raw, None
    if not isinstance(raw, str):
        return DEFAULT_FREQUENCY, None

    text = raw.strip().lower()
    if not text:
        return DEFAULT_FREQUENCY, None

    for rule in FREQUENCY_RULES:
        frequency = rule.match(text)
        if frequency is not None:
            return frequency, rule.name

    return DEFAULT_FREQUENCY, None


def normalize(raw: Any) -> Frequency:
    """
    Normalize a recurrence description to a canonical frequency.

    Never raises: empty, null and unrecognised input all resolve to monthly.
    """
    frequency, _ = match_rule(raw)
    return frequency

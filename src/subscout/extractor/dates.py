"""Temporal extractor: a start date and the projected next billing date.

Two notations are recognised, tried in order:
1. ISO-like: 2024-03-05 or 2024/3/5 (years 2000-2099)
2. Long form: Mar 5, 2024 or March 5, 2024

The billing cadence is never inferred from the message; the next billing
date is always the start date plus a fixed cycle (30 days by default).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

import regex

from subscout.config_schema import DEFAULT_BILLING_CYCLE_DAYS
from subscout.core.errors import FieldParseError
from subscout.core.logging import get_logger
from subscout.extractor.text import safe_search

logger = get_logger(__name__)

ISO_DATE_PATTERN = regex.compile(
    r"\b(?P<year>20\d{2})[-/](?P<month>\d{1,2})[-/](?P<day>\d{1,2})\b"
)

LONG_DATE_PATTERN = regex.compile(
    r"\b(?P<month>(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*)"
    r"\s+(?P<day>\d{1,2}),\s*(?P<year>\d{4})\b",
    regex.IGNORECASE,
)

MONTH_NAMES = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

MONTHS: dict[str, int] = {
    **MONTH_NAMES,
    **{name[:3]: number for name, number in MONTH_NAMES.items()},
    "sept": 9,
}


@dataclass(frozen=True, slots=True)
class BillingDates:
    """Start and next-billing dates; both set or both None."""

    start_date: date | None = None
    next_billing_date: date | None = None


NO_DATES = BillingDates()


def _build_date(year: str, month: int, day: str, raw: str) -> date:
    try:
        return date(int(year), month, int(day))
    except ValueError as e:
        raise FieldParseError(f"Invalid date {raw!r}: {e}", field="start_date", raw=raw) from e


def parse_iso_date(match: regex.Match) -> date:
    """Build a date from an ISO_DATE_PATTERN match.

    Raises:
        FieldParseError: If the match is not a real calendar date (2024-02-30)
    """
    return _build_date(
        match.group("year"),
        int(match.group("month")),
        match.group("day"),
        match.group(0),
    )


def parse_long_date(match: regex.Match) -> date:
    """Build a date from a LONG_DATE_PATTERN match.

    Raises:
        FieldParseError: If the month word is not a month name or the day is invalid
    """
    raw = match.group(0)
    month = MONTHS.get(match.group("month").lower())
    if month is None:
        raise FieldParseError(f"Unknown month in {raw!r}", field="start_date", raw=raw)
    return _build_date(match.group("year"), month, match.group("day"), raw)


def find_start_date(text: str) -> date | None:
    """Return the first parseable date in text, ISO notation first."""
    attempts = (
        (ISO_DATE_PATTERN, parse_iso_date),
        (LONG_DATE_PATTERN, parse_long_date),
    )
    for pattern, parse in attempts:
        match = safe_search(pattern, text)
        if match is None:
            continue
        try:
            return parse(match)
        except FieldParseError as e:
            # A bad date in one notation must not hide a good one in the other
            logger.debug("date_parse_failed", field=e.field, raw=e.raw)
    return None


def next_billing_date(start: date, cycle_days: int = DEFAULT_BILLING_CYCLE_DAYS) -> date:
    """Project the next charge date from a start date."""
    return start + timedelta(days=cycle_days)


def extract_dates(text: str, cycle_days: int = DEFAULT_BILLING_CYCLE_DAYS) -> BillingDates:
    """Extract the start date and derive the next billing date.

    Args:
        text: Raw message text
        cycle_days: Billing cycle length in days

    Returns:
        BillingDates; both fields are None when no date parses or the
        projected date falls past date.max
    """
    start = find_start_date(text)
    if start is None:
        return NO_DATES
    try:
        next_date = next_billing_date(start, cycle_days)
    except OverflowError:
        logger.debug("next_billing_date_out_of_range", start_date=start.isoformat())
        return NO_DATES
    return BillingDates(start_date=start, next_billing_date=next_date)

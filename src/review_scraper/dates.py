"""Normalize the date strings review sites print into comparable datetimes.

Sites disagree on format: G2 prints absolute dates, Capterra prints
relative phrases like "3 months ago", and some layouts use slashed
numeric dates in either order. ``normalize_date`` tries, in order:

1. ``YYYY/M/D``
2. ``M/D/YYYY``
3. a relative phrase mentioning year/month/day, counted back from ``now``
4. whatever ``dateutil`` can parse

and returns ``None`` when nothing matches. ``None`` never falls inside a
date range.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

from dateutil import parser as dateparser
from dateutil.relativedelta import relativedelta

from review_scraper.models import DateRange

logger = logging.getLogger(__name__)

YEAR_FIRST = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")
MONTH_FIRST = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
LEADING_INT = re.compile(r"^[+-]?\d+")


def _from_parts(year: str, month: str, day: str) -> datetime | None:
    try:
        return datetime(int(year), int(month), int(day))
    except ValueError:
        return None


def _magnitude(text: str) -> int:
    # "a month ago" has no leading number and counts as 0, i.e. "now"
    match = LEADING_INT.match(text)
    return int(match.group()) if match else 0


def _relative(text: str, now: datetime) -> datetime | None:
    lowered = text.lower()
    if "year" in lowered:
        return now - relativedelta(years=_magnitude(text))
    if "month" in lowered:
        return now - relativedelta(months=_magnitude(text))
    if "day" in lowered:
        return now - timedelta(days=_magnitude(text))
    return None


def _generic(text: str, now: datetime) -> datetime | None:
    # Parts the text leaves out (day, year) come from "now", at midnight.
    default = now.replace(hour=0, minute=0, second=0, microsecond=0)
    try:
        parsed = dateparser.parse(text, default=default)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def normalize_date(raw: str | None, now: datetime | None = None) -> datetime | None:
    """Turn a site's date text into a naive datetime, or None if unreadable."""
    if not raw:
        return None
    text = raw.strip()

    m = YEAR_FIRST.match(text)
    if m:
        return _from_parts(m.group(1), m.group(2), m.group(3))
    m = MONTH_FIRST.match(text)
    if m:
        return _from_parts(m.group(3), m.group(1), m.group(2))

    now = now or datetime.now()
    relative = _relative(text, now)
    if relative is not None:
        return relative

    return _generic(text, now)


def parse_date_range(start: str, end: str, now: datetime | None = None) -> DateRange:
    """Build the inclusive filter window from the job's start/end strings."""
    start_dt = normalize_date(start, now)
    end_dt = normalize_date(end, now)
    if start_dt is None:
        raise ValueError(f"Unreadable start_date: {start!r}")
    if end_dt is None:
        raise ValueError(f"Unreadable end_date: {end!r}")
    logger.debug("Date range %s .. %s", start_dt, end_dt)
    return DateRange(start=start_dt, end=end_dt)

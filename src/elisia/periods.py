"""Reporting period resolution and Sunday-aligned week bucketing.

The upstream contribution API only answers for whole Sunday to Saturday
weeks, so every requested range is widened to the weeks that cover it and
the results are later trimmed back to the range the caller asked for.
All dates are UTC calendar days and a resolved range never includes the
current, still incomplete day.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from .models import DateRange, Period, WeeklyWindow

log = logging.getLogger(__name__)

DEFAULT_CUSTOM_DAYS = 7
MAX_CUSTOM_DAYS = 366


def utc_today(now: Optional[datetime] = None) -> date:
    """Return the UTC calendar day for ``now`` (naive values are taken as UTC)."""

    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def most_recent_sunday(day: date) -> date:
    return day - timedelta(days=(day.weekday() + 1) % 7)


def next_saturday(day: date) -> date:
    return day + timedelta(days=(5 - day.weekday()) % 7)


def _first_of_previous_month(day: date) -> date:
    last_of_previous = day.replace(day=1) - timedelta(days=1)
    return last_of_previous.replace(day=1)


def resolve_period(
    period: Period | str | None,
    custom_days: Optional[int] = None,
    *,
    now: Optional[datetime] = None,
    max_custom_days: int = MAX_CUSTOM_DAYS,
) -> DateRange:
    """Translate a reporting period selector into a concrete date range.

    Unknown selectors fall back to the current week. A missing, non-positive
    or oversized ``custom_days`` (more than ``max_custom_days``) falls back
    to the seven days ending yesterday. Both fallbacks are logged rather
    than raised.
    """

    today = utc_today(now)
    yesterday = today - timedelta(days=1)
    week_start = most_recent_sunday(today)
    selected = Period.parse(period)
    if selected is None:
        log.warning("Unknown reporting period %r, using %s", period, Period.CURRENT_WEEK.value)
        selected = Period.CURRENT_WEEK

    end = yesterday
    if selected is Period.CURRENT_WEEK:
        start = week_start
    elif selected is Period.LAST_WEEK:
        start = week_start - timedelta(days=7)
        end = start + timedelta(days=6)
    elif selected is Period.LAST_2_WEEKS:
        start = yesterday - timedelta(days=13)
    elif selected is Period.LAST_3_WEEKS:
        start = yesterday - timedelta(days=20)
    elif selected is Period.CURRENT_MONTH:
        start = today.replace(day=1)
    elif selected is Period.LAST_MONTH:
        start = _first_of_previous_month(today)
        end = today.replace(day=1) - timedelta(days=1)
    else:
        valid = isinstance(custom_days, int) and not isinstance(custom_days, bool)
        days = custom_days if valid and 0 < custom_days <= max_custom_days else None
        if days is None:
            log.warning("Invalid customDays %r, using %d days", custom_days, DEFAULT_CUSTOM_DAYS)
            days = DEFAULT_CUSTOM_DAYS
        start = yesterday - timedelta(days=days - 1)

    # First day of a week or month: nothing has completed yet.
    if start > end:
        start = end
    resolved = DateRange(start, end)
    log.debug("Resolved period %s to %s..%s", selected.value, *resolved.as_strings())
    return resolved


def expand_weekly_windows(date_range: DateRange) -> List[WeeklyWindow]:
    """Return consecutive Sunday-aligned weeks covering ``date_range``."""

    last_day = next_saturday(date_range.end)
    window = WeeklyWindow(most_recent_sunday(date_range.start))
    windows: List[WeeklyWindow] = []
    while window.start <= last_day:
        windows.append(window)
        window = window.next()
    return windows


__all__ = [
    "DEFAULT_CUSTOM_DAYS",
    "MAX_CUSTOM_DAYS",
    "expand_weekly_windows",
    "most_recent_sunday",
    "next_saturday",
    "resolve_period",
    "utc_today",
]

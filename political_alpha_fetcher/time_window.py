"""Timestamp parsing and the trailing 24-hour window filter."""

import calendar
import logging
import re
import time
from datetime import datetime, timedelta, timezone

from dateutil import parser as dtparse

from .models import Item, UnknownTimestampPolicy

logger = logging.getLogger(__name__)

WINDOW = timedelta(hours=24)

_DEFAULT_A = datetime(1900, 1, 1)
_DEFAULT_B = datetime(1901, 2, 2)

_RELATIVE_AGE_RE = re.compile(r"(\d+)\s+(minutes?|hours?|days?)\s+ago", re.IGNORECASE)


def parse_timestamp(value: str | time.struct_time | None) -> datetime | None:
    """Parse a source timestamp into an aware UTC datetime.

    Accepts RFC 822 (RSS pubDate), ISO 8601, Twitter's created_at format
    and feedparser's struct_time. Naive values are taken as UTC.

    Args:
        value: Raw timestamp

    Returns:
        Aware UTC datetime, or None when the value is missing, unparseable
        or lacks a full calendar date
    """
    if value is None:
        return None
    if isinstance(value, time.struct_time):
        return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    value = value.strip()
    if not value:
        return None
    try:
        parsed = dtparse.parse(value, default=_DEFAULT_A)
        # Any date part filled in from the default differs between the two parses.
        other = dtparse.parse(value, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        logger.debug("Unparseable timestamp %r", value)
        return None
    if parsed.date() != other.date():
        logger.debug("Incomplete timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_relative_age(text: str, now: datetime) -> datetime | None:
    """Resolve the first "N minutes/hours/days ago" marker in text.

    Args:
        text: Text that may contain a relative age marker
        now: Reference instant

    Returns:
        now minus the age, or None when no marker is present
    """
    match = _RELATIVE_AGE_RE.search(text)
    if not match:
        return None
    amount = int(match.group(1))
    unit = match.group(2).lower()
    if unit.startswith("minute"):
        delta = timedelta(minutes=amount)
    elif unit.startswith("hour"):
        delta = timedelta(hours=amount)
    else:
        delta = timedelta(days=amount)
    return now - delta


def filter_window(
    items: list[Item],
    now: datetime,
    unknown_policy: UnknownTimestampPolicy,
    window: timedelta = WINDOW,
) -> list[Item]:
    """Keep items dated within [now - window, now].

    Args:
        items: Candidate items
        now: Reference instant
        unknown_policy: "include" keeps undated items, "exclude" drops them
        window: Length of the trailing window

    Returns:
        Items satisfying the window, in their original order
    """
    cutoff = now - window
    kept = []
    for item in items:
        if item.timestamp is None:
            if unknown_policy == "include":
                kept.append(item)
        elif cutoff <= item.timestamp <= now:
            kept.append(item)
    return kept

"""Payload extraction for Political Alpha Fetcher.

An extraction pattern is a pure function ``(payload, now) -> list[Item] | None``.
Returning None means the pattern's structure is absent from the payload;
returning an empty list means the structure is present but holds no items.
The Extractor tries patterns in a fixed priority order and the first pattern
that yields items wins, so lower-priority patterns never double-count.
"""

import io
import logging
import re
from collections.abc import Callable, Sequence
from datetime import datetime

import feedparser

from .models import Item
from .text import normalize_text
from .time_window import parse_timestamp

logger = logging.getLogger(__name__)

Pattern = Callable[[str, datetime], list[Item] | None]

# Errors a pattern may hit on malformed input. They mean "structure absent".
_PATTERN_ERRORS = (ValueError, KeyError, TypeError, AttributeError, IndexError)


class Extractor:
    """Ordered cascade of extraction patterns for one payload or segment.

    Attributes:
        patterns: Patterns in priority order
        stop_on_empty: If True, a pattern that recognises its structure but
            yields no items is authoritative and later patterns are skipped
    """

    def __init__(self, patterns: Sequence[Pattern], stop_on_empty: bool = False) -> None:
        self.patterns = list(patterns)
        self.stop_on_empty = stop_on_empty

    def extract(self, payload: str, now: datetime) -> list[Item] | None:
        """Run the cascade over a payload.

        Args:
            payload: Raw markup, JSON or XML
            now: Reference instant for relative timestamps

        Returns:
            Items from the first productive pattern, an empty list when a
            pattern recognised the payload without yielding items, or None
            when no pattern recognised it. Never raises.
        """
        recognised = False
        for pattern in self.patterns:
            try:
                result = pattern(payload, now)
            except _PATTERN_ERRORS as e:
                logger.debug("Pattern %s failed: %s", _name(pattern), e)
                continue
            if result is None:
                continue
            if result:
                return result
            recognised = True
            if self.stop_on_empty:
                break
        return [] if recognised else None

    def extract_segments(self, segments: Sequence[str], now: datetime) -> list[Item] | None:
        """Run the cascade independently over each segment of a payload.

        Args:
            segments: Payload pieces, e.g. one per article block
            now: Reference instant

        Returns:
            Concatenated items in segment order, or None when no segment was
            recognised by any pattern
        """
        items: list[Item] = []
        recognised = False
        for segment in segments:
            result = self.extract(segment, now)
            if result is not None:
                recognised = True
                items.extend(result)
        return items if recognised else None


def _name(pattern: Pattern) -> str:
    func = getattr(pattern, "func", pattern)
    return getattr(func, "__name__", repr(func))


def parse_feed_entries(
    payload: str,
    now: datetime,
    source: str,
    text_fields: Sequence[str] = ("title",),
) -> list[Item] | None:
    """Parse an RSS/Atom document with feedparser.

    Args:
        payload: Feed XML
        now: Unused, kept for the pattern signature
        source: Item.source for the produced items
        text_fields: Entry fields to try for the item text, in order

    Returns:
        Items in feed order, or None when the payload is not a feed
    """
    feed = feedparser.parse(io.BytesIO(payload.encode("utf-8")))
    if not feed.entries and (feed.bozo or not feed.version):
        return None

    items = []
    for entry in feed.entries:
        text = ""
        for name in text_fields:
            text = normalize_text(_entry_field(entry, name))
            if text:
                break
        if not text:
            continue
        timestamp = parse_timestamp(entry.get("published_parsed") or entry.get("updated_parsed"))
        if timestamp is None:
            timestamp = parse_timestamp(entry.get("published") or entry.get("updated"))
        items.append(
            Item(source=source, text=text, timestamp=timestamp, link=entry.get("link") or None)
        )
    return items


def _entry_field(entry: feedparser.FeedParserDict, name: str) -> str:
    if name == "content":
        content = entry.get("content") or []
        return content[0].get("value", "") if content else ""
    return entry.get(name) or ""


_ITEM_BLOCK_RE = re.compile(r"<item\b[^>]*>([\s\S]*?)</item>", re.IGNORECASE)


def _tag_text(block: str, tag: str) -> str:
    match = re.search(rf"<{tag}\b[^>]*>([\s\S]*?)</{tag}>", block, re.IGNORECASE)
    return match.group(1) if match else ""


def parse_item_blocks(
    payload: str,
    now: datetime,
    source: str,
    text_fields: Sequence[str] = ("title",),
) -> list[Item] | None:
    """Pull <item> blocks out of RSS markup that feedparser rejected.

    Args:
        payload: Raw, possibly broken RSS markup
        now: Unused, kept for the pattern signature
        source: Item.source for the produced items
        text_fields: Child tags to try for the item text, in order

    Returns:
        Items in document order, or None when no <item> block exists
    """
    blocks = _ITEM_BLOCK_RE.findall(payload)
    if not blocks:
        return None

    items = []
    for block in blocks:
        text = ""
        for name in text_fields:
            text = normalize_text(_tag_text(block, name))
            if text:
                break
        if not text:
            continue
        link = normalize_text(_tag_text(block, "link")) or None
        items.append(
            Item(
                source=source,
                text=text,
                timestamp=parse_timestamp(normalize_text(_tag_text(block, "pubDate"))),
                link=link,
            )
        )
    return items

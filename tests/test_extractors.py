"""Tests for the extraction cascade and shared RSS patterns."""

from datetime import datetime, timezone
from functools import partial

import pytest

from political_alpha_fetcher.extractors import (
    Extractor,
    parse_feed_entries,
    parse_item_blocks,
)
from political_alpha_fetcher.models import Item

NOW = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Search results</title>
    <item>
      <title>Lawmakers and their stock trades</title>
      <link>https://example.com/a</link>
      <pubDate>Mon, 19 Oct 2026 06:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Senator sells bank shares</title>
      <link>https://example.com/b</link>
    </item>
  </channel>
</rss>
"""

EMPTY_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel><title>Nothing</title></channel></rss>
"""

BROKEN_FEED = """<rss><channel>
<item><title>Pelosi discloses &amp; trades</title><pubDate>Mon, 19 Oct 2026 07:00:00 GMT</pubDate></item>
<item><title>Unclosed & broken</title>
</channel>"""


def items_pattern(*texts: str):
    def pattern(payload: str, now: datetime) -> list[Item] | None:
        return [Item(source="test", text=text) for text in texts]

    return pattern


def none_pattern(payload: str, now: datetime) -> list[Item] | None:
    return None


def empty_pattern(payload: str, now: datetime) -> list[Item] | None:
    return []


def raising_pattern(payload: str, now: datetime) -> list[Item] | None:
    raise KeyError("props")


class TestExtractorCascade:
    """Test Extractor priority order."""

    def test_first_productive_pattern_wins(self) -> None:
        """Lower-priority patterns must not contribute once one matches."""
        extractor = Extractor([items_pattern("first"), items_pattern("second")])

        result = extractor.extract("payload", NOW)

        assert [i.text for i in result] == ["first"]

    def test_skips_patterns_that_do_not_apply(self) -> None:
        extractor = Extractor([none_pattern, items_pattern("fallback")])

        result = extractor.extract("payload", NOW)

        assert [i.text for i in result] == ["fallback"]

    def test_empty_result_falls_through_by_default(self) -> None:
        extractor = Extractor([empty_pattern, items_pattern("html")])

        result = extractor.extract("payload", NOW)

        assert [i.text for i in result] == ["html"]

    def test_empty_result_is_authoritative_with_stop_on_empty(self) -> None:
        second = items_pattern("html")
        extractor = Extractor([empty_pattern, second], stop_on_empty=True)

        assert extractor.extract("payload", NOW) == []

    def test_returns_none_when_nothing_recognised(self) -> None:
        extractor = Extractor([none_pattern, none_pattern])

        assert extractor.extract("payload", NOW) is None

    def test_pattern_errors_do_not_propagate(self) -> None:
        """Malformed payloads must never make the extractor raise."""
        extractor = Extractor([raising_pattern, items_pattern("ok")])

        result = extractor.extract("payload", NOW)

        assert [i.text for i in result] == ["ok"]

    def test_extract_segments_cascades_per_segment(self) -> None:
        """Each segment picks its own pattern without double-counting."""

        def bold(segment: str, now: datetime) -> list[Item] | None:
            return [Item(source="t", text=f"bold {segment}")] if "**" in segment else None

        def plain(segment: str, now: datetime) -> list[Item] | None:
            return [Item(source="t", text=f"plain {segment}")]

        extractor = Extractor([bold, plain])

        result = extractor.extract_segments(["**a**", "b"], NOW)

        assert [i.text for i in result] == ["bold **a**", "plain b"]

    def test_extract_segments_none_when_no_segment_recognised(self) -> None:
        extractor = Extractor([none_pattern])

        assert extractor.extract_segments(["a", "b"], NOW) is None


class TestParseFeedEntries:
    """Test parse_feed_entries."""

    def test_parses_rss_items(self) -> None:
        result = parse_feed_entries(RSS_FEED, NOW, source="Google News")

        assert len(result) == 2
        assert result[0].text == "Lawmakers and their stock trades"
        assert result[0].timestamp == datetime(2026, 10, 19, 6, 0, tzinfo=timezone.utc)
        assert result[0].link == "https://example.com/a"
        assert result[0].source == "Google News"
        assert result[1].timestamp is None

    def test_well_formed_empty_feed_is_recognised(self) -> None:
        assert parse_feed_entries(EMPTY_FEED, NOW, source="Google News") == []

    @pytest.mark.parametrize(
        "payload",
        ["", "<html><body><p>Rate limited</p></body></html>", "Service Unavailable"],
    )
    def test_non_feed_payload_is_not_recognised(self, payload: str) -> None:
        assert parse_feed_entries(payload, NOW, source="Google News") is None


class TestParseItemBlocks:
    """Test parse_item_blocks."""

    def test_extracts_items_from_broken_markup(self) -> None:
        result = parse_item_blocks(BROKEN_FEED, NOW, source="Google News")

        assert len(result) == 1
        assert result[0].text == "Pelosi discloses & trades"
        assert result[0].timestamp == datetime(2026, 10, 19, 7, 0, tzinfo=timezone.utc)

    def test_no_item_blocks(self) -> None:
        assert parse_item_blocks("<html></html>", NOW, source="x") is None

    def test_uses_text_fields_in_order(self) -> None:
        payload = "<item><description>Desc text</description><title>Title</title></item>"

        result = parse_item_blocks(payload, NOW, source="x", text_fields=("description", "title"))

        assert result[0].text == "Desc text"


class TestRssCascade:
    """Test the feedparser-then-regex cascade used by RSS handlers."""

    def test_structured_parse_preferred(self) -> None:
        extractor = Extractor(
            [
                partial(parse_feed_entries, source="s"),
                partial(parse_item_blocks, source="s"),
            ],
            stop_on_empty=True,
        )

        result = extractor.extract(RSS_FEED, NOW)

        assert len(result) == 2

    def test_malformed_payload_yields_none_never_raises(self) -> None:
        extractor = Extractor(
            [
                partial(parse_feed_entries, source="s"),
                partial(parse_item_blocks, source="s"),
            ]
        )

        assert extractor.extract("\x00\x01 not xml <<<", NOW) is None

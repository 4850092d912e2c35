"""Google News RSS search handler."""

from datetime import datetime
from functools import partial
from urllib.parse import quote_plus

from ..extractors import Extractor, parse_feed_entries, parse_item_blocks
from ..models import Item
from .base import BaseHandler

SOURCE = "Google News"


class GoogleNewsHandler(BaseHandler):
    """Handler for one Google News RSS search query.

    Headlines without a parseable pubDate cannot be checked for staleness
    and are dropped. A well-formed feed with no entries is authoritative,
    so the regex fallback only runs when feedparser rejects the document.
    """

    SEARCH_URL = "https://news.google.com/rss/search"
    ACCEPT = "application/rss+xml, application/xml, text/xml"
    source = SOURCE
    unknown_timestamp_policy = "exclude"
    requires_structure = True
    max_items = 10

    def __init__(self, query: str, **kwargs) -> None:
        """Initialize GoogleNewsHandler.

        Args:
            query: Search terms, e.g. "congress stock trading disclosure"
        """
        super().__init__(**kwargs)
        self.query = query
        self.name = f"google_news:{query}"
        self._extractor = Extractor(
            [
                partial(parse_feed_entries, source=SOURCE, text_fields=("title",)),
                partial(parse_item_blocks, source=SOURCE, text_fields=("title",)),
            ],
            stop_on_empty=True,
        )

    def build_url(self) -> str:
        return (
            f"{self.SEARCH_URL}?q={quote_plus(self.query)}+when:1d"
            "&hl=en-US&gl=US&ceid=US:en"
        )

    def extract(self, payload: str, now: datetime) -> list[Item] | None:
        return self._extractor.extract(payload, now)

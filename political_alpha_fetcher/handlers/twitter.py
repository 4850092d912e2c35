"""Twitter/X handlers: the public syndication timeline and RSS bridges.

The syndication timeline is a server-rendered page. Its embedded
``__NEXT_DATA__`` JSON carries dated tweets; when that blob is missing the
handler falls back to the page's paragraphs, which carry no dates.
RSS bridges (RSSHub, Nitter and friends) re-publish the same timeline as a
feed and are tried one after another when the syndication page fails.
"""

import json
from datetime import datetime
from functools import partial

from bs4 import BeautifulSoup

from ..extractors import Extractor, parse_feed_entries, parse_item_blocks
from ..models import Item
from ..text import normalize_text
from ..time_window import parse_timestamp
from .base import BaseHandler

MIN_PARAGRAPH_LENGTH = 30

RSS_BRIDGES = {
    "rsshub": "https://rsshub.app/twitter/user/{handle}",
    "bloat": "https://rss.bloat.cat/{handle}/rss",
    "nitter": "https://nitter.privacydev.net/{handle}/rss",
    "twiiit": "https://twiiit.com/{handle}/rss",
}


def twitter_source(handle: str) -> str:
    return f"Twitter @{handle}"


def parse_next_data_tweets(payload: str, now: datetime, handle: str) -> list[Item] | None:
    """Read tweets from the page's embedded __NEXT_DATA__ JSON.

    Args:
        payload: Syndication page HTML
        now: Unused, kept for the pattern signature
        handle: Account handle the page belongs to

    Returns:
        Dated tweets in timeline order, or None when the blob is missing
    """
    soup = BeautifulSoup(payload, "html.parser")
    tag = soup.find("script", id="__NEXT_DATA__")
    if not tag or not tag.string:
        return None

    data = json.loads(tag.string)
    entries = data["props"]["pageProps"]["timeline"]["entries"]

    items = []
    for entry in entries:
        tweet = (entry.get("content") or {}).get("tweet")
        if not tweet:
            continue
        text = normalize_text(tweet.get("full_text") or tweet.get("text"))
        if not text:
            continue
        status_id = tweet.get("id_str")
        items.append(
            Item(
                source=twitter_source(handle),
                text=text,
                timestamp=parse_timestamp(tweet.get("created_at")),
                link=f"https://x.com/{handle}/status/{status_id}" if status_id else None,
            )
        )
    return items


def parse_paragraph_tweets(payload: str, now: datetime, handle: str) -> list[Item] | None:
    """Treat long <p> paragraphs of the page as undated tweets."""
    soup = BeautifulSoup(payload, "html.parser")
    paragraphs = soup.find_all("p")
    if not paragraphs:
        return None

    items = []
    for paragraph in paragraphs:
        text = normalize_text(paragraph.get_text(" "))
        if len(text) > MIN_PARAGRAPH_LENGTH:
            items.append(Item(source=twitter_source(handle), text=text))
    return items


class TwitterSyndicationHandler(BaseHandler):
    """Handler for the public syndication timeline of one account.

    The page is a live snapshot: paragraph-extracted tweets have no date and
    are kept. An empty embedded timeline is taken as authoritative for this
    page and the paragraph fallback is skipped.
    """

    URL = "https://syndication.twitter.com/srv/timeline-profile/screen-name/{handle}"
    unknown_timestamp_policy = "include"
    requires_structure = True
    max_items = 5

    def __init__(self, handle: str, **kwargs) -> None:
        """Initialize TwitterSyndicationHandler.

        Args:
            handle: Account handle without the leading @
        """
        super().__init__(**kwargs)
        self.handle = handle
        self.name = f"twitter_syndication:{handle}"
        self.source = twitter_source(handle)
        self._extractor = Extractor(
            [
                partial(parse_next_data_tweets, handle=handle),
                partial(parse_paragraph_tweets, handle=handle),
            ],
            stop_on_empty=True,
        )

    def build_url(self) -> str:
        return self.URL.format(handle=self.handle)

    def extract(self, payload: str, now: datetime) -> list[Item] | None:
        return self._extractor.extract(payload, now)


class RssBridgeHandler(BaseHandler):
    """Handler for one RSS bridge instance mirroring an account's timeline.

    Entries without a pubDate cannot be checked for staleness and are
    dropped.
    """

    ACCEPT = "application/rss+xml, application/xml, text/xml"
    unknown_timestamp_policy = "exclude"
    requires_structure = True

    def __init__(self, handle: str, bridge: str, **kwargs) -> None:
        """Initialize RssBridgeHandler.

        Args:
            handle: Account handle without the leading @
            bridge: Key into RSS_BRIDGES

        Raises:
            KeyError: If the bridge is unknown
        """
        super().__init__(**kwargs)
        self.handle = handle
        self.bridge = bridge
        self._url_template = RSS_BRIDGES[bridge]
        self.name = f"rss_bridge:{bridge}:{handle}"
        self.source = twitter_source(handle)
        fields = ("summary", "content", "title")
        self._extractor = Extractor(
            [
                partial(parse_feed_entries, source=self.source, text_fields=fields),
                partial(parse_item_blocks, source=self.source, text_fields=("description", "title")),
            ],
            stop_on_empty=True,
        )

    def build_url(self) -> str:
        return self._url_template.format(handle=self.handle)

    def extract(self, payload: str, now: datetime) -> list[Item] | None:
        return self._extractor.extract(payload, now)

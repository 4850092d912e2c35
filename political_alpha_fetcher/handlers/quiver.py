"""QuiverQuant news page handlers for congressional and insider filings.

Both pages are automated news listings. Each listing is split into one
segment per filing and every segment is run through its own pattern cascade,
so a filing matched by the markdown-styled pattern is never counted again by
the plain-text pattern.
"""

import re
from datetime import datetime

from ..extractors import Extractor
from ..models import Item, to_transaction_type
from ..text import normalize_text
from ..time_window import parse_relative_age
from .base import BaseHandler

CONGRESS_SOURCE = "QuiverQuant Congress"
INSIDERS_SOURCE = "QuiverQuant Insiders"

_CONGRESS_MARKER = "Congress Trade:"
_POLITICIAN_RE = re.compile(
    r"(?:Representative|Senator)\s+([\w\s.,'-]+?)\s+Just Disclosed", re.IGNORECASE
)
_BOLD_TRADE_RE = re.compile(r"\*\*?(Purchase|Sale)\*\*?\s+of\s+\[\$(\w+)\]", re.IGNORECASE)
_PLAIN_TRADE_RE = re.compile(r"(Purchase|Sale)\s+of\s+\$(\w+)", re.IGNORECASE)

_INSIDER_SPLIT_RE = re.compile(r"(?=Insider\s+(?:Purchase|Sale):)", re.IGNORECASE)
_INSIDER_FULL_RE = re.compile(
    r"^Insider\s+(Purchase|Sale):\s+([\w\s&]+?)\s+of\s+\$(\w+)\s+(?:Buys|Sells)\s+([\d,]+)\s+Shares",
    re.IGNORECASE,
)
_INSIDER_HEADLINE_RE = re.compile(
    r"^Insider\s+(Purchase|Sale):\s+([\w\s&]+?)\s+of\s+\$(\w+)", re.IGNORECASE
)


def _congress_trades(
    segment: str, now: datetime, trade_re: re.Pattern, plain: bool
) -> list[Item] | None:
    text = normalize_text(segment)
    name_match = _POLITICIAN_RE.search(text)
    politician = name_match.group(1).strip() if name_match else "Unknown"
    timestamp = parse_relative_age(text, now)

    matches = list(trade_re.finditer(text if plain else segment))
    if not matches:
        return None

    items = []
    for match in matches:
        transaction = to_transaction_type(match.group(1))
        ticker = match.group(2).upper()
        items.append(
            Item(
                source=CONGRESS_SOURCE,
                text=f"Congress STOCK Act Filing: {transaction} ${ticker} by {politician}",
                timestamp=timestamp,
                entity_name=politician,
                ticker=ticker,
                transaction_type=transaction,
            )
        )
    return items


def parse_bold_congress_trades(segment: str, now: datetime) -> list[Item] | None:
    """Match '**Purchase** of [$TICKER]' entries in a filing segment."""
    return _congress_trades(segment, now, _BOLD_TRADE_RE, plain=False)


def parse_plain_congress_trades(segment: str, now: datetime) -> list[Item] | None:
    """Match 'Purchase of $TICKER' entries in a filing segment's plain text."""
    return _congress_trades(segment, now, _PLAIN_TRADE_RE, plain=True)


def parse_full_insider_headline(segment: str, now: datetime) -> list[Item] | None:
    """Match 'Insider Sale: CEO of $X Sells 1,000 Shares' headlines."""
    match = _INSIDER_FULL_RE.search(segment)
    if not match:
        return None
    transaction = to_transaction_type(match.group(1))
    entity = match.group(2).strip()
    ticker = match.group(3).upper()
    shares = match.group(4)
    return [
        Item(
            source=INSIDERS_SOURCE,
            text=f"Corporate Insider {transaction} ${ticker}: {shares} shares by {entity}",
            timestamp=parse_relative_age(segment, now),
            entity_name=entity,
            ticker=ticker,
            transaction_type=transaction,
            raw_amount=f"{shares} shares",
        )
    ]


def parse_insider_headline(segment: str, now: datetime) -> list[Item] | None:
    """Match insider headlines that carry no share count."""
    match = _INSIDER_HEADLINE_RE.search(segment)
    if not match:
        return None
    transaction = to_transaction_type(match.group(1))
    entity = match.group(2).strip()
    ticker = match.group(3).upper()
    return [
        Item(
            source=INSIDERS_SOURCE,
            text=f"Corporate Insider {transaction} ${ticker} by {entity}",
            timestamp=parse_relative_age(segment, now),
            entity_name=entity,
            ticker=ticker,
            transaction_type=transaction,
        )
    ]


class QuiverCongressHandler(BaseHandler):
    """Handler for QuiverQuant's automated congress trade news listing.

    The listing has no reliable per-filing date beyond "N hours ago" markers,
    so undated filings are kept. An unrecognised page yields an empty result
    rather than a failure.
    """

    name = "quiver_congress"
    source = CONGRESS_SOURCE
    URL = "https://www.quiverquant.com/news/category/congress_trades_automated"
    MAX_FILINGS = 15
    unknown_timestamp_policy = "include"
    requires_structure = False

    _segment_extractor = Extractor([parse_bold_congress_trades, parse_plain_congress_trades])

    def build_url(self) -> str:
        return self.URL

    def extract(self, payload: str, now: datetime) -> list[Item] | None:
        if _CONGRESS_MARKER not in payload:
            return None
        # First split piece is page chrome before the first filing.
        segments = payload.split(_CONGRESS_MARKER)[1 : self.MAX_FILINGS + 1]
        return self._segment_extractor.extract_segments(segments, now) or []


class QuiverInsidersHandler(BaseHandler):
    """Handler for QuiverQuant's automated insider trading news listing."""

    name = "quiver_insiders"
    source = INSIDERS_SOURCE
    URL = "https://www.quiverquant.com/news/category/insiders_automated"
    unknown_timestamp_policy = "include"
    requires_structure = False

    _segment_extractor = Extractor([parse_full_insider_headline, parse_insider_headline])

    def build_url(self) -> str:
        return self.URL

    def extract(self, payload: str, now: datetime) -> list[Item] | None:
        text = normalize_text(payload)
        segments = [s for s in _INSIDER_SPLIT_RE.split(text) if s.lower().startswith("insider")]
        if not segments:
            return None
        return self._segment_extractor.extract_segments(segments, now) or []

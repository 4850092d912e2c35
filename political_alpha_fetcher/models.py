"""Data models for Political Alpha Fetcher.

This module defines the core data structures used throughout the application:
- Item: A single normalized signal (post, filing, headline)
- SourceError: Error information for a failed strategy attempt
- FetchOutcome: Explicit result of one strategy attempt
- ChainResult: Result of running one logical source's fallback chain
- RunResult: Merged, deduplicated output of a whole run
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

TransactionType = Literal["BUY", "SELL"]
UnknownTimestampPolicy = Literal["include", "exclude"]
ErrorType = Literal[
    "connection_error", "timeout", "http_error", "rate_limit", "parse_error"
]


def to_transaction_type(word: str) -> TransactionType:
    """Map a filing verb (Purchase/Sale, Buys/Sells) to BUY or SELL.

    Args:
        word: Verb as it appears in the filing text

    Returns:
        "BUY" for purchase-like words, "SELL" otherwise
    """
    return "BUY" if word.lower() in ("purchase", "buy", "buys") else "SELL"


@dataclass
class Item:
    """Represents a single normalized signal.

    Attributes:
        source: Logical source and sub-handle (e.g. "Twitter @pelositracker")
        text: Markup-free, whitespace-normalized content
        timestamp: UTC instant the item refers to, None when unknown
        entity_name: Politician or insider name (structured sources only)
        ticker: Stock ticker symbol (structured sources only)
        transaction_type: BUY or SELL (structured sources only)
        raw_amount: Amount as reported, e.g. "12,000 shares"
        link: Permalink to the original post, when the source exposes one
    """

    source: str
    text: str
    timestamp: datetime | None = None
    entity_name: str | None = None
    ticker: str | None = None
    transaction_type: TransactionType | None = None
    raw_amount: str | None = None
    link: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "source": self.source,
            "text": self.text,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "entity_name": self.entity_name,
            "ticker": self.ticker,
            "transaction_type": self.transaction_type,
            "raw_amount": self.raw_amount,
            "link": self.link,
        }


class SourceError(Exception):
    """Error for a failed strategy attempt.

    Attributes:
        source: The strategy or logical source that failed
        error_type: Category of the error
        message: Human-readable error description
    """

    def __init__(self, source: str, error_type: ErrorType, message: str) -> None:
        self.source = source
        self.error_type = error_type
        self.message = message
        super().__init__(message)


class GatherTimeoutError(Exception):
    """Raised when a whole run exceeds its deadline.

    Partially gathered results are discarded.
    """


@dataclass
class FetchOutcome:
    """Result of a single strategy attempt.

    Attributes:
        strategy: Name of the strategy that was attempted
        items: Items produced (empty on failure or on a valid empty answer)
        error: The failure, None when the endpoint answered successfully
    """

    strategy: str
    items: list[Item] = field(default_factory=list)
    error: SourceError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def empty(self) -> bool:
        return not self.failed and not self.items


@dataclass
class ChainResult:
    """Result of running one logical source's fallback chain.

    Attributes:
        label: Logical source label
        items: Items from the strategy that answered
        exhausted: True when every attempted strategy failed
        attempts: Outcomes in the order the strategies were tried
    """

    label: str
    items: list[Item] = field(default_factory=list)
    exhausted: bool = False
    attempts: list[FetchOutcome] = field(default_factory=list)


@dataclass
class RunResult:
    """Output of a whole gathering run.

    Attributes:
        items: Deduplicated items in source-completion order
        source_errors: Labels of logical sources that exhausted their chains
        fetched_at: The instant used for window filtering
    """

    items: list[Item]
    source_errors: list[str]
    fetched_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "items": [item.to_dict() for item in self.items],
            "source_errors": list(self.source_errors),
            "fetched_at": self.fetched_at.isoformat(),
        }

    def analysis_lines(self) -> list[str]:
        """Render items as numbered snippets for the analysis step.

        Items without their own timestamp are labeled with the fetch date
        rather than given an invented instant.

        Returns:
            One line per item, e.g. "[1] (Google News, 2026-10-19): ..."
        """
        lines = []
        for index, item in enumerate(self.items, start=1):
            if item.timestamp is not None:
                when = item.timestamp.date().isoformat()
            else:
                when = f"as of {self.fetched_at.date().isoformat()}"
            lines.append(f"[{index}] ({item.source}, {when}): {item.text}")
        return lines

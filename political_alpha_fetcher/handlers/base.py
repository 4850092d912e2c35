"""Base handler interface for source strategies."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime

import requests

from ..config import BROWSER_USER_AGENT, DEFAULT_REQUEST_TIMEOUT_SECONDS
from ..models import Item, SourceError, UnknownTimestampPolicy
from ..time_window import filter_window

logger = logging.getLogger(__name__)


class BaseHandler(ABC):
    """Abstract base class for source strategies.

    A handler performs one network fetch, runs the payload through its
    extraction patterns and the 24-hour window, and returns the items.
    Subclasses declare how undated items are treated and whether an
    unrecognised payload counts as a failure.
    """

    name: str = "base"
    source: str = ""
    ACCEPT = "text/html"
    unknown_timestamp_policy: UnknownTimestampPolicy = "exclude"
    requires_structure = True
    max_items: int | None = None

    def __init__(self, timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS) -> None:
        """Initialize the handler.

        Args:
            timeout: Request timeout in seconds
        """
        self._timeout = timeout

    @abstractmethod
    def build_url(self) -> str:
        """Return the URL this strategy fetches."""

    @abstractmethod
    def extract(self, payload: str, now: datetime) -> list[Item] | None:
        """Extract candidate items from a raw payload.

        Args:
            payload: Response body
            now: Reference instant

        Returns:
            Items, an empty list for a recognised but empty payload, or None
            when the payload matched no extraction pattern
        """

    def headers(self) -> dict[str, str]:
        return {"User-Agent": BROWSER_USER_AGENT, "Accept": self.ACCEPT}

    def fetch(self, now: datetime) -> list[Item]:
        """Fetch, extract and window-filter items.

        Args:
            now: Reference instant for window filtering

        Returns:
            Items within the window (possibly empty)

        Raises:
            SourceError: On transport failure, timeout, non-success status,
                or an unrecognised payload when structure is required
        """
        url = self.build_url()
        logger.debug("[%s] GET %s", self.name, url)

        try:
            response = requests.get(url, headers=self.headers(), timeout=self._timeout)
        except requests.Timeout as e:
            raise SourceError(source=self.name, error_type="timeout", message=str(e)) from e
        except requests.RequestException as e:
            raise SourceError(
                source=self.name, error_type="connection_error", message=str(e)
            ) from e

        if response.status_code == 429:
            raise SourceError(
                source=self.name,
                error_type="rate_limit",
                message=f"{self.name} rate limit exceeded",
            )
        if not 200 <= response.status_code < 300:
            raise SourceError(
                source=self.name,
                error_type="http_error",
                message=f"HTTP {response.status_code}",
            )

        candidates = self.extract(response.text, now)
        if candidates is None:
            if self.requires_structure:
                raise SourceError(
                    source=self.name,
                    error_type="parse_error",
                    message="Response matched no extraction pattern",
                )
            candidates = []

        items = filter_window(candidates, now, self.unknown_timestamp_policy)
        if self.max_items is not None:
            items = items[: self.max_items]
        logger.debug(
            "[%s] %d candidates, %d within window", self.name, len(candidates), len(items)
        )
        return items

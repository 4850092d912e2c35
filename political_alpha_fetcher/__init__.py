"""Political Alpha Fetcher.

Gathers congressional filings, insider filings, news headlines and posts
from unreliable public sources into one deduplicated, 24-hour result.
"""

from .models import GatherTimeoutError, Item, RunResult, SourceError
from .signal_fetcher import SignalFetcher

__all__ = ["GatherTimeoutError", "Item", "RunResult", "SignalFetcher", "SourceError"]

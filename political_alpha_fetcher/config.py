"""Configuration for Political Alpha Fetcher.

This module provides run configuration read from environment variables,
with defaults suitable for both local runs and Lambda deployment.
"""

import os
from dataclasses import dataclass, field


@dataclass
class FetcherConfig:
    """Gathering run configuration.

    Attributes:
        request_timeout: Timeout in seconds for each outbound request
        run_timeout: Deadline in seconds for a whole run (None = no deadline)
        max_workers: Worker pool cap (None = one worker per logical source)
        twitter_handles: Accounts tracked through Twitter strategies
        news_queries: Google News search queries, one logical source each
        dedup_prefix_length: Characters of text forming the dedup key
    """

    request_timeout: float = 10.0
    run_timeout: float | None = 60.0
    max_workers: int | None = None
    twitter_handles: list[str] = field(default_factory=list)
    news_queries: list[str] = field(default_factory=list)
    dedup_prefix_length: int = 55


def _get_number(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _get_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [part.strip() for part in raw.split(",") if part.strip()]
    return list(dict.fromkeys(parts))


def get_fetcher_config() -> FetcherConfig:
    """Get run configuration from environment variables.

    Environment Variables:
        REQUEST_TIMEOUT_SECONDS: Per-request timeout (default: 10)
        RUN_TIMEOUT_SECONDS: Whole-run deadline, 0 disables (default: 60)
        MAX_WORKERS: Worker pool cap (default: one per source)
        TWITTER_HANDLES: Comma-separated account handles (repeats ignored)
        NEWS_QUERIES: Comma-separated Google News queries (repeats ignored)
        DEDUP_PREFIX_LENGTH: Dedup key length (default: 55)

    Returns:
        FetcherConfig instance

    Raises:
        ValueError: If a numeric variable is not a number
    """
    run_timeout = _get_number("RUN_TIMEOUT_SECONDS", DEFAULT_RUN_TIMEOUT_SECONDS)
    max_workers = _get_number("MAX_WORKERS", 0)

    return FetcherConfig(
        request_timeout=_get_number("REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS),
        run_timeout=run_timeout if run_timeout > 0 else None,
        max_workers=int(max_workers) if max_workers > 0 else None,
        twitter_handles=_get_list("TWITTER_HANDLES", DEFAULT_TWITTER_HANDLES),
        news_queries=_get_list("NEWS_QUERIES", DEFAULT_NEWS_QUERIES),
        dedup_prefix_length=int(_get_number("DEDUP_PREFIX_LENGTH", DEDUP_PREFIX_LENGTH)),
    )


# Request settings
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_RUN_TIMEOUT_SECONDS = 60.0
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/125.0.0.0 Safari/537.36"
)

# Sources
DEFAULT_TWITTER_HANDLES = ["pelositracker", "capitol2iq", "QuiverQuant", "unusual_whales"]
DEFAULT_NEWS_QUERIES = [
    "congress stock trading disclosure",
    "politician insider trading stocks",
]

# Dedup settings
DEDUP_PREFIX_LENGTH = 55

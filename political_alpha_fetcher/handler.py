"""Lambda handler for Political Alpha Fetcher.

This is the entry point for the Lambda function that gathers trading
signals from external sources (QuiverQuant, Google News, Twitter) and
returns them for the downstream analysis step.
"""

import logging
import os
from typing import Any

from .config import get_fetcher_config
from .signal_fetcher import SignalFetcher
from .sources import build_default_chains

logger = logging.getLogger("political_alpha_fetcher")
logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())


def _create_signal_fetcher() -> SignalFetcher:
    """Create and configure the SignalFetcher instance."""
    config = get_fetcher_config()
    return SignalFetcher(
        chains=build_default_chains(config),
        max_workers=config.max_workers,
        run_timeout=config.run_timeout,
        prefix_length=config.dedup_prefix_length,
    )


# Global fetcher instance for Lambda warm starts
_fetcher: SignalFetcher | None = None


def _get_fetcher() -> SignalFetcher:
    """Get or create the SignalFetcher instance."""
    global _fetcher
    if _fetcher is None:
        _fetcher = _create_signal_fetcher()
    return _fetcher


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point for a gathering run.

    Args:
        event: Lambda event containing request parameters:
            - sources: Optional list of logical source labels to run
              (a single label string is also accepted)
        context: Lambda context (unused)

    Returns:
        Response with items, source errors and the analysis input lines,
        or error information when the run itself failed
    """
    sources = (event or {}).get("sources")
    if isinstance(sources, str):
        sources = [sources]

    try:
        fetcher = _get_fetcher()
        result = fetcher.fetch(sources=sources)
    except Exception as e:
        logger.exception("Gathering run failed")
        return {
            "items": [],
            "source_errors": [],
            "errors": [
                {
                    "source": "system",
                    "error_type": "internal_error",
                    "message": str(e),
                }
            ],
        }

    response = result.to_dict()
    response["analysis_input"] = result.analysis_lines()
    return response

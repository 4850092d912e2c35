"""Default logical sources and their fallback chains."""

from .config import FetcherConfig
from .fallback import ChainEntry, FallbackChain
from .handlers.google_news import GoogleNewsHandler
from .handlers.quiver import (
    CONGRESS_SOURCE,
    INSIDERS_SOURCE,
    QuiverCongressHandler,
    QuiverInsidersHandler,
)
from .handlers.twitter import (
    RSS_BRIDGES,
    RssBridgeHandler,
    TwitterSyndicationHandler,
    twitter_source,
)


def news_label(query: str) -> str:
    return f"Google News: {query}"


def build_twitter_chain(handle: str, timeout: float) -> FallbackChain:
    """Build the chain for one tracked account.

    The syndication page and the RSS bridges are distinct providers, so an
    empty syndication timeline still lets the bridges answer. The bridges all
    mirror the same timeline, so the first healthy bridge is authoritative
    even when it has nothing from the last 24 hours.

    Args:
        handle: Account handle without the leading @
        timeout: Request timeout in seconds

    Returns:
        FallbackChain labeled "Twitter @handle"
    """
    entries = [
        ChainEntry(TwitterSyndicationHandler(handle, timeout=timeout), empty_is_terminal=False)
    ]
    for bridge in RSS_BRIDGES:
        entries.append(
            ChainEntry(RssBridgeHandler(handle, bridge, timeout=timeout), empty_is_terminal=True)
        )
    return FallbackChain(twitter_source(handle), entries)


def build_default_chains(config: FetcherConfig) -> list[FallbackChain]:
    """Build every configured logical source.

    Args:
        config: Run configuration

    Returns:
        Chains for congress filings, insider filings, one per distinct news
        query and one per distinct tracked account
    """
    timeout = config.request_timeout
    chains = [
        FallbackChain(CONGRESS_SOURCE, [ChainEntry(QuiverCongressHandler(timeout=timeout))]),
        FallbackChain(INSIDERS_SOURCE, [ChainEntry(QuiverInsidersHandler(timeout=timeout))]),
    ]
    for query in dict.fromkeys(config.news_queries):
        chains.append(
            FallbackChain(news_label(query), [ChainEntry(GoogleNewsHandler(query, timeout=timeout))])
        )
    for handle in dict.fromkeys(config.twitter_handles):
        chains.append(build_twitter_chain(handle, timeout))
    return chains

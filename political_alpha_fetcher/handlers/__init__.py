"""Source strategies for Political Alpha Fetcher.

This module provides one handler per physical endpoint:
- QuiverCongressHandler / QuiverInsidersHandler: QuiverQuant filing listings
- GoogleNewsHandler: Google News RSS search
- TwitterSyndicationHandler: Twitter syndication timeline
- RssBridgeHandler: RSS bridges re-publishing a Twitter timeline
"""

from .base import BaseHandler
from .google_news import GoogleNewsHandler
from .quiver import QuiverCongressHandler, QuiverInsidersHandler
from .twitter import RssBridgeHandler, TwitterSyndicationHandler

__all__ = [
    "BaseHandler",
    "GoogleNewsHandler",
    "QuiverCongressHandler",
    "QuiverInsidersHandler",
    "RssBridgeHandler",
    "TwitterSyndicationHandler",
]

"""Market context sources for the news blackout."""

from .models import MarketContext, NewsEvent
from .provider import MarketContextProvider, StaticMarketContextProvider

__all__ = [
    "MarketContext",
    "MarketContextProvider",
    "NewsEvent",
    "StaticMarketContextProvider",
]

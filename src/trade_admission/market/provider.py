"""Market context provider interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from trade_admission.market.models import NewsEvent


class MarketContextProvider(ABC):
    """Abstract source of upcoming economic events.

    Implementations may fail or hang; callers bound the call with a timeout
    and degrade to a warning on failure.
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def fetch_events(self, start: datetime, end: datetime) -> list[NewsEvent]:
        """Fetch events scheduled between start and end.

        Raises:
            MarketContextUnavailableError: If the source cannot be reached.
        """
        pass


class StaticMarketContextProvider(MarketContextProvider):
    """Serves a fixed list of events, for tests and offline use."""

    def __init__(self, events: list[NewsEvent] | None = None):
        super().__init__(name="static")
        self._events = list(events or [])

    async def fetch_events(self, start: datetime, end: datetime) -> list[NewsEvent]:
        return [event for event in self._events if start <= event.time <= end]

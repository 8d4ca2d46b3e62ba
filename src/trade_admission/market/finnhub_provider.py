"""Economic calendar provider backed by the Finnhub API."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from trade_admission.config.settings import FinnhubConfig
from trade_admission.errors import MarketContextUnavailableError
from trade_admission.market.models import NewsEvent
from trade_admission.market.provider import MarketContextProvider


logger = logging.getLogger(__name__)


COUNTRY_CURRENCIES = {
    "US": "USD",
    "EU": "EUR",
    "GB": "GBP",
    "UK": "GBP",
    "JP": "JPY",
    "AU": "AUD",
    "CA": "CAD",
    "NZ": "NZD",
    "CH": "CHF",
    "CN": "CNY",
}


def currency_for_country(country: Optional[str]) -> str:
    """Map a Finnhub country code to its currency, defaulting to USD."""
    return COUNTRY_CURRENCIES.get((country or "").upper(), "USD")


def map_impact(impact: Any) -> str:
    """Map a Finnhub impact value (number or label) to high/medium/low."""
    if isinstance(impact, (int, float)):
        if impact >= 3:
            return "high"
        if impact >= 2:
            return "medium"
        return "low"

    label = str(impact).lower()
    if "high" in label or label == "3":
        return "high"
    if "medium" in label or label == "2":
        return "medium"
    return "low"


def parse_event_time(value: Any) -> datetime:
    """Parse a Finnhub event time given as epoch seconds or "YYYY-MM-DD HH:MM:SS" UTC."""
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)

    parsed = datetime.fromisoformat(str(value).replace(" ", "T").replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class FinnhubCalendarProvider(MarketContextProvider):
    """Fetches upcoming economic events from Finnhub.

    The HTTP client can be injected; otherwise one is created per call and
    closed afterwards.
    """

    def __init__(
        self,
        config: FinnhubConfig,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 3.0,
    ):
        super().__init__(name="finnhub")
        self._config = config
        self._client = client
        self._timeout = timeout

    async def fetch_events(self, start: datetime, end: datetime) -> list[NewsEvent]:
        if not self._config.api_key:
            raise MarketContextUnavailableError("FINNHUB_API_KEY not configured")

        params = {
            "from": start.date().isoformat(),
            "to": end.date().isoformat(),
            "token": self._config.api_key,
        }
        url = f"{self._config.base_url}/calendar/economic"

        try:
            if self._client is not None:
                response = await self._client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            raise MarketContextUnavailableError(f"Error fetching economic calendar: {e}") from e

        if response.status_code != 200:
            raise MarketContextUnavailableError(
                f"Economic calendar returned status {response.status_code}"
            )

        data = response.json()
        events = self._parse_events(data.get("economicCalendar", []))
        return [event for event in events if start <= event.time <= end]

    def _parse_events(self, items: list[dict]) -> list[NewsEvent]:
        """Parse Finnhub calendar entries, skipping malformed ones."""
        events = []
        for item in items:
            try:
                events.append(
                    NewsEvent(
                        name=item.get("event") or "Economic Event",
                        currency=currency_for_country(item.get("country")),
                        impact=map_impact(item.get("impact")),
                        time=parse_event_time(item["time"]),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed calendar entry: {e}")
        return events

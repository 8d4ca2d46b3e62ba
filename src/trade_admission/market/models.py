"""Data models for market context consumed by the news blackout."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class NewsEvent:
    """A scheduled economic event.

    Attributes:
        name: Event name (e.g., "Non-Farm Payrolls").
        currency: Affected currency code (e.g., "USD").
        impact: Impact label: "high", "medium" or "low".
        time: Scheduled release time (timezone-aware).
    """

    name: str
    currency: str
    impact: str
    time: datetime


@dataclass(frozen=True)
class MarketContext:
    """Upcoming events available to the rules.

    Attributes:
        events: Known upcoming events, possibly stale.
        available: False when the event source could not be reached.
        error: Description of the failure when unavailable.
    """

    events: tuple[NewsEvent, ...] = field(default_factory=tuple)
    available: bool = True
    error: str | None = None

    @classmethod
    def unavailable(cls, error: str) -> "MarketContext":
        """Context for an event source that failed or timed out."""
        return cls(events=(), available=False, error=error)

"""Trade validation models, aggregation and the validator."""

from .models import (
    AccountSnapshot,
    AccountStatus,
    AuditRecord,
    DailyBehaviorStats,
    Direction,
    NewsWindow,
    OpenPosition,
    TradeRequest,
    TradingHoursWindow,
    ValidationResult,
)

__all__ = [
    "AccountSnapshot",
    "AccountStatus",
    "AuditRecord",
    "DailyBehaviorStats",
    "Direction",
    "NewsWindow",
    "OpenPosition",
    "TradeRequest",
    "TradingHoursWindow",
    "ValidationResult",
]

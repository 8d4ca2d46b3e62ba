"""Data models for trade validation."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Direction(str, Enum):
    """Trade direction enumeration."""

    LONG = "long"
    SHORT = "short"


class AccountStatus(str, Enum):
    """Lifecycle status of a funded or evaluation account."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    FAILED = "failed"
    PASSED = "passed"


@dataclass(frozen=True)
class TradingHoursWindow:
    """Allowed trading session in UTC.

    Attributes:
        start: Session start as "HH:MM".
        end: Session end as "HH:MM". A start later than the end is an
            overnight window.
        enabled: Whether the window is enforced.
    """

    start: str
    end: str
    enabled: bool = True


@dataclass(frozen=True)
class AccountSnapshot:
    """Read-only view of one trading account at validation time.

    Percentages are expressed in percent units (5.0 means 5%).
    Optional numeric limits set to None are not enforced.
    """

    account_id: str
    current_equity: float
    daily_drawdown_limit_pct: float
    max_drawdown_limit_pct: float
    daily_drawdown_used_pct: float = 0.0
    max_drawdown_used_pct: float = 0.0
    max_risk_per_trade_pct: float | None = None
    status: AccountStatus = AccountStatus.ACTIVE
    failure_reason: str | None = None
    trading_locked_until: datetime | None = None
    lock_reason: str | None = None
    news_trading_allowed: bool = True
    weekend_holding_allowed: bool = True
    hedging_allowed: bool = True
    martingale_allowed: bool = True
    stop_loss_required: bool = False
    require_checklist_before_trading: bool = False
    hard_block_correlation: bool = False
    max_lot_size: float | None = None
    max_open_trades: int | None = None
    max_open_lots: float | None = None
    min_stop_loss_pips: float | None = None
    max_correlated_exposure_pct: float | None = None
    consistency_rule_pct: float | None = None
    current_profit: float = 0.0
    current_risk_multiplier: float = 1.0
    scaling_week: int = 1
    recovery_mode_active: bool = False
    allowed_trading_hours: TradingHoursWindow | None = None
    prohibited_instruments: frozenset[str] = frozenset()
    news_buffer_minutes: int | None = None

    @property
    def daily_drawdown_remaining_pct(self) -> float:
        return self.daily_drawdown_limit_pct - self.daily_drawdown_used_pct

    @property
    def max_drawdown_remaining_pct(self) -> float:
        return self.max_drawdown_limit_pct - self.max_drawdown_used_pct


@dataclass(frozen=True)
class TradeRequest:
    """A proposed trade.

    Attributes:
        symbol: Instrument symbol, e.g. "EURUSD".
        direction: LONG or SHORT.
        entry_price: Proposed entry price.
        stop_loss: Stop-loss price, None if the trade has no stop.
        take_profit_levels: Optional take-profit prices.
        requested_risk_pct: Risk the trader asks for, in percent of equity.
    """

    symbol: str
    direction: Direction
    entry_price: float
    stop_loss: float | None
    take_profit_levels: tuple[float, ...] = ()
    requested_risk_pct: float = 1.0


@dataclass(frozen=True)
class OpenPosition:
    """A position currently open on the account."""

    symbol: str
    direction: Direction
    lot_size: float


@dataclass(frozen=True)
class DailyBehaviorStats:
    """Per-account behaviour for one calendar day.

    Attributes:
        consecutive_losses: Losing trades in a row today.
        last_loss_at: When the most recent loss was realized.
        daily_pnl: Realized profit/loss for the day.
        checklist_completed_at: When the pre-trade checklist was completed.
    """

    consecutive_losses: int = 0
    last_loss_at: datetime | None = None
    daily_pnl: float = 0.0
    checklist_completed_at: datetime | None = None


@dataclass(frozen=True)
class NewsWindow:
    """The news event that blocked a trade."""

    event: str
    time: datetime


@dataclass
class ValidationResult:
    """Decision for a single trade request.

    Attributes:
        allowed: True when no blocker was raised.
        blockers: Hard failures; any entry denies the trade.
        warnings: Soft notices that do not deny the trade.
        requested_lot_size: Lot size from sizing, before any rule reduced it.
        adjusted_lot_size: Final lot size, present only when allowed.
        max_allowed_lot_size: Largest lot size the rules permit.
        risk_amount: Money at risk for the sized trade.
        daily_drawdown_remaining_pct: Daily drawdown room left.
        max_drawdown_remaining_pct: Lifetime drawdown room left.
    """

    allowed: bool
    blockers: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    requested_lot_size: float = 0.0
    adjusted_lot_size: float | None = None
    max_allowed_lot_size: float = 0.0
    risk_amount: float = 0.0
    daily_drawdown_remaining_pct: float = 0.0
    max_drawdown_remaining_pct: float = 0.0
    effective_risk_pct: float = 0.0
    stop_distance_pips: float = 0.0
    news_window: NewsWindow | None = None
    recovery_mode_active: bool = False
    cooling_off_active: bool = False
    cooling_off_ends_at: datetime | None = None
    circuit_breaker_active: bool = False
    locked_until: datetime | None = None
    checklist_required: bool = False

    @classmethod
    def denied(cls, reason: str, **flags: Any) -> "ValidationResult":
        """Build a deny response with a single blocker and zeroed metrics."""
        return cls(allowed=False, blockers=[reason], warnings=[], **flags)

    def to_dict(self) -> dict[str, Any]:
        """Render the result as a JSON-compatible dictionary."""
        return {
            "allowed": self.allowed,
            "blockers": list(self.blockers),
            "warnings": list(self.warnings),
            "requested_lot_size": self.requested_lot_size,
            "adjusted_lot_size": self.adjusted_lot_size,
            "max_allowed_lot_size": self.max_allowed_lot_size,
            "risk_amount": self.risk_amount,
            "daily_drawdown_remaining_pct": self.daily_drawdown_remaining_pct,
            "max_drawdown_remaining_pct": self.max_drawdown_remaining_pct,
            "effective_risk_pct": self.effective_risk_pct,
            "stop_distance_pips": self.stop_distance_pips,
            "news_window": (
                {"event": self.news_window.event, "time": self.news_window.time.isoformat()}
                if self.news_window
                else None
            ),
            "recovery_mode_active": self.recovery_mode_active,
            "cooling_off_active": self.cooling_off_active,
            "cooling_off_ends_at": (
                self.cooling_off_ends_at.isoformat() if self.cooling_off_ends_at else None
            ),
            "circuit_breaker_active": self.circuit_breaker_active,
            "locked_until": self.locked_until.isoformat() if self.locked_until else None,
            "checklist_required": self.checklist_required,
        }


@dataclass(frozen=True)
class AuditRecord:
    """Append-only record of one validation decision."""

    account_id: str
    request: dict[str, Any]
    result: dict[str, Any]
    timestamp: datetime

"""Base types shared by all rule evaluators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone

from trade_admission.market.models import MarketContext
from trade_admission.risk.risk_budget import RiskBudget
from trade_admission.sizing.position_sizer import SizingResult
from trade_admission.validation.models import (
    AccountSnapshot,
    DailyBehaviorStats,
    NewsWindow,
    OpenPosition,
    TradeRequest,
)


@dataclass(frozen=True)
class EvaluationContext:
    """Everything a rule may read besides the account and the request.

    Attributes:
        now: Evaluation time (timezone-aware, UTC).
        open_positions: Positions open on the account.
        daily_stats: Today's behaviour stats, None if none recorded.
        daily_stats_available: False when the stats store failed.
        market_context: Upcoming events, None when not fetched.
        budget: Risk budget, filled in by the validator.
        sizing: Sized position, None when sizing failed.
        sizing_error: Why sizing failed.
    """

    now: datetime
    open_positions: tuple[OpenPosition, ...] = ()
    daily_stats: DailyBehaviorStats | None = None
    daily_stats_available: bool = True
    market_context: MarketContext | None = None
    budget: RiskBudget | None = None
    sizing: SizingResult | None = None
    sizing_error: str | None = None

    @property
    def lot_size(self) -> float:
        return self.sizing.lot_size if self.sizing else 0.0

    @property
    def risk_amount(self) -> float:
        return self.sizing.risk_amount if self.sizing else 0.0


@dataclass
class EvaluationOutcome:
    """Contribution of one rule to the decision.

    Attributes:
        rule: Name of the rule that produced the outcome.
        blockers: Hard failures.
        warnings: Soft notices.
        size_cap: Upper bound on the lot size, None if the rule sets none.
    """

    rule: str
    blockers: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    size_cap: float | None = None
    cooling_off_ends_at: datetime | None = None
    locked_until: datetime | None = None
    news_window: NewsWindow | None = None
    checklist_required: bool = False

    @property
    def blocked(self) -> bool:
        return bool(self.blockers)


class RuleEvaluator(ABC):
    """Abstract base class for all rule evaluators.

    Rules are independent: each inspects the account, the request and the
    context and reports blockers, warnings and an optional lot-size cap.
    Terminal rules end the evaluation as soon as they block.
    """

    name: str = "rule"
    terminal: bool = False

    @abstractmethod
    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        """Evaluate the rule.

        Args:
            account: Snapshot of the account.
            request: The proposed trade.
            context: Positions, stats, market context and sizing.

        Returns:
            EvaluationOutcome for this rule.
        """
        pass

    def outcome(self, **kwargs) -> EvaluationOutcome:
        return EvaluationOutcome(rule=self.name, **kwargs)


def to_utc(timestamp: datetime) -> datetime:
    """Return the timestamp in UTC, treating naive values as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)

"""Ordered registry of rule evaluators."""

from trade_admission.config.settings import Settings
from trade_admission.risk.correlation import CorrelationCalculator
from trade_admission.rules.account_gates import ChecklistGate, CircuitBreaker, StatusGate
from trade_admission.rules.base import RuleEvaluator
from trade_admission.rules.consistency import ConsistencyRuleProjector, ScalingPlanNotice
from trade_admission.rules.news_blackout import NewsBlackoutRule
from trade_admission.rules.position_rules import (
    CorrelationExposureRule,
    HedgingRule,
    MartingaleDetector,
    OpenPositionLimitsRule,
    PerTradeConstraintsRule,
    ProhibitedInstrumentsRule,
)
from trade_admission.rules.session_rules import (
    PsychologyCooldownRule,
    TradingHoursRule,
    WeekendHoldingRule,
)
from trade_admission.sizing.instruments import InstrumentTable


class RuleRegistry:
    """Holds rule evaluators in evaluation order.

    Terminal gates run first; the remaining rules are independent and their
    order only affects the order of messages in the result.
    """

    def __init__(self, rules: list[RuleEvaluator] | None = None):
        self._rules: list[RuleEvaluator] = list(rules or [])

    def register(self, rule: RuleEvaluator) -> None:
        """Append a rule to the registry."""
        self._rules.append(rule)

    @property
    def gates(self) -> list[RuleEvaluator]:
        return [rule for rule in self._rules if rule.terminal]

    @property
    def rules(self) -> list[RuleEvaluator]:
        return [rule for rule in self._rules if not rule.terminal]

    def names(self) -> list[str]:
        return [rule.name for rule in self._rules]

    def __len__(self) -> int:
        return len(self._rules)

    @classmethod
    def from_settings(cls, settings: Settings, instruments: InstrumentTable) -> "RuleRegistry":
        """Build the standard rule set from settings."""
        correlation = CorrelationCalculator(
            instruments, contract_multiplier=settings.correlation.contract_multiplier
        )
        return cls(
            [
                StatusGate(),
                ChecklistGate(),
                CircuitBreaker(),
                TradingHoursRule(),
                PsychologyCooldownRule(
                    consecutive_losses_threshold=settings.cooldown.consecutive_losses_threshold,
                    cooldown_minutes=settings.cooldown.cooldown_minutes,
                ),
                PerTradeConstraintsRule(min_lot_size=settings.sizing.min_lot_size),
                OpenPositionLimitsRule(lot_step=settings.sizing.lot_step),
                HedgingRule(),
                ProhibitedInstrumentsRule(),
                MartingaleDetector(),
                NewsBlackoutRule(
                    default_buffer_minutes=settings.news.default_buffer_minutes,
                    high_impact_label=settings.news.high_impact_label,
                ),
                WeekendHoldingRule(friday_cutoff_hour_utc=settings.weekend.friday_cutoff_hour_utc),
                CorrelationExposureRule(
                    correlation,
                    default_max_exposure_pct=settings.correlation.default_max_exposure_pct,
                    block_min_positions=settings.correlation.block_min_positions,
                ),
                ConsistencyRuleProjector(
                    reward_multiple=settings.consistency.reward_multiple,
                    warning_ratio=settings.consistency.warning_ratio,
                ),
                ScalingPlanNotice(),
            ]
        )

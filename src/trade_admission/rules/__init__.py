"""Rule evaluators for trade admission."""

from .account_gates import ChecklistGate, CircuitBreaker, StatusGate
from .base import EvaluationContext, EvaluationOutcome, RuleEvaluator
from .consistency import ConsistencyRuleProjector, ScalingPlanNotice
from .news_blackout import NewsBlackoutRule
from .position_rules import (
    CorrelationExposureRule,
    HedgingRule,
    MartingaleDetector,
    OpenPositionLimitsRule,
    PerTradeConstraintsRule,
    ProhibitedInstrumentsRule,
)
from .registry import RuleRegistry
from .session_rules import PsychologyCooldownRule, TradingHoursRule, WeekendHoldingRule

__all__ = [
    "ChecklistGate",
    "CircuitBreaker",
    "ConsistencyRuleProjector",
    "CorrelationExposureRule",
    "EvaluationContext",
    "EvaluationOutcome",
    "HedgingRule",
    "MartingaleDetector",
    "NewsBlackoutRule",
    "OpenPositionLimitsRule",
    "PerTradeConstraintsRule",
    "ProhibitedInstrumentsRule",
    "PsychologyCooldownRule",
    "RuleEvaluator",
    "RuleRegistry",
    "ScalingPlanNotice",
    "StatusGate",
    "TradingHoursRule",
    "WeekendHoldingRule",
]

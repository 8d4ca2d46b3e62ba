"""Tests for RuleRegistry."""

from factories import NOW, make_account, make_request
from trade_admission.config.settings import Settings
from trade_admission.rules.base import EvaluationContext, EvaluationOutcome, RuleEvaluator
from trade_admission.rules.registry import RuleRegistry
from trade_admission.sizing.instruments import InstrumentTable


class AlwaysWarn(RuleEvaluator):
    name = "always_warn"

    def evaluate(self, account, request, context) -> EvaluationOutcome:
        return self.outcome(warnings=["custom"])


class TestRuleRegistry:
    """Tests for RuleRegistry."""

    def test_standard_rule_set(self, instruments: InstrumentTable) -> None:
        """Gates come first, in a fixed order."""
        registry = RuleRegistry.from_settings(Settings(), instruments)

        assert len(registry) == 15
        assert [gate.name for gate in registry.gates] == ["status", "checklist", "circuit_breaker"]
        assert registry.names()[3] == "trading_hours"
        assert "consistency_rule" in registry.names()

    def test_register_custom_rule(self) -> None:
        """Custom rules can be appended and run."""
        registry = RuleRegistry()
        registry.register(AlwaysWarn())

        outcome = registry.rules[0].evaluate(make_account(), make_request(), EvaluationContext(now=NOW))

        assert registry.gates == []
        assert outcome.rule == "always_warn"
        assert outcome.warnings == ["custom"]

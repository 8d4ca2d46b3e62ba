"""Pure trade validation: snapshot and request in, decision out."""

from dataclasses import replace

from trade_admission.config.settings import Settings
from trade_admission.errors import InvalidStopDistanceError
from trade_admission.risk.risk_budget import RiskBudgetCalculator
from trade_admission.rules.base import EvaluationContext, EvaluationOutcome
from trade_admission.rules.registry import RuleRegistry
from trade_admission.sizing.instruments import InstrumentTable
from trade_admission.sizing.position_sizer import PositionSizer, SizingResult
from trade_admission.validation.aggregator import DecisionAggregator
from trade_admission.validation.models import AccountSnapshot, TradeRequest, ValidationResult


class TradeValidator:
    """Decides whether a trade may proceed and at what lot size.

    Holds no state between calls: everything it reads comes from the
    account snapshot, the request and the evaluation context, so identical
    inputs always produce identical results.

    Pipeline: terminal gates -> risk budget -> sizing -> rules -> aggregation.
    """

    def __init__(
        self,
        sizer: PositionSizer,
        budget_calculator: RiskBudgetCalculator,
        registry: RuleRegistry,
        aggregator: DecisionAggregator | None = None,
    ):
        self._sizer = sizer
        self._budget_calculator = budget_calculator
        self._registry = registry
        self._aggregator = aggregator or DecisionAggregator()

    @classmethod
    def from_settings(
        cls, settings: Settings, instruments: InstrumentTable | None = None
    ) -> "TradeValidator":
        """Build a validator with the standard rule set."""
        if instruments is None:
            instruments = InstrumentTable.from_yaml(settings.sizing.instruments_file)

        budget = settings.risk_budget
        return cls(
            sizer=PositionSizer(instruments, lot_step=settings.sizing.lot_step),
            budget_calculator=RiskBudgetCalculator(
                daily_budget_fraction=budget.daily_budget_fraction,
                max_budget_fraction=budget.max_budget_fraction,
                default_max_risk_per_trade_pct=budget.default_max_risk_per_trade_pct,
                recovery_risk_cap_pct=budget.recovery_risk_cap_pct,
                daily_remaining_block_pct=budget.daily_remaining_block_pct,
                max_remaining_block_pct=budget.max_remaining_block_pct,
                min_effective_risk_pct=budget.min_effective_risk_pct,
            ),
            registry=RuleRegistry.from_settings(settings, instruments),
            aggregator=DecisionAggregator(min_lot_size=settings.sizing.min_lot_size),
        )

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    def check_gates(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> tuple[ValidationResult | None, list[EvaluationOutcome]]:
        """Run the terminal gates.

        Returns:
            Tuple of (denial, gate outcomes). The denial is None when every
            gate passed.
        """
        outcomes: list[EvaluationOutcome] = []
        for gate in self._registry.gates:
            outcome = gate.evaluate(account, request, context)
            if outcome.blocked:
                return self._aggregator.gate_denial(outcome, outcomes), outcomes
            outcomes.append(outcome)
        return None, outcomes

    def validate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> ValidationResult:
        """Validate a trade against every rule.

        Args:
            account: Snapshot of the account.
            request: The proposed trade.
            context: Evaluation time, open positions, daily stats and market context.

        Returns:
            ValidationResult with the complete set of blockers and warnings.
        """
        denial, outcomes = self.check_gates(account, request, context)
        if denial is not None:
            return denial

        budget = self._budget_calculator.calculate(account, request.requested_risk_pct)

        sizing: SizingResult | None = None
        sizing_error: str | None = None
        try:
            sizing = self._sizer.size(
                account.current_equity,
                budget.effective_risk_pct,
                request.entry_price,
                request.stop_loss,
                request.symbol,
            )
        except InvalidStopDistanceError as e:
            sizing_error = str(e)

        context = replace(context, budget=budget, sizing=sizing, sizing_error=sizing_error)

        for rule in self._registry.rules:
            outcomes.append(rule.evaluate(account, request, context))

        return self._aggregator.aggregate(budget, sizing, outcomes)

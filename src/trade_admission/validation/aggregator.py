"""Combines rule outcomes into a single decision."""

from trade_admission.risk.risk_budget import RiskBudget
from trade_admission.rules.base import EvaluationOutcome
from trade_admission.sizing.position_sizer import SizingResult
from trade_admission.validation.models import ValidationResult


class DecisionAggregator:
    """Folds the risk budget, the sizing and every rule outcome into a result.

    The final lot size is the sized lot bounded by every rule's size cap.
    It is published as adjusted_lot_size only when no rule blocked. A cap
    that leaves less than min_lot_size is a blocker.
    """

    def __init__(self, min_lot_size: float = 0.01):
        self.min_lot_size = min_lot_size

    def aggregate(
        self,
        budget: RiskBudget,
        sizing: SizingResult | None,
        outcomes: list[EvaluationOutcome],
    ) -> ValidationResult:
        blockers = list(budget.blockers)
        warnings = list(budget.warnings)
        lot_size = sizing.lot_size if sizing else 0.0

        result = ValidationResult(
            allowed=False,
            recovery_mode_active=budget.recovery_mode_active,
        )

        for outcome in outcomes:
            blockers.extend(outcome.blockers)
            warnings.extend(outcome.warnings)
            if outcome.size_cap is not None:
                lot_size = min(lot_size, outcome.size_cap)
            self._apply_metadata(result, outcome)

        if sizing is not None and not blockers and lot_size < self.min_lot_size:
            blockers.append(
                f"Lot size after limits ({lot_size:.2f}) is below the minimum of {self.min_lot_size}."
            )

        result.allowed = not blockers
        result.blockers = blockers
        result.warnings = warnings
        result.requested_lot_size = sizing.lot_size if sizing else 0.0
        result.max_allowed_lot_size = lot_size
        result.adjusted_lot_size = lot_size if result.allowed else None
        result.risk_amount = sizing.risk_amount if sizing else 0.0
        result.stop_distance_pips = sizing.stop_distance_pips if sizing else 0.0
        result.effective_risk_pct = budget.effective_risk_pct
        result.daily_drawdown_remaining_pct = budget.daily_remaining_pct
        result.max_drawdown_remaining_pct = budget.max_remaining_pct
        return result

    def gate_denial(
        self, blocking: EvaluationOutcome, earlier: list[EvaluationOutcome]
    ) -> ValidationResult:
        """Build the result for a terminal gate that blocked.

        Only the gate's blocker is reported; numeric fields stay zero.
        """
        result = ValidationResult.denied(blocking.blockers[0])
        for outcome in earlier:
            result.warnings.extend(outcome.warnings)
        self._apply_metadata(result, blocking)
        return result

    @staticmethod
    def _apply_metadata(result: ValidationResult, outcome: EvaluationOutcome) -> None:
        if outcome.cooling_off_ends_at is not None:
            result.cooling_off_active = True
            result.cooling_off_ends_at = outcome.cooling_off_ends_at
        if outcome.locked_until is not None:
            result.circuit_breaker_active = True
            result.locked_until = outcome.locked_until
        if outcome.news_window is not None:
            result.news_window = outcome.news_window
        if outcome.checklist_required:
            result.checklist_required = True

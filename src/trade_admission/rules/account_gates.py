"""Terminal gates on the account's lifecycle, checklist and lock state.

A blocking gate ends the evaluation: when the account cannot trade at all,
the remaining rules and the market context fetch are skipped.
"""

from trade_admission.rules.base import EvaluationContext, EvaluationOutcome, RuleEvaluator, to_utc
from trade_admission.validation.models import AccountSnapshot, AccountStatus, TradeRequest


class StatusGate(RuleEvaluator):
    """Blocks accounts that are not active."""

    name = "status"
    terminal = True

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        if account.status == AccountStatus.ACTIVE:
            return self.outcome()

        reason = account.failure_reason or "Not active"
        return self.outcome(blockers=[f"Account is {account.status.value}: {reason}"])


class ChecklistGate(RuleEvaluator):
    """Requires today's pre-trade checklist when the account demands it."""

    name = "checklist"
    terminal = True

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        if not account.require_checklist_before_trading:
            return self.outcome()

        if not context.daily_stats_available:
            return self.outcome(warnings=["Could not verify daily checklist completion"])

        stats = context.daily_stats
        if stats is None or stats.checklist_completed_at is None:
            return self.outcome(
                blockers=[
                    "Daily checklist not completed. Complete your pre-trade checklist before trading."
                ],
                checklist_required=True,
            )

        return self.outcome()


class CircuitBreaker(RuleEvaluator):
    """Blocks trading while the account is locked."""

    name = "circuit_breaker"
    terminal = True

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        locked_until = account.trading_locked_until
        if locked_until is None or to_utc(locked_until) <= to_utc(context.now):
            return self.outcome()

        reason = account.lock_reason or "Trading temporarily paused"
        return self.outcome(
            blockers=[f"{reason} (locked until {locked_until.isoformat()})"],
            locked_until=locked_until,
        )

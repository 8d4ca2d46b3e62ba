"""Profit-consistency projection and scaling-plan notice."""

from trade_admission.rules.base import EvaluationContext, EvaluationOutcome, RuleEvaluator
from trade_admission.validation.models import AccountSnapshot, TradeRequest


class ConsistencyRuleProjector(RuleEvaluator):
    """Projects today's share of total profit if this trade wins.

    The projection assumes the trade returns reward_multiple times its risk
    amount. Crossing warning_ratio of the limit warns; crossing the limit
    blocks, since passing an evaluation on one day's profit defeats the rule.

    Attributes:
        reward_multiple: Assumed reward as a multiple of the risk amount.
        warning_ratio: Fraction of the limit at which a warning is raised.
    """

    name = "consistency_rule"

    def __init__(self, reward_multiple: float = 2.0, warning_ratio: float = 0.8):
        self.reward_multiple = reward_multiple
        self.warning_ratio = warning_ratio

    def project_contribution_pct(
        self, daily_pnl: float, risk_amount: float, current_profit: float
    ) -> float:
        projected_daily_pnl = daily_pnl + risk_amount * self.reward_multiple
        return (projected_daily_pnl / current_profit) * 100

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        limit = account.consistency_rule_pct
        if not limit or account.current_profit <= 0:
            return self.outcome()

        daily_pnl = context.daily_stats.daily_pnl if context.daily_stats else 0.0
        contribution = self.project_contribution_pct(
            daily_pnl, context.risk_amount, account.current_profit
        )

        warnings: list[str] = []
        blockers: list[str] = []
        if contribution > limit * self.warning_ratio:
            warnings.append(
                f"Approaching consistency limit: Today's profit at {contribution:.1f}% of total "
                f"(limit: {limit}%)"
            )
        if contribution > limit:
            blockers.append(
                f"Would breach consistency rule: {contribution:.1f}% of total profit in one day "
                f"(max: {limit}%). Reduce position size or wait for tomorrow."
            )

        return self.outcome(blockers=blockers, warnings=warnings)


class ScalingPlanNotice(RuleEvaluator):
    """Informs the trader that the scaling plan has reduced their risk."""

    name = "scaling_plan"

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        multiplier = account.current_risk_multiplier
        if multiplier >= 1:
            return self.outcome()

        return self.outcome(
            warnings=[
                f"Scaling plan active: Using {multiplier * 100:.0f}% of normal risk "
                f"(Week {account.scaling_week})"
            ]
        )

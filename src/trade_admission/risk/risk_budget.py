"""Drawdown-based risk budget for a single trade."""

from dataclasses import dataclass, field

from trade_admission.validation.models import AccountSnapshot


@dataclass
class RiskBudget:
    """Effective risk available for a trade.

    Attributes:
        daily_remaining_pct: Daily drawdown room left.
        max_remaining_pct: Lifetime drawdown room left.
        max_safe_risk_pct: Risk cap before the scaling multiplier.
        scaled_risk_pct: Cap after the scaling multiplier.
        effective_risk_pct: min(requested, scaled), never negative.
        recovery_mode_active: Whether the recovery ceiling was applied.
        blockers: Hard failures raised by the budget.
        warnings: Soft notices raised by the budget.
    """

    daily_remaining_pct: float
    max_remaining_pct: float
    max_safe_risk_pct: float
    scaled_risk_pct: float
    effective_risk_pct: float
    recovery_mode_active: bool = False
    blockers: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class RiskBudgetCalculator:
    """Determines how much of the remaining drawdown one trade may use.

    Safe risk is min(daily_remaining * daily_fraction,
    max_remaining * max_fraction, max_risk_per_trade). Recovery mode caps it
    further, then the scaling-plan multiplier is applied and the result is
    bounded by the requested risk. The recovery ceiling also bounds the
    scaled risk.

    Attributes:
        daily_budget_fraction: Share of the remaining daily drawdown one trade may use.
        max_budget_fraction: Share of the remaining max drawdown one trade may use.
        default_max_risk_per_trade_pct: Per-trade cap when the account sets none.
        recovery_risk_cap_pct: Risk ceiling while recovery mode is active.
        daily_remaining_block_pct: Daily room at or below which trading stops.
        max_remaining_block_pct: Max room at or below which trading stops.
        min_effective_risk_pct: Smallest effective risk worth trading.
    """

    def __init__(
        self,
        daily_budget_fraction: float = 0.5,
        max_budget_fraction: float = 0.3,
        default_max_risk_per_trade_pct: float = 2.0,
        recovery_risk_cap_pct: float = 0.5,
        daily_remaining_block_pct: float = 0.5,
        max_remaining_block_pct: float = 1.0,
        min_effective_risk_pct: float = 0.1,
    ):
        self.daily_budget_fraction = daily_budget_fraction
        self.max_budget_fraction = max_budget_fraction
        self.default_max_risk_per_trade_pct = default_max_risk_per_trade_pct
        self.recovery_risk_cap_pct = recovery_risk_cap_pct
        self.daily_remaining_block_pct = daily_remaining_block_pct
        self.max_remaining_block_pct = max_remaining_block_pct
        self.min_effective_risk_pct = min_effective_risk_pct

    def calculate(self, account: AccountSnapshot, requested_risk_pct: float) -> RiskBudget:
        """Compute the effective risk percentage for a trade.

        Args:
            account: Snapshot of the account.
            requested_risk_pct: Risk requested by the trader.

        Returns:
            RiskBudget with the effective risk and any blockers or warnings.
        """
        daily_remaining = account.daily_drawdown_remaining_pct
        max_remaining = account.max_drawdown_remaining_pct
        per_trade_cap = account.max_risk_per_trade_pct or self.default_max_risk_per_trade_pct

        max_safe_risk = min(
            daily_remaining * self.daily_budget_fraction,
            max_remaining * self.max_budget_fraction,
            per_trade_cap,
        )

        warnings: list[str] = []
        if account.recovery_mode_active:
            max_safe_risk = min(max_safe_risk, self.recovery_risk_cap_pct)
            warnings.append(
                f"Recovery Mode Active: Risk limited to {self.recovery_risk_cap_pct}% "
                "per trade to protect your account."
            )

        scaled_risk = max_safe_risk * account.current_risk_multiplier
        if account.recovery_mode_active:
            # A scaling multiplier above 1 must not lift risk past the recovery ceiling.
            scaled_risk = min(scaled_risk, self.recovery_risk_cap_pct)
        effective_risk = max(0.0, min(requested_risk_pct, scaled_risk))

        blockers: list[str] = []
        if daily_remaining <= self.daily_remaining_block_pct:
            blockers.append(
                f"Daily drawdown limit nearly reached ({account.daily_drawdown_used_pct:.2f}% of "
                f"{account.daily_drawdown_limit_pct:.2f}% used). No trades allowed until tomorrow."
            )

        if max_remaining <= self.max_remaining_block_pct:
            blockers.append(
                f"Max drawdown limit nearly reached ({account.max_drawdown_used_pct:.2f}% of "
                f"{account.max_drawdown_limit_pct:.2f}% used). Account at critical risk."
            )

        if effective_risk < self.min_effective_risk_pct:
            blockers.append("Insufficient risk budget for this trade")

        return RiskBudget(
            daily_remaining_pct=daily_remaining,
            max_remaining_pct=max_remaining,
            max_safe_risk_pct=max_safe_risk,
            scaled_risk_pct=scaled_risk,
            effective_risk_pct=effective_risk,
            recovery_mode_active=account.recovery_mode_active,
            blockers=blockers,
            warnings=warnings,
        )

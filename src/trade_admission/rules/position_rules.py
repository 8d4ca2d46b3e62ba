"""Rules on the trade's own parameters and on the account's open positions."""

import math

from trade_admission.risk.correlation import CorrelationCalculator
from trade_admission.rules.base import EvaluationContext, EvaluationOutcome, RuleEvaluator
from trade_admission.sizing.instruments import normalize_symbol
from trade_admission.validation.models import AccountSnapshot, TradeRequest


class PerTradeConstraintsRule(RuleEvaluator):
    """Checks the stop loss and the sized lot against the account's limits.

    Lots above max_lot_size are clipped to the limit with a warning rather
    than blocked.
    """

    name = "per_trade_constraints"

    def __init__(self, min_lot_size: float = 0.01):
        self.min_lot_size = min_lot_size

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        blockers: list[str] = []
        warnings: list[str] = []
        size_cap = None

        if request.stop_loss is None and account.stop_loss_required:
            blockers.append("Stop loss is required by this prop firm for all trades.")
        elif context.sizing_error:
            blockers.append(context.sizing_error)

        sizing = context.sizing
        if sizing is None:
            return self.outcome(blockers=blockers)

        if account.min_stop_loss_pips and sizing.stop_distance_pips < account.min_stop_loss_pips:
            blockers.append(
                f"Stop loss too tight ({sizing.stop_distance_pips:.1f} pips). "
                f"Minimum required: {account.min_stop_loss_pips} pips."
            )

        if sizing.lot_size < self.min_lot_size:
            blockers.append(
                f"Calculated lot size below minimum ({self.min_lot_size}). Not enough risk budget."
            )

        if account.max_lot_size and sizing.lot_size > account.max_lot_size:
            size_cap = account.max_lot_size
            warnings.append(f"Lot size reduced to firm limit of {account.max_lot_size}")

        return self.outcome(blockers=blockers, warnings=warnings, size_cap=size_cap)


class OpenPositionLimitsRule(RuleEvaluator):
    """Enforces the maximum number of open trades and open lots."""

    name = "open_position_limits"

    def __init__(self, lot_step: float = 0.01):
        self.lot_step = lot_step

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        blockers: list[str] = []
        warnings: list[str] = []
        size_cap = None
        positions = context.open_positions

        if account.max_open_trades and len(positions) >= account.max_open_trades:
            blockers.append(
                f"Max open trades reached ({len(positions)}/{account.max_open_trades}). "
                "Close a position first."
            )

        if account.max_open_lots:
            total_open_lots = sum(p.lot_size for p in positions)
            proposed = context.lot_size
            if account.max_lot_size:
                proposed = min(proposed, account.max_lot_size)

            if total_open_lots + proposed > account.max_open_lots:
                headroom = account.max_open_lots - total_open_lots
                floored = round(math.floor(round(headroom / self.lot_step, 9)) * self.lot_step, 8)
                # Headroom smaller than one lot step leaves nothing tradable.
                if floored < self.lot_step:
                    blockers.append(
                        f"Max open lots reached ({total_open_lots:.2f}/{account.max_open_lots}). "
                        "Close positions first."
                    )
                else:
                    size_cap = floored
                    warnings.append(
                        f"Lot size reduced to {size_cap:.2f} due to max open lots limit"
                    )

        return self.outcome(blockers=blockers, warnings=warnings, size_cap=size_cap)


class HedgingRule(RuleEvaluator):
    """Blocks opposite-direction trades on a symbol that is already open."""

    name = "hedging"

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        if account.hedging_allowed:
            return self.outcome()

        symbol = normalize_symbol(request.symbol)
        for position in context.open_positions:
            if normalize_symbol(position.symbol) == symbol and position.direction != request.direction:
                return self.outcome(
                    blockers=[
                        f"Hedging not allowed: Already have opposite {symbol} position open."
                    ]
                )

        return self.outcome()


class ProhibitedInstrumentsRule(RuleEvaluator):
    """Blocks symbols on the account's deny-list.

    Matching is case-insensitive and by substring in both directions, so
    "XAU" blocks "XAUUSD" and "XAUUSD" blocks "xau".
    """

    name = "prohibited_instruments"

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        symbol = request.symbol.lower()
        for prohibited in account.prohibited_instruments:
            entry = prohibited.lower()
            if entry and (entry in symbol or symbol in entry):
                return self.outcome(
                    blockers=[f"{request.symbol} is a prohibited instrument for this prop firm."]
                )

        return self.outcome()


class MartingaleDetector(RuleEvaluator):
    """Warns when adding to an open position in the same direction.

    Detection only: averaging in is a behavioural concern, not a technical
    violation, so it never blocks.
    """

    name = "martingale"

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        if account.martingale_allowed:
            return self.outcome()

        symbol = normalize_symbol(request.symbol)
        same_side = [
            p
            for p in context.open_positions
            if normalize_symbol(p.symbol) == symbol and p.direction == request.direction
        ]
        if same_side:
            return self.outcome(
                warnings=[
                    f"Warning: Adding to existing {symbol} {request.direction.value} position. "
                    "Martingale/averaging may not be allowed."
                ]
            )

        return self.outcome()


class CorrelationExposureRule(RuleEvaluator):
    """Limits same-direction exposure across correlated instruments.

    Attributes:
        default_max_exposure_pct: Limit used when the account sets none.
        block_min_positions: Correlated positions needed before the limit applies.
    """

    name = "correlation_exposure"

    def __init__(
        self,
        calculator: CorrelationCalculator,
        default_max_exposure_pct: float = 5.0,
        block_min_positions: int = 2,
    ):
        self._calculator = calculator
        self.default_max_exposure_pct = default_max_exposure_pct
        self.block_min_positions = block_min_positions

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        if not context.open_positions:
            return self.outcome()

        exposure = self._calculator.calculate(
            request.symbol,
            request.direction,
            list(context.open_positions),
            account.current_equity,
        )
        limit = account.max_correlated_exposure_pct or self.default_max_exposure_pct
        symbol = normalize_symbol(request.symbol)

        if exposure.position_count >= self.block_min_positions:
            correlated = ", ".join(exposure.symbols)
            if account.hard_block_correlation and exposure.exposure_pct >= limit:
                return self.outcome(
                    blockers=[
                        f"Correlation limit reached: Already have {correlated} in same direction "
                        f"({exposure.exposure_pct:.1f}% exposure, max: {limit}%)"
                    ]
                )
            return self.outcome(
                warnings=[
                    f"High correlation exposure: Already have {correlated} in same direction "
                    f"({exposure.exposure_pct:.1f}% exposure)"
                ]
            )

        if exposure.position_count:
            return self.outcome(
                warnings=[
                    f"Note: {symbol} is correlated with your open {', '.join(exposure.symbols)} position"
                ]
            )

        return self.outcome()

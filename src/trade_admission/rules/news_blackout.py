"""High-impact news blackout."""

from datetime import timedelta

from trade_admission.rules.base import EvaluationContext, EvaluationOutcome, RuleEvaluator, to_utc
from trade_admission.sizing.instruments import normalize_symbol
from trade_admission.validation.models import AccountSnapshot, NewsWindow, TradeRequest


def symbol_currencies(symbol: str) -> tuple[str, str]:
    """Split a six-letter pair into its base and quote currencies."""
    symbol = normalize_symbol(symbol)
    return symbol[:3], symbol[3:6]


class NewsBlackoutRule(RuleEvaluator):
    """Blocks trades shortly before high-impact events on the pair's currencies.

    An unreachable event source downgrades the rule to a warning; it never
    blocks or passes silently on infrastructure failure.

    Attributes:
        default_buffer_minutes: Look-ahead window when the account sets none.
        high_impact_label: Impact label that triggers the blackout.
    """

    name = "news_blackout"

    def __init__(self, default_buffer_minutes: int = 30, high_impact_label: str = "high"):
        self.default_buffer_minutes = default_buffer_minutes
        self.high_impact_label = high_impact_label

    def buffer_minutes(self, account: AccountSnapshot) -> int:
        return account.news_buffer_minutes or self.default_buffer_minutes

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        if account.news_trading_allowed:
            return self.outcome()

        market = context.market_context
        if market is None or not market.available:
            return self.outcome(warnings=["Could not verify news schedule"])

        currencies = symbol_currencies(request.symbol)
        buffer_minutes = self.buffer_minutes(account)
        now = to_utc(context.now)
        window_end = now + timedelta(minutes=buffer_minutes)

        upcoming = sorted(
            (
                event
                for event in market.events
                if event.currency.upper() in currencies
                and event.impact.lower() == self.high_impact_label
                and now < to_utc(event.time) < window_end
            ),
            key=lambda event: to_utc(event.time),
        )
        if not upcoming:
            return self.outcome()

        event = upcoming[0]
        minutes_until = round((to_utc(event.time) - now).total_seconds() / 60)
        return self.outcome(
            blockers=[
                f"News restriction: {event.name} for {event.currency} in {minutes_until} minutes "
                f"(buffer: {buffer_minutes}min)"
            ],
            news_window=NewsWindow(event=event.name, time=event.time),
        )

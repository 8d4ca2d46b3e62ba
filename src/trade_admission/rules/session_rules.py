"""Time-windowed rules: trading session, weekend holding and loss cooldown."""

import math
from datetime import datetime, time, timedelta

from trade_admission.rules.base import EvaluationContext, EvaluationOutcome, RuleEvaluator, to_utc
from trade_admission.validation.models import AccountSnapshot, TradeRequest


FRIDAY = 4
SATURDAY = 5
SUNDAY = 6


class TradingHoursRule(RuleEvaluator):
    """Blocks trades outside the account's allowed UTC session.

    Bounds are inclusive. A window whose start is later than its end wraps
    past midnight (e.g. 22:00-06:00).
    """

    name = "trading_hours"

    def _parse_time(self, time_str: str) -> time:
        """Parse HH:MM string to time object."""
        parts = time_str.split(":")
        return time(int(parts[0]), int(parts[1]))

    @staticmethod
    def _minute_of_day(value: time) -> int:
        return value.hour * 60 + value.minute

    def is_within_window(self, start: str, end: str, current: datetime) -> bool:
        current_minute = self._minute_of_day(to_utc(current).time())
        start_minute = self._minute_of_day(self._parse_time(start))
        end_minute = self._minute_of_day(self._parse_time(end))

        if start_minute <= end_minute:
            return start_minute <= current_minute <= end_minute
        return current_minute >= start_minute or current_minute <= end_minute

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        window = account.allowed_trading_hours
        if window is None or not window.enabled:
            return self.outcome()

        if self.is_within_window(window.start, window.end, context.now):
            return self.outcome()

        return self.outcome(
            blockers=[
                f"Outside your trading hours ({window.start} - {window.end} UTC). "
                "Wait for your session to open."
            ]
        )


class WeekendHoldingRule(RuleEvaluator):
    """Blocks new trades late on Friday and over the weekend."""

    name = "weekend_holding"

    def __init__(self, friday_cutoff_hour_utc: int = 16):
        self.friday_cutoff_hour_utc = friday_cutoff_hour_utc

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        if account.weekend_holding_allowed:
            return self.outcome()

        now = to_utc(context.now)
        weekday = now.weekday()

        if weekday == FRIDAY and now.hour >= self.friday_cutoff_hour_utc:
            return self.outcome(
                blockers=[
                    "Weekend holding not allowed. No new trades after Friday "
                    f"{self.friday_cutoff_hour_utc:02d}:00 UTC."
                ]
            )

        if weekday in (SATURDAY, SUNDAY):
            return self.outcome(
                blockers=["Weekend holding not allowed. Trading resumes Sunday night."]
            )

        return self.outcome()


class PsychologyCooldownRule(RuleEvaluator):
    """Enforces a cooling-off period after consecutive losses.

    Attributes:
        consecutive_losses_threshold: Losses in a row that start a cooldown.
        cooldown_minutes: Length of the cooldown after the last loss.
    """

    name = "psychology_cooldown"

    def __init__(self, consecutive_losses_threshold: int = 2, cooldown_minutes: int = 30):
        self.consecutive_losses_threshold = consecutive_losses_threshold
        self.cooldown_minutes = cooldown_minutes

    def evaluate(
        self,
        account: AccountSnapshot,
        request: TradeRequest,
        context: EvaluationContext,
    ) -> EvaluationOutcome:
        stats = context.daily_stats
        if stats is None:
            return self.outcome()

        losses = stats.consecutive_losses

        if losses >= self.consecutive_losses_threshold and stats.last_loss_at is not None:
            ends_at = to_utc(stats.last_loss_at) + timedelta(minutes=self.cooldown_minutes)
            now = to_utc(context.now)
            if now < ends_at:
                minutes_remaining = math.ceil((ends_at - now).total_seconds() / 60)
                return self.outcome(
                    blockers=[
                        f"Psychology Guard: Cooling-off period active. {minutes_remaining} minutes "
                        f"remaining after {losses} consecutive losses. Take a break to avoid "
                        "revenge trading."
                    ],
                    cooling_off_ends_at=ends_at,
                )

        if 1 <= losses < self.consecutive_losses_threshold:
            plural = "es" if losses > 1 else ""
            return self.outcome(
                warnings=[
                    f"Caution: You have {losses} consecutive loss{plural} today. "
                    "Consider your next trade carefully."
                ]
            )

        return self.outcome()

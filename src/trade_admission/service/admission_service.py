"""Trade admission service: fetches inputs, validates, audits."""

import asyncio
import logging
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from trade_admission.config.settings import Settings
from trade_admission.errors import AccountNotFoundError
from trade_admission.market.models import MarketContext
from trade_admission.market.provider import MarketContextProvider
from trade_admission.rules.base import EvaluationContext
from trade_admission.service.account_locks import AccountLockRegistry
from trade_admission.stores.base import AccountStore, AuditSink, DailyStatsStore
from trade_admission.validation.models import (
    AccountSnapshot,
    AuditRecord,
    DailyBehaviorStats,
    ValidationResult,
)
from trade_admission.validation.requests import ValidationRequest, describe_validation_error
from trade_admission.validation.trade_validator import TradeValidator


logger = logging.getLogger(__name__)


CommitCallback = Callable[[ValidationResult], Awaitable[None]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TradeAdmissionService:
    """Runs one trade validation end to end.

    Loads the account, its open positions, today's stats and (when the
    account restricts news trading) upcoming events, then runs the pure
    validator and writes an audit record.

    Failure handling:
    - malformed request or unknown account -> deny with a single blocker
    - account/position store failure -> deny
    - stats store or market context failure -> warning, evaluation continues
    - unexpected error -> logged and denied (fail closed)
    - audit failure -> logged, never surfaced to the caller
    """

    def __init__(
        self,
        validator: TradeValidator,
        account_store: AccountStore,
        stats_store: DailyStatsStore,
        market_provider: MarketContextProvider | None = None,
        audit_sink: AuditSink | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
        locks: AccountLockRegistry | None = None,
    ):
        self._validator = validator
        self._accounts = account_store
        self._stats = stats_store
        self._market = market_provider
        self._audit = audit_sink
        self._settings = settings or Settings()
        self._clock = clock
        self._locks = locks if locks is not None else AccountLockRegistry()

    @property
    def locks(self) -> AccountLockRegistry:
        return self._locks

    async def validate(self, payload: ValidationRequest | dict[str, Any]) -> ValidationResult:
        """Validate a trade request.

        Args:
            payload: ValidationRequest or its dictionary form.

        Returns:
            ValidationResult. Never raises for bad input or failing collaborators.
        """
        try:
            request = self._parse(payload)
        except ValidationError as e:
            reason = describe_validation_error(e)
            logger.warning(f"Rejecting malformed request: {reason}")
            return ValidationResult.denied(f"Malformed request: {reason}")

        try:
            result = await self._evaluate(request)
        except Exception:
            logger.exception(f"Validation failed for account {request.account_id}")
            result = ValidationResult.denied("Validation system error")

        logger.info(
            f"Account {request.account_id} {request.trade_request.symbol} "
            f"{request.trade_request.direction}: {'ALLOWED' if result.allowed else 'BLOCKED'} "
            f"(blockers={len(result.blockers)}, warnings={len(result.warnings)})"
        )

        await self._record_audit(request, result)
        return result

    async def admit(
        self,
        payload: ValidationRequest | dict[str, Any],
        commit: CommitCallback,
    ) -> ValidationResult:
        """Validate and, if allowed, commit while holding the account's lock.

        The commit callback records the trade's usage in the caller's storage.
        It runs only for allowed trades, before the lock is released.
        """
        try:
            request = self._parse(payload)
        except ValidationError as e:
            return ValidationResult.denied(f"Malformed request: {describe_validation_error(e)}")

        async with self._locks.hold(request.account_id):
            result = await self.validate(request)
            if result.allowed:
                await commit(result)
        return result

    @staticmethod
    def _parse(payload: ValidationRequest | dict[str, Any]) -> ValidationRequest:
        if isinstance(payload, ValidationRequest):
            return payload
        return ValidationRequest.model_validate(payload)

    async def _evaluate(self, request: ValidationRequest) -> ValidationResult:
        now = self._clock()
        account_id = request.account_id

        try:
            account = await self._accounts.get_account(account_id)
            positions = await self._accounts.get_open_positions(account_id)
        except AccountNotFoundError:
            logger.info(f"Account not found: {account_id}")
            return ValidationResult.denied("Account not found")
        except Exception as e:
            logger.error(f"Account store error for {account_id}: {e}")
            return ValidationResult.denied("Account data unavailable")

        trade = request.trade_request.to_trade_request()
        stats, stats_available = await self._load_stats(account_id, now.date())

        context = EvaluationContext(
            now=now,
            open_positions=tuple(positions),
            daily_stats=stats,
            daily_stats_available=stats_available,
        )

        result, _ = self._validator.check_gates(account, trade, context)
        if result is None:
            if not account.news_trading_allowed:
                market = await self._load_market_context(account, now)
                context = replace(context, market_context=market)
            result = self._validator.validate(account, trade, context)

        if not stats_available:
            result.warnings.append("Could not load daily trading stats")
        return result

    async def _load_stats(
        self, account_id: str, day: date
    ) -> tuple[DailyBehaviorStats | None, bool]:
        try:
            return await self._stats.get_stats(account_id, day), True
        except Exception as e:
            logger.warning(f"Daily stats unavailable for {account_id}, continuing: {e}")
            return None, False

    async def _load_market_context(self, account: AccountSnapshot, now: datetime) -> MarketContext:
        if self._market is None:
            return MarketContext.unavailable("No market context provider configured")

        buffer_minutes = account.news_buffer_minutes or self._settings.news.default_buffer_minutes
        timeout = self._settings.news.fetch_timeout_seconds

        try:
            events = await asyncio.wait_for(
                self._market.fetch_events(now, now + timedelta(minutes=buffer_minutes)),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Market context provider timed out after {timeout}s")
            return MarketContext.unavailable(f"Timed out after {timeout}s")
        except Exception as e:
            logger.warning(f"Could not check economic calendar: {e}")
            return MarketContext.unavailable(str(e))

        return MarketContext(events=tuple(events))

    async def _record_audit(self, request: ValidationRequest, result: ValidationResult) -> None:
        if self._audit is None:
            return

        record = AuditRecord(
            account_id=request.account_id,
            request=request.trade_request.model_dump(),
            result=result.to_dict(),
            timestamp=self._clock(),
        )
        try:
            await self._audit.record(record)
        except Exception as e:
            logger.error(f"Failed to write audit record for {request.account_id}: {e}")

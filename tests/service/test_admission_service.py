"""Tests for TradeAdmissionService."""

import asyncio
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from factories import NOW, make_account
from trade_admission.config.settings import NewsSettings, Settings
from trade_admission.errors import MarketContextUnavailableError
from trade_admission.market.models import NewsEvent
from trade_admission.market.provider import MarketContextProvider, StaticMarketContextProvider
from trade_admission.service.admission_service import TradeAdmissionService
from trade_admission.sizing.instruments import InstrumentTable
from trade_admission.stores.in_memory import (
    InMemoryAccountStore,
    InMemoryAuditSink,
    InMemoryDailyStatsStore,
)
from trade_admission.validation.models import (
    AccountStatus,
    DailyBehaviorStats,
    Direction,
    OpenPosition,
    ValidationResult,
)
from trade_admission.validation.trade_validator import TradeValidator


class SlowProvider(MarketContextProvider):
    """Provider that never answers in time."""

    def __init__(self):
        super().__init__(name="slow")

    async def fetch_events(self, start: datetime, end: datetime) -> list[NewsEvent]:
        await asyncio.sleep(5)
        return []


def payload(account_id: str = "acc_1", **trade) -> dict:
    request = {
        "symbol": "EURUSD",
        "direction": "long",
        "entry_price": 1.0850,
        "stop_loss": 1.0800,
        "requested_risk_pct": 1.0,
    }
    request.update(trade)
    return {"account_id": account_id, "trade_request": request}


@pytest.fixture
def settings() -> Settings:
    return Settings(news=NewsSettings(fetch_timeout_seconds=0.05))


@pytest.fixture
def validator(settings: Settings, instruments: InstrumentTable) -> TradeValidator:
    return TradeValidator.from_settings(settings, instruments)


@pytest.fixture
def accounts() -> InMemoryAccountStore:
    store = InMemoryAccountStore()
    store.put_account(make_account())
    return store


@pytest.fixture
def stats() -> InMemoryDailyStatsStore:
    return InMemoryDailyStatsStore()


@pytest.fixture
def audit() -> InMemoryAuditSink:
    return InMemoryAuditSink()


@pytest.fixture
def make_service(validator, accounts, stats, audit, settings):
    def _make(**overrides) -> TradeAdmissionService:
        kwargs = {
            "validator": validator,
            "account_store": accounts,
            "stats_store": stats,
            "audit_sink": audit,
            "settings": settings,
            "clock": lambda: NOW,
        }
        kwargs.update(overrides)
        return TradeAdmissionService(**kwargs)

    return _make


class TestValidate:
    """Tests for TradeAdmissionService.validate."""

    @pytest.mark.asyncio
    async def test_allowed_trade_audited(self, make_service, audit: InMemoryAuditSink) -> None:
        """An allowed trade is sized and recorded."""
        result = await make_service().validate(payload())

        assert result.allowed is True
        assert result.adjusted_lot_size == 2.0
        assert len(audit.records) == 1
        record = audit.records[0]
        assert record.account_id == "acc_1"
        assert record.timestamp == NOW
        assert record.request["symbol"] == "EURUSD"
        assert record.result["adjusted_lot_size"] == 2.0
        assert record.result["requested_lot_size"] == 2.0

    @pytest.mark.asyncio
    async def test_unknown_account(self, make_service) -> None:
        """Unknown accounts are denied with zeroed metrics."""
        result = await make_service().validate(payload("missing"))

        assert result.allowed is False
        assert result.blockers == ["Account not found"]
        assert result.max_allowed_lot_size == 0.0
        assert result.daily_drawdown_remaining_pct == 0.0

    @pytest.mark.asyncio
    async def test_malformed_request(self, make_service, audit: InMemoryAuditSink) -> None:
        """Malformed input is denied with one descriptive blocker and not audited."""
        result = await make_service().validate(payload(direction="sideways"))

        assert result.allowed is False
        assert len(result.blockers) == 1
        assert result.blockers[0].startswith("Malformed request: trade_request.direction")
        assert audit.records == []

    @pytest.mark.asyncio
    async def test_account_store_failure(self, make_service) -> None:
        """A failing account store denies the trade."""
        store = MagicMock()
        store.get_account = AsyncMock(side_effect=ConnectionError("db down"))

        result = await make_service(account_store=store).validate(payload())

        assert result.blockers == ["Account data unavailable"]

    @pytest.mark.asyncio
    async def test_stats_store_failure_warns(self, make_service) -> None:
        """A failing stats store degrades to a warning."""
        stats_store = MagicMock()
        stats_store.get_stats = AsyncMock(side_effect=TimeoutError("slow"))

        result = await make_service(stats_store=stats_store).validate(payload())

        assert result.allowed is True
        assert "Could not load daily trading stats" in result.warnings

    @pytest.mark.asyncio
    async def test_stats_warning_kept_on_gate_denial(
        self, make_service, accounts: InMemoryAccountStore
    ) -> None:
        """The stats warning survives a status gate denial."""
        accounts.put_account(make_account(status=AccountStatus.FAILED))
        stats_store = MagicMock()
        stats_store.get_stats = AsyncMock(side_effect=TimeoutError("slow"))

        result = await make_service(stats_store=stats_store).validate(payload())

        assert result.blockers == ["Account is failed: Not active"]
        assert result.warnings == ["Could not load daily trading stats"]

    @pytest.mark.asyncio
    async def test_stats_used_for_cooldown(self, make_service, stats: InMemoryDailyStatsStore) -> None:
        """Today's stats reach the cooldown rule."""
        stats.put_stats(
            "acc_1",
            NOW.date(),
            DailyBehaviorStats(consecutive_losses=2, last_loss_at=NOW - timedelta(minutes=10)),
        )

        result = await make_service().validate(payload())

        assert result.cooling_off_active is True

    @pytest.mark.asyncio
    async def test_unexpected_error_fails_closed(self, make_service) -> None:
        """Unexpected errors deny instead of propagating."""
        validator = MagicMock()
        validator.check_gates.return_value = (None, [])
        validator.validate.side_effect = ZeroDivisionError("boom")

        result = await make_service(validator=validator).validate(payload())

        assert result.allowed is False
        assert result.blockers == ["Validation system error"]

    @pytest.mark.asyncio
    async def test_audit_failure_swallowed(self, make_service) -> None:
        """A broken audit sink does not change the decision."""
        sink = MagicMock()
        sink.record = AsyncMock(side_effect=OSError("disk full"))

        result = await make_service(audit_sink=sink).validate(payload())

        assert result.allowed is True
        sink.record.assert_awaited_once()


class TestMarketContext:
    """Market context fetching and degradation."""

    @pytest.fixture
    def accounts(self) -> InMemoryAccountStore:
        store = InMemoryAccountStore()
        store.put_account(make_account(news_trading_allowed=False))
        return store

    @pytest.mark.asyncio
    async def test_provider_timeout_warns(self, make_service) -> None:
        """A provider that hangs is cut off and reported as a warning."""
        result = await make_service(market_provider=SlowProvider()).validate(payload())

        assert result.allowed is True
        assert "Could not verify news schedule" in result.warnings

    @pytest.mark.asyncio
    async def test_provider_error_warns(self, make_service) -> None:
        provider = MagicMock()
        provider.fetch_events = AsyncMock(side_effect=MarketContextUnavailableError("down"))

        result = await make_service(market_provider=provider).validate(payload())

        assert result.allowed is True
        assert "Could not verify news schedule" in result.warnings

    @pytest.mark.asyncio
    async def test_no_provider_warns(self, make_service) -> None:
        result = await make_service().validate(payload())

        assert "Could not verify news schedule" in result.warnings

    @pytest.mark.asyncio
    async def test_upcoming_event_blocks(self, make_service) -> None:
        """Events from the provider drive the news blackout."""
        provider = StaticMarketContextProvider(
            [NewsEvent("Non-Farm Payrolls", "USD", "high", NOW + timedelta(minutes=15))]
        )

        result = await make_service(market_provider=provider).validate(payload())

        assert result.allowed is False
        assert result.news_window.event == "Non-Farm Payrolls"

    @pytest.mark.asyncio
    async def test_fetch_window_uses_buffer(self, make_service) -> None:
        """The provider is asked for events within the buffer."""
        provider = MagicMock()
        provider.fetch_events = AsyncMock(return_value=[])

        await make_service(market_provider=provider).validate(payload())

        provider.fetch_events.assert_awaited_once_with(NOW, NOW + timedelta(minutes=30))

    @pytest.mark.asyncio
    async def test_gate_denial_skips_fetch(self, make_service, accounts: InMemoryAccountStore) -> None:
        """An account that cannot trade never triggers a calendar fetch."""
        accounts.put_account(make_account(news_trading_allowed=False, status=AccountStatus.FAILED))
        provider = MagicMock()
        provider.fetch_events = AsyncMock(return_value=[])

        result = await make_service(market_provider=provider).validate(payload())

        assert result.blockers == ["Account is failed: Not active"]
        provider.fetch_events.assert_not_awaited()


class TestNewsAllowed:
    """Accounts allowed to trade news."""

    @pytest.mark.asyncio
    async def test_provider_not_called(self, make_service) -> None:
        provider = MagicMock()
        provider.fetch_events = AsyncMock(return_value=[])

        result = await make_service(market_provider=provider).validate(payload())

        assert result.allowed is True
        provider.fetch_events.assert_not_awaited()


class TestAdmit:
    """Tests for TradeAdmissionService.admit."""

    @pytest.mark.asyncio
    async def test_commit_only_when_allowed(self, make_service) -> None:
        service = make_service()
        commit = AsyncMock()

        allowed = await service.admit(payload(), commit)
        blocked = await service.admit(payload(stop_loss=1.0850), commit)

        assert allowed.allowed is True
        assert blocked.allowed is False
        commit.assert_awaited_once_with(allowed)

    @pytest.mark.asyncio
    async def test_malformed_not_committed(self, make_service) -> None:
        commit = AsyncMock()

        result = await make_service().admit(payload(entry_price=-1), commit)

        assert result.blockers[0].startswith("Malformed request")
        commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_admissions_serialized(
        self, make_service, accounts: InMemoryAccountStore
    ) -> None:
        """The second of two racing trades sees the first one's position."""
        accounts.put_account(make_account(max_open_trades=1))
        service = make_service()

        async def commit(result: ValidationResult) -> None:
            await asyncio.sleep(0.01)
            accounts.add_position(
                "acc_1", OpenPosition("EURUSD", Direction.LONG, result.adjusted_lot_size)
            )

        results = await asyncio.gather(
            service.admit(payload(), commit),
            service.admit(payload(), commit),
        )

        assert sorted(r.allowed for r in results) == [False, True]
        denied = next(r for r in results if not r.allowed)
        assert denied.blockers == ["Max open trades reached (1/1). Close a position first."]
        assert len(await accounts.get_open_positions("acc_1")) == 1

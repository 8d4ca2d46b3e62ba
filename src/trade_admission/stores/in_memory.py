"""In-memory store implementations."""

from datetime import date

from trade_admission.errors import AccountNotFoundError
from trade_admission.stores.base import AccountStore, AuditSink, DailyStatsStore
from trade_admission.validation.models import (
    AccountSnapshot,
    AuditRecord,
    DailyBehaviorStats,
    OpenPosition,
)


class InMemoryAccountStore(AccountStore):
    """Keeps accounts and their open positions in dictionaries."""

    def __init__(self) -> None:
        self._accounts: dict[str, AccountSnapshot] = {}
        self._positions: dict[str, list[OpenPosition]] = {}

    def put_account(self, account: AccountSnapshot) -> None:
        self._accounts[account.account_id] = account

    def set_open_positions(self, account_id: str, positions: list[OpenPosition]) -> None:
        self._positions[account_id] = list(positions)

    def add_position(self, account_id: str, position: OpenPosition) -> None:
        self._positions.setdefault(account_id, []).append(position)

    async def get_account(self, account_id: str) -> AccountSnapshot:
        account = self._accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def get_open_positions(self, account_id: str) -> list[OpenPosition]:
        if account_id not in self._accounts:
            raise AccountNotFoundError(account_id)
        return list(self._positions.get(account_id, []))


class InMemoryDailyStatsStore(DailyStatsStore):
    """Keeps daily stats keyed by (account_id, date)."""

    def __init__(self) -> None:
        self._stats: dict[tuple[str, date], DailyBehaviorStats] = {}

    def put_stats(self, account_id: str, day: date, stats: DailyBehaviorStats) -> None:
        self._stats[(account_id, day)] = stats

    async def get_stats(self, account_id: str, day: date) -> DailyBehaviorStats | None:
        return self._stats.get((account_id, day))


class InMemoryAuditSink(AuditSink):
    """Collects audit records in a list."""

    def __init__(self) -> None:
        self.records: list[AuditRecord] = []

    async def record(self, record: AuditRecord) -> None:
        self.records.append(record)

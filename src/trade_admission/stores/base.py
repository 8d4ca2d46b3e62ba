"""Collaborator interfaces the engine reads from and writes to."""

from abc import ABC, abstractmethod
from datetime import date

from trade_admission.validation.models import (
    AccountSnapshot,
    AuditRecord,
    DailyBehaviorStats,
    OpenPosition,
)


class AccountStore(ABC):
    """Source of account snapshots and open positions."""

    @abstractmethod
    async def get_account(self, account_id: str) -> AccountSnapshot:
        """Fetch an account snapshot.

        Raises:
            AccountNotFoundError: If no account has this id.
        """
        pass

    @abstractmethod
    async def get_open_positions(self, account_id: str) -> list[OpenPosition]:
        """Fetch the positions open on an account (empty list if none)."""
        pass


class DailyStatsStore(ABC):
    """Source of per-day behaviour stats."""

    @abstractmethod
    async def get_stats(self, account_id: str, day: date) -> DailyBehaviorStats | None:
        """Fetch stats for an account and day, None if nothing was recorded."""
        pass


class AuditSink(ABC):
    """Append-only destination for validation decisions."""

    @abstractmethod
    async def record(self, record: AuditRecord) -> None:
        """Append one audit record."""
        pass

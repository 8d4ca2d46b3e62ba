"""Load accounts, positions and daily stats from JSON fixture files.

Fixture layout::

    {
      "accounts": [{"account_id": "acc_1", "current_equity": 100000, ...}],
      "positions": {"acc_1": [{"symbol": "EURUSD", "direction": "long", "lot_size": 1.0}]},
      "daily_stats": {"acc_1": {"consecutive_losses": 1, "last_loss_at": "..."}}
    }

Daily stats are filed under the day they are loaded for.
"""

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Optional

from trade_admission.stores.in_memory import InMemoryAccountStore, InMemoryDailyStatsStore
from trade_admission.validation.models import (
    AccountSnapshot,
    AccountStatus,
    DailyBehaviorStats,
    Direction,
    OpenPosition,
    TradingHoursWindow,
)


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def account_from_dict(data: dict[str, Any]) -> AccountSnapshot:
    """Convert a fixture dictionary to an AccountSnapshot."""
    data = dict(data)
    if "status" in data:
        data["status"] = AccountStatus(data["status"])
    if data.get("trading_locked_until"):
        data["trading_locked_until"] = _parse_datetime(data["trading_locked_until"])
    if data.get("allowed_trading_hours"):
        data["allowed_trading_hours"] = TradingHoursWindow(**data["allowed_trading_hours"])
    if "prohibited_instruments" in data:
        data["prohibited_instruments"] = frozenset(data["prohibited_instruments"])
    return AccountSnapshot(**data)


def position_from_dict(data: dict[str, Any]) -> OpenPosition:
    return OpenPosition(
        symbol=data["symbol"],
        direction=Direction(data["direction"]),
        lot_size=float(data["lot_size"]),
    )


def stats_from_dict(data: dict[str, Any]) -> DailyBehaviorStats:
    return DailyBehaviorStats(
        consecutive_losses=data.get("consecutive_losses", 0),
        last_loss_at=_parse_datetime(data.get("last_loss_at")),
        daily_pnl=data.get("daily_pnl", 0.0),
        checklist_completed_at=_parse_datetime(data.get("checklist_completed_at")),
    )


def load_fixture(
    path: Path | str, day: date
) -> tuple[InMemoryAccountStore, InMemoryDailyStatsStore]:
    """Build in-memory stores from a JSON fixture file.

    Args:
        path: Fixture file path.
        day: Day to file the daily stats under.

    Returns:
        Tuple of (account store, daily stats store).
    """
    with open(path) as f:
        data = json.load(f)

    accounts = InMemoryAccountStore()
    stats_store = InMemoryDailyStatsStore()

    for item in data.get("accounts", []):
        accounts.put_account(account_from_dict(item))

    for account_id, positions in data.get("positions", {}).items():
        accounts.set_open_positions(account_id, [position_from_dict(p) for p in positions])

    for account_id, stats in data.get("daily_stats", {}).items():
        stats_store.put_stats(account_id, day, stats_from_dict(stats))

    return accounts, stats_store

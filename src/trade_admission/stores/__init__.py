"""Account, stats and audit stores."""

from .audit_log import JsonAuditSink
from .base import AccountStore, AuditSink, DailyStatsStore
from .fixtures import account_from_dict, load_fixture
from .in_memory import InMemoryAccountStore, InMemoryAuditSink, InMemoryDailyStatsStore

__all__ = [
    "AccountStore",
    "AuditSink",
    "DailyStatsStore",
    "InMemoryAccountStore",
    "InMemoryAuditSink",
    "InMemoryDailyStatsStore",
    "JsonAuditSink",
    "account_from_dict",
    "load_fixture",
]

"""Trade admission service and per-account locking."""

from .account_locks import AccountLockRegistry
from .admission_service import TradeAdmissionService

__all__ = ["AccountLockRegistry", "TradeAdmissionService"]

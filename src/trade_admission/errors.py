"""Exceptions raised by the trade admission engine."""


class AdmissionError(Exception):
    """Base class for trade admission errors."""


class AccountNotFoundError(AdmissionError):
    """Raised when an account store has no account with the given id."""

    def __init__(self, account_id: str):
        super().__init__(f"Account not found: {account_id}")
        self.account_id = account_id


class InvalidStopDistanceError(AdmissionError):
    """Raised when a position cannot be sized from its entry and stop loss."""


class MarketContextUnavailableError(AdmissionError):
    """Raised when the economic calendar cannot be reached."""

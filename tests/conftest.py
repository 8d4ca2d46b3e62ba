"""Shared fixtures for trade admission tests."""

from datetime import datetime

import pytest

from factories import NOW, make_account, make_request
from trade_admission.sizing.instruments import InstrumentTable
from trade_admission.validation.models import AccountSnapshot, TradeRequest


@pytest.fixture
def now() -> datetime:
    """Frozen evaluation time."""
    return NOW


@pytest.fixture
def instruments() -> InstrumentTable:
    """Bundled instrument tables."""
    return InstrumentTable.from_yaml()


@pytest.fixture
def account() -> AccountSnapshot:
    """Default active account."""
    return make_account()


@pytest.fixture
def trade() -> TradeRequest:
    """Default trade request."""
    return make_request()

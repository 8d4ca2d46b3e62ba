"""Tests for CorrelationCalculator."""

import pytest

from trade_admission.risk.correlation import CorrelationCalculator
from trade_admission.sizing.instruments import InstrumentTable
from trade_admission.validation.models import Direction, OpenPosition


class TestCorrelationCalculator:
    """Tests for CorrelationCalculator.calculate."""

    @pytest.fixture
    def calculator(self, instruments: InstrumentTable) -> CorrelationCalculator:
        """Calculator over the bundled tables."""
        return CorrelationCalculator(instruments, contract_multiplier=100)

    @pytest.fixture
    def positions(self) -> list[OpenPosition]:
        """Mixed open positions."""
        return [
            OpenPosition("GBPUSD", Direction.LONG, 1.0),
            OpenPosition("AUDUSD", Direction.LONG, 0.5),
            OpenPosition("NZDUSD", Direction.SHORT, 1.0),
            OpenPosition("USDJPY", Direction.LONG, 1.0),
        ]

    def test_same_direction_correlated_positions_counted(
        self, calculator: CorrelationCalculator, positions: list[OpenPosition]
    ) -> None:
        """Only correlated positions in the same direction count."""
        exposure = calculator.calculate("EURUSD", Direction.LONG, positions, 100_000)

        assert exposure.symbols == ["GBPUSD", "AUDUSD"]
        assert exposure.position_count == 2
        assert exposure.total_lots == 1.5
        assert exposure.exposure_pct == pytest.approx(1.5)

    def test_opposite_direction(
        self, calculator: CorrelationCalculator, positions: list[OpenPosition]
    ) -> None:
        """A short EURUSD only correlates with the short NZDUSD."""
        exposure = calculator.calculate("EURUSD", Direction.SHORT, positions, 100_000)

        assert exposure.symbols == ["NZDUSD"]

    def test_unlisted_symbol(
        self, calculator: CorrelationCalculator, positions: list[OpenPosition]
    ) -> None:
        """Symbols without a correlation entry have no exposure."""
        exposure = calculator.calculate("USDTRY", Direction.LONG, positions, 100_000)

        assert exposure.position_count == 0
        assert exposure.exposure_pct == 0.0

    def test_zero_equity(
        self, calculator: CorrelationCalculator, positions: list[OpenPosition]
    ) -> None:
        """Zero equity reports zero percent instead of dividing by zero."""
        exposure = calculator.calculate("EURUSD", Direction.LONG, positions, 0)

        assert exposure.position_count == 2
        assert exposure.exposure_pct == 0.0

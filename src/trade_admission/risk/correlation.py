"""Correlated exposure across open positions."""

from dataclasses import dataclass, field

from trade_admission.sizing.instruments import InstrumentTable, normalize_symbol
from trade_admission.validation.models import Direction, OpenPosition


@dataclass
class CorrelatedExposure:
    """Same-direction exposure in instruments correlated with a symbol.

    Attributes:
        symbols: Correlated symbols with an open same-direction position.
        total_lots: Sum of lots across those positions.
        exposure_pct: Approximate exposure as a percentage of equity.
    """

    symbols: list[str] = field(default_factory=list)
    total_lots: float = 0.0
    exposure_pct: float = 0.0

    @property
    def position_count(self) -> int:
        return len(self.symbols)


class CorrelationCalculator:
    """Sums exposure of open positions correlated with a requested symbol.

    The exposure value is lots * pip_value(symbol) * contract_multiplier,
    expressed as a percentage of account equity.
    """

    def __init__(self, instruments: InstrumentTable, contract_multiplier: float = 100.0):
        self._instruments = instruments
        self._contract_multiplier = contract_multiplier

    def calculate(
        self,
        symbol: str,
        direction: Direction,
        positions: list[OpenPosition],
        equity: float,
    ) -> CorrelatedExposure:
        correlated = set(self._instruments.get_correlated(symbol))
        exposure = CorrelatedExposure()
        if not correlated:
            return exposure

        for position in positions:
            position_symbol = normalize_symbol(position.symbol)
            if position_symbol in correlated and position.direction == direction:
                exposure.symbols.append(position_symbol)
                exposure.total_lots += position.lot_size

        exposure_value = (
            exposure.total_lots * self._instruments.get_pip_value(symbol) * self._contract_multiplier
        )
        exposure.exposure_pct = (exposure_value / equity) * 100 if equity > 0 else 0.0
        return exposure

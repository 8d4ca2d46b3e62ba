"""Risk-based position sizing."""

import math
from dataclasses import dataclass

from trade_admission.errors import InvalidStopDistanceError
from trade_admission.sizing.instruments import InstrumentTable


@dataclass(frozen=True)
class SizingResult:
    """Output of the position sizer.

    Attributes:
        lot_size: Lots, floored to the lot step.
        risk_amount: Money at risk (equity * risk_pct / 100).
        stop_distance_pips: Distance between entry and stop in pips.
    """

    lot_size: float
    risk_amount: float
    stop_distance_pips: float


class PositionSizer:
    """Converts a risk percentage into a lot size.

    lot_size = risk_amount / (stop_distance_pips * pip_value_per_lot),
    floored to the instrument's lot step.
    """

    def __init__(self, instruments: InstrumentTable, lot_step: float = 0.01):
        self._instruments = instruments
        self._lot_step = lot_step

    @property
    def instruments(self) -> InstrumentTable:
        return self._instruments

    def stop_distance_pips(self, entry: float, stop_loss: float, symbol: str) -> float:
        return round(abs(entry - stop_loss) / self._instruments.get_pip_size(symbol), 6)

    def floor_lots(self, lots: float) -> float:
        """Floor a lot amount to the lot step."""
        steps = math.floor(round(lots / self._lot_step, 9))
        return round(steps * self._lot_step, 8)

    def size(
        self,
        equity: float,
        risk_pct: float,
        entry: float,
        stop_loss: float | None,
        symbol: str,
    ) -> SizingResult:
        """Size a position for the given risk.

        Raises:
            InvalidStopDistanceError: If the stop is missing or equals the entry.
        """
        if stop_loss is None:
            raise InvalidStopDistanceError("Stop loss missing: position size cannot be calculated")

        stop_pips = self.stop_distance_pips(entry, stop_loss, symbol)
        if stop_pips <= 0:
            raise InvalidStopDistanceError(
                f"Invalid stop distance: entry ({entry}) equals stop loss ({stop_loss})"
            )

        risk_amount = equity * (risk_pct / 100)
        lot_size = risk_amount / (stop_pips * self._instruments.get_pip_value(symbol))

        return SizingResult(
            lot_size=self.floor_lots(lot_size),
            risk_amount=risk_amount,
            stop_distance_pips=stop_pips,
        )

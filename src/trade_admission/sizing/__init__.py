"""Position sizing and instrument tables."""

from .instruments import InstrumentTable, normalize_symbol
from .position_sizer import PositionSizer, SizingResult

__all__ = ["InstrumentTable", "PositionSizer", "SizingResult", "normalize_symbol"]

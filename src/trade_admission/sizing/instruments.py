"""Instrument lookup tables for pip sizes, pip values and correlations."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field


DEFAULT_INSTRUMENTS_FILE = Path(__file__).parent / "instruments.yaml"


def normalize_symbol(symbol: str) -> str:
    """Normalize a symbol to upper case without separators (EUR/USD -> EURUSD)."""
    return symbol.replace("/", "").replace(" ", "").upper()


class InstrumentDefaults(BaseModel):
    """Fallback values for unlisted symbols."""

    pip_size: float = Field(default=0.0001, gt=0)
    pip_value_per_lot: float = Field(default=10.0, gt=0)


class InstrumentTable(BaseModel):
    """Static, data-driven instrument tables.

    Attributes:
        defaults: Values used for symbols not listed below.
        pip_size_by_currency: Pip size for symbols containing a currency code.
        pip_size: Explicit pip size per symbol.
        pip_value_per_lot: Monetary value of one pip for one standard lot.
        correlations: Symbols whose prices move with each listed symbol.
    """

    defaults: InstrumentDefaults = Field(default_factory=InstrumentDefaults)
    pip_size_by_currency: dict[str, float] = Field(default_factory=dict)
    pip_size: dict[str, float] = Field(default_factory=dict)
    pip_value_per_lot: dict[str, float] = Field(default_factory=dict)
    correlations: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> "InstrumentTable":
        """Load tables from YAML, defaulting to the bundled file."""
        with open(path or DEFAULT_INSTRUMENTS_FILE) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def get_pip_size(self, symbol: str) -> float:
        symbol = normalize_symbol(symbol)
        if symbol in self.pip_size:
            return self.pip_size[symbol]
        for currency, size in self.pip_size_by_currency.items():
            if currency in symbol:
                return size
        return self.defaults.pip_size

    def get_pip_value(self, symbol: str) -> float:
        return self.pip_value_per_lot.get(normalize_symbol(symbol), self.defaults.pip_value_per_lot)

    def get_correlated(self, symbol: str) -> list[str]:
        """Return symbols correlated with the given symbol (empty if unlisted)."""
        return list(self.correlations.get(normalize_symbol(symbol), []))

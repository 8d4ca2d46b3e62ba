"""Trade admission and risk validation engine for funded trading accounts."""

__version__ = "1.0.0"

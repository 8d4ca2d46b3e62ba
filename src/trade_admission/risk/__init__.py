"""Risk budget and correlation math."""

from .correlation import CorrelatedExposure, CorrelationCalculator
from .risk_budget import RiskBudget, RiskBudgetCalculator

__all__ = [
    "CorrelatedExposure",
    "CorrelationCalculator",
    "RiskBudget",
    "RiskBudgetCalculator",
]

"""Inbound request payloads."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from trade_admission.sizing.instruments import normalize_symbol
from trade_admission.validation.models import Direction, TradeRequest


class TradeRequestPayload(BaseModel):
    """Trade parameters as received from the caller."""

    symbol: str = Field(min_length=1, description="Instrument symbol, e.g. EURUSD.")
    direction: Literal["long", "short"] = Field(description="Trade direction.")
    entry_price: float = Field(gt=0, description="Proposed entry price.")
    stop_loss: Optional[float] = Field(default=None, ge=0, description="Stop-loss price.")
    take_profit_levels: list[float] = Field(default_factory=list)
    requested_risk_pct: float = Field(default=1.0, gt=0, le=100)

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """Normalize the symbol and reject blank values."""
        symbol = normalize_symbol(v)
        if not symbol:
            raise ValueError("symbol must not be blank")
        return symbol

    @field_validator("stop_loss")
    @classmethod
    def zero_stop_means_missing(cls, v: Optional[float]) -> Optional[float]:
        """Treat a zero stop loss as no stop loss."""
        return v or None

    def to_trade_request(self) -> TradeRequest:
        return TradeRequest(
            symbol=self.symbol,
            direction=Direction(self.direction),
            entry_price=self.entry_price,
            stop_loss=self.stop_loss,
            take_profit_levels=tuple(self.take_profit_levels),
            requested_risk_pct=self.requested_risk_pct,
        )


class ValidationRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {
                "account_id": "acc_1",
                "trade_request": {
                    "symbol": "EURUSD",
                    "direction": "long",
                    "entry_price": 1.0850,
                    "stop_loss": 1.0800,
                    "take_profit_levels": [1.0950],
                    "requested_risk_pct": 1.0,
                },
            }
        }
    }

    account_id: str = Field(min_length=1, description="Account the trade is proposed on.")
    trade_request: TradeRequestPayload = Field(description="The proposed trade.")


def describe_validation_error(error: ValidationError) -> str:
    """Summarize pydantic errors as "field: message" pairs."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "request"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)

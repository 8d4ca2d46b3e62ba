# src/trade_admission/config/settings.py
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SystemConfig(BaseModel):
    name: str = "Trade Admission Engine"
    version: str = "1.0.0"
    mode: str = "paper"


class RiskBudgetSettings(BaseModel):
    """Settings for the drawdown-based risk budget."""

    daily_budget_fraction: float = Field(default=0.5, gt=0, le=1)
    max_budget_fraction: float = Field(default=0.3, gt=0, le=1)
    default_max_risk_per_trade_pct: float = Field(default=2.0, gt=0, le=100)
    recovery_risk_cap_pct: float = Field(default=0.5, gt=0, le=100)
    daily_remaining_block_pct: float = Field(default=0.5, ge=0)
    max_remaining_block_pct: float = Field(default=1.0, ge=0)
    min_effective_risk_pct: float = Field(default=0.1, ge=0)


class SizingSettings(BaseModel):
    """Settings for position sizing."""

    lot_step: float = Field(default=0.01, gt=0)
    min_lot_size: float = Field(default=0.01, gt=0)
    instruments_file: Optional[str] = None


class CooldownSettings(BaseModel):
    """Settings for the consecutive-loss cooling-off period."""

    consecutive_losses_threshold: int = Field(default=2, ge=1)
    cooldown_minutes: int = Field(default=30, ge=1, le=1440)


class NewsSettings(BaseModel):
    """Settings for the high-impact news blackout."""

    default_buffer_minutes: int = Field(default=30, ge=1, le=1440)
    fetch_timeout_seconds: float = Field(default=3.0, gt=0, le=60)
    high_impact_label: str = "high"


class WeekendSettings(BaseModel):
    """Settings for the weekend holding restriction."""

    friday_cutoff_hour_utc: int = Field(default=16, ge=0, le=23)


class CorrelationSettings(BaseModel):
    """Settings for correlated exposure checks."""

    default_max_exposure_pct: float = Field(default=5.0, gt=0, le=100)
    contract_multiplier: float = Field(default=100.0, gt=0)
    block_min_positions: int = Field(default=2, ge=1)


class ConsistencySettings(BaseModel):
    """Settings for the consistency-rule projection."""

    reward_multiple: float = Field(default=2.0, gt=0, le=10)
    warning_ratio: float = Field(default=0.8, gt=0, le=1)


class AuditSettings(BaseModel):
    """Settings for the validation audit trail."""

    enabled: bool = True
    data_dir: str = "data/audit"


class FinnhubConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FINNHUB_")

    api_key: str = ""
    base_url: str = "https://finnhub.io/api/v1"


class Settings(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    risk_budget: RiskBudgetSettings = Field(default_factory=RiskBudgetSettings)
    sizing: SizingSettings = Field(default_factory=SizingSettings)
    cooldown: CooldownSettings = Field(default_factory=CooldownSettings)
    news: NewsSettings = Field(default_factory=NewsSettings)
    weekend: WeekendSettings = Field(default_factory=WeekendSettings)
    correlation: CorrelationSettings = Field(default_factory=CorrelationSettings)
    consistency: ConsistencySettings = Field(default_factory=ConsistencySettings)
    audit: AuditSettings = Field(default_factory=AuditSettings)
    finnhub: FinnhubConfig = Field(default_factory=FinnhubConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file with env var overrides."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        data.pop("finnhub", None)
        finnhub = FinnhubConfig()

        return cls(
            **data,
            finnhub=finnhub,
        )

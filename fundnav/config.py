from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    FUNDNAV_STATE_PATH: str = "data/share_classes.csv"
    FUNDNAV_AUDIT_PATH: str = "data/nav_audit.csv"
    # Latest row of this `ts,value` sheet is the portfolio valuation, unless
    # FUNDNAV_PORTFOLIO_VALUE_USD pins a static value.
    FUNDNAV_VALUATION_PATH: str = "data/valuations.csv"
    FUNDNAV_PORTFOLIO_VALUE_USD: int | None = Field(None, ge=0)
    FUNDNAV_LIQUID_BALANCE_USD: int = Field(0, ge=0)
    # Fixed-point exponent for nav_per_share (scale = 10 ** decimals), fund-wide.
    FUNDNAV_DECIMALS: int = Field(4, ge=0, le=36)
    FUNDNAV_ORCHESTRATOR_ID: str = "orchestrator"
    FUNDNAV_LOG_LEVEL: str = "WARNING"

    @property
    def state_path(self) -> str:
        return self.FUNDNAV_STATE_PATH

    @property
    def audit_path(self) -> str:
        return self.FUNDNAV_AUDIT_PATH

    @property
    def valuation_path(self) -> str:
        return self.FUNDNAV_VALUATION_PATH

    @property
    def portfolio_value_usd(self) -> int | None:
        return self.FUNDNAV_PORTFOLIO_VALUE_USD

    @property
    def liquid_balance_usd(self) -> int:
        return self.FUNDNAV_LIQUID_BALANCE_USD

    @property
    def decimals(self) -> int:
        return self.FUNDNAV_DECIMALS

    @property
    def orchestrator_id(self) -> str:
        return self.FUNDNAV_ORCHESTRATOR_ID

    @property
    def log_level(self) -> str:
        return (self.FUNDNAV_LOG_LEVEL or "WARNING").strip().upper()


def load_settings() -> Settings:
    return Settings()

"""
Library configuration using pydantic-settings with nested structure
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from pathlib import Path
import os


# ============================================================================
# NESTED CONFIGURATION MODELS
# ============================================================================

# .env file sits in the working directory of the host application
_ENV_FILE = Path(os.getcwd()) / ".env"


class LoggerConfig(BaseSettings):
    """Logger configuration settings."""
    default_level: str = "INFO"
    file_path: str = ""  # Empty = console only
    rotation: str = "10 MB"
    retention: str = "30 days"
    filter_enabled: bool = True
    filter_max_history: int = 5
    filter_time_threshold_seconds: float = 1.0
    model_config = SettingsConfigDict(env_prefix="LOGGER__", extra="ignore")

    @field_validator("default_level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level


class IndicatorDefaults(BaseSettings):
    """Default parameters for the chart layout built from settings.

    These only drive default_chart_configs(); every indicator function keeps
    its own documented defaults and accepts overrides per call.
    """
    sma_period: int = 20
    ema_period: int = 20
    bollinger_period: int = 20
    bollinger_k: float = 2.0
    sar_af0: float = 0.02
    sar_af_max: float = 0.2
    rsi_period: int = 14
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    stoch_k_period: int = 14
    stoch_d_period: int = 3
    atr_period: int = 14

    # Layout: comma-separated kind names drawn over price / in their own pane
    overlays: str = "sma,ema,bollinger,sar"
    panes: str = "rsi,macd,stochastic,atr,volume"

    model_config = SettingsConfigDict(env_prefix="INDICATORS__", extra="ignore")

    @field_validator("overlays", "panes")
    @classmethod
    def normalize_names(cls, value: str) -> str:
        return ",".join(item.strip().lower() for item in value.split(",") if item.strip())

    def overlay_names(self) -> List[str]:
        return [name for name in self.overlays.split(",") if name]

    def pane_names(self) -> List[str]:
        return [name for name in self.panes.split(",") if name]


class ChartConfig(BaseSettings):
    """Chart composition configuration."""
    cache_size: int = Field(default=32, ge=0)
    model_config = SettingsConfigDict(env_prefix="CHART__", extra="ignore")


# ============================================================================
# MAIN SETTINGS CLASS
# ============================================================================

class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    Use double underscore (__) in env vars to reach nested sections.

    Example:
        LOGGER__DEFAULT_LEVEL=DEBUG
        INDICATORS__RSI_PERIOD=9
        INDICATORS__PANES=rsi,macd
        CHART__CACHE_SIZE=0
    """

    APP_NAME: str = "chart-indicators"
    APP_VERSION: str = "1.0.0"

    LOGGER: Optional[LoggerConfig] = None
    INDICATORS: Optional[IndicatorDefaults] = None
    CHART: Optional[ChartConfig] = None

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Nested sections read their own env prefixes
        if self.LOGGER is None:
            self.LOGGER = LoggerConfig()
        if self.INDICATORS is None:
            self.INDICATORS = IndicatorDefaults()
        if self.CHART is None:
            self.CHART = ChartConfig()

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        env_prefix=""
    )


# Global settings instance
from dotenv import load_dotenv

# Load .env file into environment variables (never override the real env)
if _ENV_FILE.exists():
    load_dotenv(str(_ENV_FILE), override=False)

settings = Settings()

"""
Engine Configuration

Indicator defaults loaded from environment variables.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KLINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Kline Indicator Engine"
    app_version: str = "0.1.0"

    # Moving averages
    ma_period: int = 20
    ma_kind: str = "sma"

    # Bollinger Bands
    bollinger_period: int = 20
    bollinger_multiplier: float = 2.0

    # Donchian Channel
    donchian_period: int = 20

    # KDJ
    kdj_period: int = 9
    kdj_k_period: int = 3
    kdj_d_period: int = 3

    # MACD
    macd_short_period: int = 12
    macd_long_period: int = 26
    macd_signal_period: int = 9
    macd_line_color: str = "#2962ff"
    macd_signal_color: str = "#ff6d00"
    macd_positive_color: str = "#ef5350"
    macd_non_positive_color: str = "#26a69a"

    # RSI
    rsi_period: int = 14
    rsi_upper_level: float = 70.0
    rsi_lower_level: float = 30.0

    # Volume ratio
    volume_ratio_window: int = 5
    full_day_minutes: int = 240

    # Bar aggregation
    bucket_size: int = 5


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()

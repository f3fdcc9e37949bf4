"""
Indicator Engine Service

CONTRACT:
    Input:  IndicatorRequest (bars + indicator names)
    Output: IndicatorResponse

RESPONSIBILITIES:
    - Window aggregation and exponential smoothing primitives
    - Moving averages, Bollinger Bands, Donchian Channel
    - KDJ, MACD, RSI oscillators
    - Map results back onto input bar timestamps

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from kline_indicators.services.indicators.interface import IndicatorServiceInterface
from kline_indicators.services.indicators.service import IndicatorService, get_indicator_service
from kline_indicators.services.indicators.calculations import (
    WindowAggregate,
    WindowAggregator,
    ExponentialSmoother,
    rolling_window,
)
from kline_indicators.services.indicators.series import (
    ma_series,
    bollinger_series,
    donchian_series,
    kdj_series,
    macd_series,
    rsi_series,
)

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
    "WindowAggregate",
    "WindowAggregator",
    "ExponentialSmoother",
    "rolling_window",
    "ma_series",
    "bollinger_series",
    "donchian_series",
    "kdj_series",
    "macd_series",
    "rsi_series",
]

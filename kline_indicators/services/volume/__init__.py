"""
Volume Ratio Service

Compares current volume against a historical baseline.
"""

from kline_indicators.services.volume.ratio import (
    day_ratio,
    day_ratio_series,
    minute_ratio_same_time,
    minute_ratio_simple,
    minute_ratio_now,
)

__all__ = [
    "day_ratio",
    "day_ratio_series",
    "minute_ratio_same_time",
    "minute_ratio_simple",
    "minute_ratio_now",
]

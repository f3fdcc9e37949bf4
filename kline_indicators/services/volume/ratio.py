"""
Volume Ratio (量比)

Current volume compared against a historical baseline.

Ratio functions are advisory: empty input, negative volume or a zero
baseline give NaN rather than an exception, so a scan over many symbols
never aborts on one with missing history.
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np

from kline_indicators.core.config import settings
from kline_indicators.core.market_hours import FULL_DAY_MINUTES, elapsed_trading_minutes
from kline_indicators.schemas.indicators import Point, Series
from kline_indicators.services.base import ConfigurationError
from kline_indicators.services.frames import BarsInput, bar_column, coerce_bars

logger = logging.getLogger(__name__)

_ARRAY_TYPES = (list, tuple, np.ndarray)


def _is_array(value) -> bool:
    return isinstance(value, _ARRAY_TYPES)


def _cumulative(volumes: Sequence[Optional[float]], minutes: int) -> float:
    # Missing minutes count as zero volume
    return float(sum(v or 0 for v in volumes[:minutes]))


def day_ratio(today_volume: float, past_volumes: Sequence[float]) -> float:
    """
    Today's total volume / mean of the past days' volumes.

    Missing (None) or non-positive past entries mark missing data and are
    left out of the mean.
    """
    if today_volume is None or today_volume < 0:
        return math.nan
    if not _is_array(past_volumes) or len(past_volumes) == 0:
        return math.nan

    valid = [v for v in past_volumes if v is not None and v > 0]
    if not valid:
        return math.nan

    avg_volume = sum(valid) / len(valid)
    if avg_volume == 0:
        return math.nan

    return today_volume / avg_volume


def minute_ratio_same_time(
    today_minute_volumes: Sequence[float],
    past_days_minute_volumes: Sequence[Sequence[float]],
) -> float:
    """
    Volume from the open through the current minute today / average of the
    same cumulative volume on past days.

    Past days with fewer minutes than today are left out.
    """
    if not _is_array(today_minute_volumes) or len(today_minute_volumes) == 0:
        return math.nan
    if not _is_array(past_days_minute_volumes) or len(past_days_minute_volumes) == 0:
        return math.nan

    minutes = len(today_minute_volumes)
    today_cum = _cumulative(today_minute_volumes, minutes)

    past_cums = [
        _cumulative(day, minutes)
        for day in past_days_minute_volumes
        if _is_array(day) and len(day) >= minutes
    ]
    if not past_cums:
        return math.nan

    avg_cum = sum(past_cums) / len(past_cums)
    if avg_cum == 0:
        return math.nan

    return today_cum / avg_cum


def minute_ratio_simple(
    today_cum_volume: float,
    past_days_total_volumes: Sequence[float],
    minutes_elapsed: int,
    full_day_minutes: int = FULL_DAY_MINUTES,
) -> float:
    """Today's per-minute volume so far / past days' full-day per-minute volume."""
    if today_cum_volume is None:
        return math.nan
    if not _is_array(past_days_total_volumes) or len(past_days_total_volumes) == 0:
        return math.nan
    if minutes_elapsed <= 0 or full_day_minutes <= 0:
        return math.nan

    today_per_min = today_cum_volume / minutes_elapsed
    avg_total = sum(v or 0 for v in past_days_total_volumes) / len(past_days_total_volumes)
    avg_per_min_past = avg_total / full_day_minutes

    if avg_per_min_past == 0:
        return math.nan
    return today_per_min / avg_per_min_past


def minute_ratio_now(today_cum_volume: float, past_days_total_volumes: Sequence[float], now) -> float:
    """minute_ratio_simple with minutes elapsed taken from the A-share calendar."""
    return minute_ratio_simple(
        today_cum_volume,
        past_days_total_volumes,
        elapsed_trading_minutes(now),
        settings.full_day_minutes,
    )


def day_ratio_series(bars: BarsInput, window: int = 5) -> Series:
    """
    Per-bar day ratio against the previous ``window`` bars.

    The first ``window`` bars have no baseline and are omitted. A bar whose
    baseline has no positive volume gets 0.0 so the series stays gap-free.
    """
    if window <= 0:
        raise ConfigurationError("day_ratio_series", f"window must be positive, got {window}")

    bars = coerce_bars(bars)
    volumes = bar_column(bars, "volume")

    points = []
    for i in range(window, len(bars)):
        ratio = day_ratio(volumes[i], volumes[i - window : i])
        points.append(Point(time=bars[i].time, value=0.0 if math.isnan(ratio) else ratio))

    if not points:
        logger.debug(f"Day ratio skipped: {len(bars)} bars, window {window}")
    return points

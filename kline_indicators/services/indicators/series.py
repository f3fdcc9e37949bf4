"""
Bar-aligned Indicator Pipelines

Each pipeline takes the full bar sequence plus its parameters and returns
Series of {time, value} points ready for a charting consumer. Warm-up bars
are dropped, never padded, and every point reuses the input bar's own
timestamp value.
"""

import logging
from typing import Optional, Union

import numpy as np

from kline_indicators.core.config import settings
from kline_indicators.schemas.market import PriceSource
from kline_indicators.schemas.indicators import (
    BandSeries,
    HistogramPoint,
    HistogramSign,
    KDJSeries,
    MACDSeries,
    MAKind,
    Point,
    RSISeries,
    Series,
)
from kline_indicators.services.frames import BarsInput, bar_column, coerce_bars, to_series
from kline_indicators.services.indicators.calculations import (
    bollinger_bands,
    donchian_channel,
    kdj,
    macd,
    moving_average,
    rsi,
)

logger = logging.getLogger(__name__)


# =============================================================================
# MOVING AVERAGE
# =============================================================================


def ma_series(
    bars: BarsInput,
    period: int = 20,
    kind: Union[MAKind, str] = MAKind.SMA,
    source: Union[PriceSource, str] = PriceSource.CLOSE,
) -> Series:
    """SMA / EMA / WMA of one bar field, first point at bars[period-1]."""
    bars = coerce_bars(bars)
    values = moving_average(bar_column(bars, source), period, kind)
    return to_series(bars, values)


# =============================================================================
# CHANNELS
# =============================================================================


def bollinger_series(bars: BarsInput, period: int = 20, multiplier: float = 2.0) -> BandSeries:
    bars = coerce_bars(bars)
    upper, middle, lower = bollinger_bands(bar_column(bars, PriceSource.CLOSE), period, multiplier)
    return BandSeries(
        upper=to_series(bars, upper),
        middle=to_series(bars, middle),
        lower=to_series(bars, lower),
    )


def donchian_series(bars: BarsInput, period: int = 20) -> BandSeries:
    bars = coerce_bars(bars)
    upper, middle, lower = donchian_channel(
        bar_column(bars, PriceSource.HIGH),
        bar_column(bars, PriceSource.LOW),
        period,
    )
    return BandSeries(
        upper=to_series(bars, upper),
        middle=to_series(bars, middle),
        lower=to_series(bars, lower),
    )


# =============================================================================
# OSCILLATORS
# =============================================================================


def kdj_series(bars: BarsInput, period: int = 9, k_period: int = 3, d_period: int = 3) -> KDJSeries:
    bars = coerce_bars(bars)
    k, d, j = kdj(
        bar_column(bars, PriceSource.HIGH),
        bar_column(bars, PriceSource.LOW),
        bar_column(bars, PriceSource.CLOSE),
        period,
        k_period,
        d_period,
    )
    return KDJSeries(k=to_series(bars, k), d=to_series(bars, d), j=to_series(bars, j))


def classify_histogram(value: float) -> HistogramSign:
    return HistogramSign.POSITIVE if value > 0 else HistogramSign.NON_POSITIVE


def macd_series(
    bars: BarsInput,
    short_period: int = 12,
    long_period: int = 26,
    signal_period: int = 9,
    colors: Optional[tuple[str, str]] = None,
    line_colors: Optional[tuple[str, str]] = None,
) -> MACDSeries:
    """
    MACD line, signal line and a sign-classified histogram.

    The MACD line starts at bars[long_period-1]; signal and histogram start
    signal_period-1 bars later. ``colors`` is the histogram's
    (positive, non_positive) pair and ``line_colors`` is (macd, signal);
    both default to the configured colors.
    """
    bars = coerce_bars(bars)
    macd_line, signal_line, histogram, _, _ = macd(
        bar_column(bars, PriceSource.CLOSE), short_period, long_period, signal_period
    )

    if colors is None:
        colors = (settings.macd_positive_color, settings.macd_non_positive_color)
    if line_colors is None:
        line_colors = (settings.macd_line_color, settings.macd_signal_color)
    positive_color, non_positive_color = colors
    macd_color, signal_color = line_colors

    histogram_points = []
    for bar, value in zip(bars, histogram):
        if np.isnan(value):
            continue
        sign = classify_histogram(value)
        histogram_points.append(
            HistogramPoint(
                time=bar.time,
                value=float(value),
                sign=sign,
                color=positive_color if sign == HistogramSign.POSITIVE else non_positive_color,
            )
        )

    return MACDSeries(
        macd=to_series(bars, macd_line),
        signal=to_series(bars, signal_line),
        histogram=histogram_points,
        macd_color=macd_color,
        signal_color=signal_color,
    )


def rsi_series(
    bars: BarsInput,
    period: int = 14,
    upper_level: float = 70.0,
    lower_level: float = 30.0,
) -> RSISeries:
    """RSI from bars[period] onward, with flat reference bands on the same bars."""
    bars = coerce_bars(bars)
    values = rsi(bar_column(bars, PriceSource.CLOSE), period)
    rsi_points = to_series(bars, values)
    if not rsi_points:
        logger.debug(f"RSI({period}) skipped: {len(bars)} bars")

    return RSISeries(
        rsi=rsi_points,
        upper=[Point(time=p.time, value=upper_level) for p in rsi_points],
        lower=[Point(time=p.time, value=lower_level) for p in rsi_points],
    )

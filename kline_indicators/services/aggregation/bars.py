"""
Bar Aggregation

Downsamples a bar sequence into coarser bars, ``window`` input bars per
output bar (e.g. 5 one-minute bars -> one 5-minute bar).

Malformed input yields an empty result instead of raising, since callers
feed this from partially loaded data.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from kline_indicators.core.config import settings
from kline_indicators.schemas.market import AggregatedBar
from kline_indicators.services.base import ConfigurationError
from kline_indicators.services.frames import BarsInput, coerce_bars

logger = logging.getLogger(__name__)

_ARRAY_TYPES = (list, tuple, np.ndarray)


def _valid_window(window) -> bool:
    # bool is an int subclass; True must not act as a window of 1
    return isinstance(window, (int, np.integer)) and not isinstance(window, bool) and window > 0


def _numeric(column: Sequence) -> Optional[np.ndarray]:
    """Float array of ``column``, or None when any entry is missing or non-numeric."""
    try:
        values = np.asarray(column, dtype=float)
    except (TypeError, ValueError):
        return None
    if values.ndim != 1 or np.isnan(values).any():
        return None
    return values


def aggregate_ohlc(
    opens: Sequence[float],
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    times: Sequence,
    window: int,
    volumes: Optional[Sequence[float]] = None,
    strict: bool = False,
) -> list[AggregatedBar]:
    """
    Aggregate parallel OHLC arrays into buckets of ``window`` bars.

    Each complete bucket becomes one bar: open of its first bar, max high,
    min low, close and time of its last bar, summed volume when given.
    A trailing bucket with fewer than ``window`` bars is dropped.

    A gap (None, NaN or a non-numeric entry) in any price column gives an
    empty result; missing volume entries count as 0.

    Args:
        strict: raise ConfigurationError for window <= 0 instead of
            returning an empty result.
    """
    if strict and not _valid_window(window):
        raise ConfigurationError("aggregate_ohlc", f"window must be a positive integer, got {window}")

    columns = [opens, highs, lows, closes, times]
    if volumes is not None:
        columns.append(volumes)

    if not all(isinstance(c, _ARRAY_TYPES) for c in columns):
        logger.debug("Bar aggregation skipped: non-array input")
        return []
    if len({len(c) for c in columns}) != 1:
        logger.debug(f"Bar aggregation skipped: mismatched lengths {[len(c) for c in columns]}")
        return []
    if not _valid_window(window):
        logger.debug(f"Bar aggregation skipped: invalid window {window}")
        return []

    prices = [_numeric(c) for c in (opens, highs, lows, closes)]
    if any(p is None for p in prices):
        logger.debug("Bar aggregation skipped: missing or non-numeric prices")
        return []
    open_, high, low, close = prices

    volume = None
    if volumes is not None:
        volume = _numeric([0.0 if v is None else v for v in volumes])
        if volume is None:
            logger.debug("Bar aggregation skipped: non-numeric volumes")
            return []

    n = len(times)
    result = []

    for start in range(0, n - window + 1, window):
        end = start + window
        result.append(
            AggregatedBar(
                time=times[end - 1],
                open=open_[start],
                high=high[start:end].max(),
                low=low[start:end].min(),
                close=close[end - 1],
                volume=float(volume[start:end].sum()) if volume is not None else None,
            )
        )

    return result


def aggregate_bars(
    bars: BarsInput, window: Optional[int] = None, strict: bool = False
) -> list[AggregatedBar]:
    """
    Aggregate Bar models; volume is summed only when every bar carries one.

    ``window`` defaults to the configured bucket size.
    """
    if window is None:
        window = settings.bucket_size
    bars = coerce_bars(bars)
    has_volume = bool(bars) and all(b.volume is not None for b in bars)
    return aggregate_ohlc(
        [b.open for b in bars],
        [b.high for b in bars],
        [b.low for b in bars],
        [b.close for b in bars],
        [b.time for b in bars],
        window,
        volumes=[b.volume for b in bars] if has_volume else None,
        strict=strict,
    )

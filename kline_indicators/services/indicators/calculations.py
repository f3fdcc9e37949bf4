"""
Technical Indicator Calculations

Pure Python/NumPy implementations of the indicator recurrences.
All math is deterministic; every function is a pure function of its inputs.

Array functions return an array as long as the input, with NaN wherever the
indicator is still warming up.
"""

from collections import deque
from dataclasses import dataclass
from typing import Optional
import math

import numpy as np

from kline_indicators.services.base import ConfigurationError

# Floating-point cancellation in sumSq/P - mean^2 can leave a tiny negative.
VARIANCE_EPSILON = 1e-12

# KDJ's K and D start from this neutral value.
KDJ_SEED = 50.0


def _require_positive(name: str, value: int, owner: str) -> None:
    if value <= 0:
        raise ConfigurationError(owner, f"{name} must be positive, got {value}")


def _as_float_array(data) -> np.ndarray:
    return np.asarray(data, dtype=float)


# =============================================================================
# WINDOW AGGREGATION
# =============================================================================


@dataclass(frozen=True)
class WindowAggregate:
    """Aggregates over one full trailing window."""

    period: int
    sum: float
    sum_sq: float
    minimum: float
    maximum: float

    @property
    def mean(self) -> float:
        return self.sum / self.period

    @property
    def variance(self) -> float:
        """Population variance, clamped so it never goes negative."""
        mean = self.mean
        variance = self.sum_sq / self.period - mean * mean
        if -VARIANCE_EPSILON < variance < 0:
            variance = 0.0
        return max(0.0, variance)

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)


class WindowAggregator:
    """
    Running sum, sum of squares, min and max over a fixed trailing window.

    Sums are updated by adding the incoming value and subtracting the one
    leaving the window. Min and max use monotonic deques, so each push is
    amortized O(1).

    Usage:
        agg = WindowAggregator(20)
        for close in closes:
            window = agg.push(close)   # None until 20 values were pushed
    """

    def __init__(self, period: int):
        _require_positive("period", period, "WindowAggregator")
        self.period = period
        self._values: deque = deque()
        self._max_queue: deque = deque()  # (index, value), values decreasing
        self._min_queue: deque = deque()  # (index, value), values increasing
        self._sum = 0.0
        self._sum_sq = 0.0
        self._index = -1

    def push(self, value: float) -> Optional[WindowAggregate]:
        """Add the next value; returns the window aggregate once the window is full."""
        value = float(value)
        self._index += 1
        i = self._index

        self._values.append(value)
        self._sum += value
        self._sum_sq += value * value
        if len(self._values) > self.period:
            old = self._values.popleft()
            self._sum -= old
            self._sum_sq -= old * old

        while self._max_queue and self._max_queue[-1][1] <= value:
            self._max_queue.pop()
        self._max_queue.append((i, value))
        while self._min_queue and self._min_queue[-1][1] >= value:
            self._min_queue.pop()
        self._min_queue.append((i, value))

        oldest = i - self.period
        if self._max_queue[0][0] <= oldest:
            self._max_queue.popleft()
        if self._min_queue[0][0] <= oldest:
            self._min_queue.popleft()

        if len(self._values) < self.period:
            return None

        return WindowAggregate(
            period=self.period,
            sum=self._sum,
            sum_sq=self._sum_sq,
            minimum=self._min_queue[0][1],
            maximum=self._max_queue[0][1],
        )


@dataclass
class RollingWindow:
    """Window aggregates for every index, NaN before the first full window."""

    sum: np.ndarray
    sum_sq: np.ndarray
    mean: np.ndarray
    std: np.ndarray
    minimum: np.ndarray
    maximum: np.ndarray


def rolling_window(data: np.ndarray, period: int) -> RollingWindow:
    """Run a WindowAggregator over ``data`` and collect its aggregates."""
    agg = WindowAggregator(period)
    data = _as_float_array(data)
    n = len(data)
    columns = {name: np.full(n, np.nan) for name in ("sum", "sum_sq", "mean", "std", "minimum", "maximum")}

    for i, value in enumerate(data):
        window = agg.push(value)
        if window is None:
            continue
        columns["sum"][i] = window.sum
        columns["sum_sq"][i] = window.sum_sq
        columns["mean"][i] = window.mean
        columns["std"][i] = window.std
        columns["minimum"][i] = window.minimum
        columns["maximum"][i] = window.maximum

    return RollingWindow(**columns)


# =============================================================================
# EXPONENTIAL SMOOTHING
# =============================================================================


class ExponentialSmoother:
    """
    y[i] = alpha * x[i] + (1 - alpha) * y[i-1]

    Seeding:
    - no ``seed``: the first value is the mean of the first ``period``
      inputs, placed at index period-1 (standard EMA).
    - fixed ``seed``: y[-1] = seed, so output starts at index 0 (KDJ).

    ``alpha`` defaults to 2 / (period + 1).
    """

    def __init__(
        self,
        period: Optional[int] = None,
        alpha: Optional[float] = None,
        seed: Optional[float] = None,
    ):
        if period is not None:
            _require_positive("period", period, "ExponentialSmoother")
        if seed is None and period is None:
            raise ConfigurationError("ExponentialSmoother", "period is required without a fixed seed")
        if alpha is None:
            if period is None:
                raise ConfigurationError("ExponentialSmoother", "either period or alpha is required")
            alpha = 2 / (period + 1)
        if not 0 < alpha <= 1:
            raise ConfigurationError("ExponentialSmoother", f"alpha must be in (0, 1], got {alpha}")

        self.period = period
        self.alpha = alpha
        self.seed = seed

    def apply(self, data: np.ndarray) -> np.ndarray:
        data = _as_float_array(data)
        result = np.full(len(data), np.nan)
        alpha = self.alpha

        if self.seed is not None:
            prev = self.seed
            start = 0
        else:
            if len(data) < self.period:
                return result
            prev = float(np.mean(data[: self.period]))
            result[self.period - 1] = prev
            start = self.period

        for i in range(start, len(data)):
            prev = alpha * data[i] + (1 - alpha) * prev
            result[i] = prev

        return result


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    return rolling_window(data, period).mean


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """Exponential Moving Average, seeded with the SMA of the first window."""
    return ExponentialSmoother(period).apply(data)


def wma(data: np.ndarray, period: int) -> np.ndarray:
    """Weighted Moving Average (newest value weighted ``period``, oldest 1)."""
    _require_positive("period", period, "wma")
    data = _as_float_array(data)
    result = np.full(len(data), np.nan)
    if len(data) < period:
        return result

    weights = np.arange(1, period + 1)
    denominator = period * (period + 1) / 2

    for i in range(period - 1, len(data)):
        result[i] = np.sum(data[i - period + 1 : i + 1] * weights) / denominator

    return result


_MOVING_AVERAGES = {"sma": sma, "ema": ema, "wma": wma}


def moving_average(data: np.ndarray, period: int, kind: str = "sma") -> np.ndarray:
    """Dispatch to sma / ema / wma."""
    kind = getattr(kind, "value", kind)
    try:
        func = _MOVING_AVERAGES[kind]
    except KeyError:
        raise ConfigurationError("moving_average", f"Unknown moving average kind: {kind}") from None
    return func(data, period)


# =============================================================================
# VOLATILITY / CHANNELS
# =============================================================================


def bollinger_bands(
    closes: np.ndarray, period: int = 20, multiplier: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands over population standard deviation.

    Returns: (upper, middle, lower)
    """
    window = rolling_window(closes, period)
    middle = window.mean
    upper = middle + multiplier * window.std
    lower = middle - multiplier * window.std
    return upper, middle, lower


def donchian_channel(
    highs: np.ndarray, lows: np.ndarray, period: int = 20
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Donchian Channel: highest high and lowest low of the trailing window.

    Returns: (upper, middle, lower)
    """
    upper = rolling_window(highs, period).maximum
    lower = rolling_window(lows, period).minimum
    middle = (upper + lower) / 2
    return upper, middle, lower


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def kdj(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    period: int = 9,
    k_period: int = 3,
    d_period: int = 3,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    KDJ oscillator.

    RSV is 0 for a zero-range window. K and D are smoothed with
    alpha = 1/k_period and 1/d_period, both starting from 50.

    Returns: (k, d, j)
    """
    _require_positive("k_period", k_period, "kdj")
    _require_positive("d_period", d_period, "kdj")
    closes = _as_float_array(closes)
    highest = rolling_window(highs, period).maximum
    lowest = rolling_window(lows, period).minimum

    n = len(closes)
    k = np.full(n, np.nan)
    d = np.full(n, np.nan)
    if n < period:
        return k, d, np.full(n, np.nan)

    spread = highest[period - 1 :] - lowest[period - 1 :]
    rsv = np.zeros(len(spread))
    moving = spread != 0
    rsv[moving] = (closes[period - 1 :][moving] - lowest[period - 1 :][moving]) / spread[moving] * 100

    k[period - 1 :] = ExponentialSmoother(alpha=1 / k_period, seed=KDJ_SEED).apply(rsv)
    d[period - 1 :] = ExponentialSmoother(alpha=1 / d_period, seed=KDJ_SEED).apply(k[period - 1 :])
    j = 3 * k - 2 * d

    return k, d, j


def macd(
    closes: np.ndarray,
    short_period: int = 12,
    long_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    The signal line is an EMA seeded over the MACD line from its first
    defined value, so it starts at index long_period + signal_period - 2.

    Returns: (macd_line, signal_line, histogram, ema_short, ema_long)
    """
    _require_positive("short_period", short_period, "macd")
    _require_positive("long_period", long_period, "macd")
    _require_positive("signal_period", signal_period, "macd")
    if short_period >= long_period:
        raise ConfigurationError(
            "macd",
            f"short period should be less than long period, got {short_period} >= {long_period}",
        )

    closes = _as_float_array(closes)
    ema_short = ema(closes, short_period)
    ema_long = ema(closes, long_period)

    # NaN until both legs are defined
    macd_line = ema_short - ema_long

    signal_line = np.full(len(closes), np.nan)
    defined = np.flatnonzero(~np.isnan(macd_line))
    if len(defined) > 0:
        first = defined[0]
        signal_line[first:] = ema(macd_line[first:], signal_period)

    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram, ema_short, ema_long


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """
    Relative Strength Index with Wilder smoothing.

    First value at index ``period``; RSI is 100 whenever the average loss is 0.
    """
    _require_positive("period", period, "rsi")
    closes = _as_float_array(closes)
    result = np.full(len(closes), np.nan)
    if len(closes) < period + 1:
        return result

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = np.sum(gains[:period]) / period
    avg_loss = np.sum(losses[:period]) / period
    result[period] = _rsi_value(avg_gain, avg_loss)

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = _rsi_value(avg_gain, avg_loss)

    return result


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))

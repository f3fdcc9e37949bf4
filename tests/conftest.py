import math

import pytest

from kline_indicators.schemas.market import Bar


def make_bars(closes, times=None, spread=1.0, volumes=None):
    """Bars around ``closes``: high = close + spread, low = close - spread."""
    times = times if times is not None else list(range(len(closes)))
    volumes = volumes if volumes is not None else [1000.0] * len(closes)
    return [
        Bar(time=t, open=c, high=c + spread, low=c - spread, close=c, volume=v)
        for t, c, v in zip(times, closes, volumes)
    ]


@pytest.fixture
def wave_closes():
    """Deterministic oscillating price path, 60 bars."""
    return [100 + 10 * math.sin(i / 4) + i * 0.3 for i in range(60)]


@pytest.fixture
def wave_bars(wave_closes):
    return make_bars(wave_closes)


@pytest.fixture
def day_bars():
    """Daily bars with calendar-day string timestamps."""
    closes = [10.0, 10.5, 10.2, 10.8, 11.0, 10.7, 11.3, 11.9, 11.5, 12.0,
              12.4, 12.1, 12.6, 13.0, 12.8, 13.3, 13.1, 13.6, 14.0, 13.7,
              14.2, 14.5, 14.1, 14.8, 15.0]
    times = [f"2025-03-{d:02d}" for d in range(1, len(closes) + 1)]
    return make_bars(closes, times=times, spread=0.4)

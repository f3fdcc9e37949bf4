import math
from datetime import datetime

import pytest

from conftest import make_bars
from kline_indicators.services.base import ConfigurationError
from kline_indicators.services.volume.ratio import (
    day_ratio,
    day_ratio_series,
    minute_ratio_now,
    minute_ratio_same_time,
    minute_ratio_simple,
)


def test_day_ratio():
    assert day_ratio(180, [150, 200, 170, 160, 210]) == pytest.approx(180 / 178)
    assert day_ratio(1.8e8, [1.5e8, 2.0e8, 1.7e8, 1.6e8, 2.1e8]) == pytest.approx(1.011, abs=1e-3)


def test_day_ratio_skips_missing_days():
    # 0 and -1 mark missing data, not zero activity
    assert day_ratio(100, [0, 200, -1, 50]) == pytest.approx(100 / 125)


@pytest.mark.parametrize(
    "today, past",
    [
        (-1, [150, 200, 170]),
        (100, []),
        (100, None),
        (100, [0, 0, -5]),
    ],
)
def test_day_ratio_returns_nan_sentinel(today, past):
    assert math.isnan(day_ratio(today, past))


def test_minute_ratio_same_time():
    today = [1000, 800, 900, 1200]
    past = [[900] * 240, [850] * 240, [920] * 240]
    expected = 3900 / ((900 + 850 + 920) * 4 / 3)
    assert minute_ratio_same_time(today, past) == pytest.approx(expected)


def test_minute_ratio_same_time_ignores_short_days_and_gaps():
    today = [100, None, 100]
    past = [[50, 50], [100, 0, 100], [None, 200, 100, 100]]
    # only the last two past days have 3 minutes of data
    assert minute_ratio_same_time(today, past) == pytest.approx(200 / 250)


@pytest.mark.parametrize(
    "today, past",
    [
        ([], [[1, 2]]),
        ([1], []),
        ([1, 2, 3], [[1], [1, 2]]),
        ([1], [[0, 5], [0]]),
    ],
)
def test_minute_ratio_same_time_nan(today, past):
    assert math.isnan(minute_ratio_same_time(today, past))


def test_minute_ratio_simple():
    past = [2.3e7, 2.1e7, 2.5e7, 2.2e7, 2.4e7]
    result = minute_ratio_simple(1.2e7, past, 120, 240)
    assert result == pytest.approx((1.2e7 / 120) / (2.3e7 / 240))


@pytest.mark.parametrize(
    "past, minutes, full_day",
    [([], 10, 240), ([1e6], 0, 240), ([1e6], 10, 0), ([0, 0], 10, 240)],
)
def test_minute_ratio_simple_nan(past, minutes, full_day):
    assert math.isnan(minute_ratio_simple(1e5, past, minutes, full_day))


def test_minute_ratio_now_uses_trading_calendar():
    now = datetime(2025, 1, 2, 13, 30)  # 150 trading minutes
    past = [2.4e7] * 3
    assert minute_ratio_now(1.5e7, past, now) == pytest.approx((1.5e7 / 150) / (2.4e7 / 240))
    assert math.isnan(minute_ratio_now(1.5e7, past, datetime(2025, 1, 2, 9, 0)))


def test_day_ratio_series_omits_warm_up():
    volumes = [100, 200, 300, 400, 500, 600, 0, 0, 0, 900]
    bars = make_bars([10.0] * 10, times=[f"d{i}" for i in range(10)], volumes=volumes)
    series = day_ratio_series(bars, window=3)

    assert len(series) == 7
    assert series[0].time == "d3"
    assert series[0].value == pytest.approx(400 / 200)
    # baseline of d9 is three zero-volume days
    assert series[-1].time == "d9"
    assert series[-1].value == 0.0


def test_day_ratio_series_short_input_and_bad_window(day_bars):
    assert day_ratio_series(day_bars[:3], window=5) == []
    with pytest.raises(ConfigurationError):
        day_ratio_series(day_bars, window=0)


def test_day_ratio_skips_none_entries():
    assert day_ratio(100, [None, 200, 100]) == pytest.approx(100 / 150)


@pytest.mark.parametrize("today", [None, float("nan")])
def test_day_ratio_without_today_volume_is_nan(today):
    assert math.isnan(day_ratio(today, [200, 100]))


def test_minute_ratio_simple_without_today_volume_is_nan():
    assert math.isnan(minute_ratio_simple(None, [24000], 60))


def test_day_ratio_series_accepts_missing_day_markers():
    bars = [
        {"time": f"d{i}", "open": 1, "high": 1, "low": 1, "close": 1, "volume": v}
        for i, v in enumerate([100, -1, 200, 300])
    ]
    series = day_ratio_series(bars, window=2)
    assert [p.time for p in series] == ["d2", "d3"]
    # the -1 day is left out of the baseline
    assert series[0].value == pytest.approx(200 / 100)
    assert series[1].value == pytest.approx(300 / 200)
    # a missing day as today's volume gives the 0.0 placeholder
    assert day_ratio_series(bars[:2], window=1)[0].value == 0.0

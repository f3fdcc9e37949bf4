import numpy as np
import pytest

from conftest import make_bars
from kline_indicators.services.aggregation.bars import aggregate_bars, aggregate_ohlc
from kline_indicators.services.base import ConfigurationError


def test_two_bar_buckets():
    result = aggregate_ohlc(
        [1, 2, 3, 4],
        [2, 3, 4, 5],
        [0, 1, 2, 3],
        [1.5, 2.5, 3.5, 4.5],
        ["t0", "t1", "t2", "t3"],
        2,
    )
    assert len(result) == 2

    first, second = result
    assert (first.time, first.open, first.high, first.low, first.close) == ("t1", 1, 3, 0, 2.5)
    assert (second.time, second.open, second.high, second.low, second.close) == ("t3", 3, 5, 2, 4.5)
    assert first.volume is None


def test_incomplete_trailing_bucket_is_dropped():
    closes = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0]
    result = aggregate_ohlc(closes, closes, closes, closes, list(range(7)), 3)
    assert [bar.time for bar in result] == [2, 5]


def test_volume_is_summed_per_bucket():
    result = aggregate_ohlc(
        [1, 1, 1, 1], [1, 1, 1, 1], [1, 1, 1, 1], [1, 1, 1, 1], [0, 1, 2, 3], 2,
        volumes=[10, 20, 30, 40],
    )
    assert [bar.volume for bar in result] == [30.0, 70.0]


def test_numpy_arrays_are_accepted():
    data = np.array([1.0, 2.0, 3.0, 4.0])
    result = aggregate_ohlc(data, data, data, data, ["a", "b", "c", "d"], 4)
    assert len(result) == 1
    assert result[0].high == 4.0 and result[0].low == 1.0


@pytest.mark.parametrize(
    "args",
    [
        ([1, 2], [1, 2], [1, 2], [1], ["a", "b"], 1),
        ("1,2", [1, 2], [1, 2], [1, 2], ["a", "b"], 1),
        ([1, 2], [1, 2], [1, 2], [1, 2], None, 1),
        ([1, 2], [1, 2], [1, 2], [1, 2], ["a", "b"], 0),
        ([1, 2], [1, 2], [1, 2], [1, 2], ["a", "b"], -2),
    ],
)
def test_invalid_input_yields_empty_result(args):
    assert aggregate_ohlc(*args) == []


def test_strict_mode_rejects_non_positive_window():
    with pytest.raises(ConfigurationError):
        aggregate_ohlc([1], [1], [1], [1], ["a"], 0, strict=True)


def test_window_larger_than_input():
    assert aggregate_ohlc([1], [1], [1], [1], ["a"], 5) == []


def test_aggregate_bars():
    bars = make_bars([10.0, 11.0, 12.0, 13.0, 14.0, 15.0], volumes=[1, 2, 3, 4, 5, 6])
    result = aggregate_bars(bars, 3)
    assert len(result) == 2
    assert result[0].open == 10.0 and result[0].close == 12.0
    assert result[0].high == 13.0 and result[0].low == 9.0
    assert result[1].time == 5
    assert result[1].volume == 15.0


def test_aggregate_bars_without_volume():
    bars = [b.model_copy(update={"volume": None}) for b in make_bars([1.0, 2.0])]
    assert aggregate_bars(bars, 2)[0].volume is None


def test_aggregate_bars_default_window_from_settings():
    from kline_indicators.core.config import settings

    bars = [
        {"time": i, "open": 1.0, "high": 2.0, "low": 0.5, "close": 1.5, "volume": 10}
        for i in range(12)
    ]
    result = aggregate_bars(bars)
    assert len(result) == 12 // settings.bucket_size
    assert result[0].volume == 10.0 * settings.bucket_size


def test_int64_epoch_times_pass_through_exactly():
    times = np.array([1700000000123456789, 1700000000123456790], dtype=np.int64)
    result = aggregate_ohlc([1, 2], [2, 3], [0, 1], [1, 2], times, 2)
    assert result[0].time == 1700000000123456790
    assert type(result[0].time) is int


@pytest.mark.parametrize(
    "highs, closes",
    [
        ([2, None], [1, 2]),
        ([2, float("nan")], [1, 2]),
        ([2, 3], [1, "n/a"]),
    ],
)
def test_gap_in_prices_yields_empty_result(highs, closes):
    assert aggregate_ohlc([1, 2], highs, [0, 1], closes, ["a", "b"], 2) == []


def test_missing_volume_entries_count_as_zero():
    result = aggregate_ohlc([1, 1], [1, 1], [1, 1], [1, 1], [0, 1], 2, volumes=[5, None])
    assert result[0].volume == 5.0


def test_boolean_window_is_rejected():
    assert aggregate_ohlc([1, 2], [1, 2], [1, 2], [1, 2], ["a", "b"], True) == []
    with pytest.raises(ConfigurationError):
        aggregate_ohlc([1, 2], [1, 2], [1, 2], [1, 2], ["a", "b"], True, strict=True)

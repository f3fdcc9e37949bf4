"""
Bar Frame Adapters

Convert between Bar sequences, per-field float arrays and {time, value}
Series. Shared by every bar-aligned pipeline.
"""

from typing import Sequence, Union

import numpy as np

from kline_indicators.schemas.market import Bar, PriceSource
from kline_indicators.schemas.indicators import Point, Series

BarsInput = Sequence[Union[Bar, dict]]


def coerce_bars(bars: BarsInput) -> list[Bar]:
    """Accept Bar models or plain dicts."""
    return [b if isinstance(b, Bar) else Bar.model_validate(b) for b in bars]


def bar_column(bars: Sequence[Bar], source: Union[PriceSource, str]) -> np.ndarray:
    """Extract one field as a float array; missing volume counts as 0."""
    field = PriceSource(source).value
    return np.array([getattr(b, field) or 0.0 for b in bars], dtype=float)


def to_series(bars: Sequence[Bar], values: np.ndarray) -> Series:
    """Pair values with bar timestamps, skipping undefined (NaN) positions."""
    return [
        Point(time=bar.time, value=float(value))
        for bar, value in zip(bars, values)
        if not np.isnan(value)
    ]

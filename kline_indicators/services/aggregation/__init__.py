"""
Bar Aggregation Service

Downsamples bars into coarser periods.
"""

from kline_indicators.services.aggregation.bars import aggregate_ohlc, aggregate_bars

__all__ = ["aggregate_ohlc", "aggregate_bars"]

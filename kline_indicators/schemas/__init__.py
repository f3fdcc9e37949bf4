"""
Kline Indicator Schema Contracts

This module defines all JSON contracts between the engine and its callers.
"""

from kline_indicators.schemas.market import (
    Bar,
    AggregatedBar,
    PriceSource,
    Timestamp,
)
from kline_indicators.schemas.indicators import (
    IndicatorName,
    IndicatorRequest,
    IndicatorResponse,
    Point,
    HistogramPoint,
    HistogramSign,
    Series,
    MultiSeries,
    BandSeries,
    KDJSeries,
    MACDSeries,
    RSISeries,
    MAKind,
    MAParams,
    BollingerParams,
    DonchianParams,
    KDJParams,
    MACDParams,
    RSIParams,
    VolumeRatioParams,
)

__all__ = [
    # Market
    "Bar",
    "AggregatedBar",
    "PriceSource",
    "Timestamp",
    # Indicators
    "IndicatorName",
    "IndicatorRequest",
    "IndicatorResponse",
    "Point",
    "HistogramPoint",
    "HistogramSign",
    "Series",
    "MultiSeries",
    "BandSeries",
    "KDJSeries",
    "MACDSeries",
    "RSISeries",
    # Parameters
    "MAKind",
    "MAParams",
    "BollingerParams",
    "DonchianParams",
    "KDJParams",
    "MACDParams",
    "RSIParams",
    "VolumeRatioParams",
]

"""
CONTRACT 2: Indicator Engine

Input: IndicatorRequest (bars + indicators to compute)
Output: IndicatorResponse

Every output point carries the exact timestamp of the input bar it belongs
to. Series hold only bars whose warm-up is satisfied.
"""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field, model_validator

from kline_indicators.schemas.market import Bar, PriceSource, Timestamp


# =============================================================================
# ENUMS
# =============================================================================


class IndicatorName(str, Enum):
    MA = "ma"
    BOLLINGER = "bollinger"
    DONCHIAN = "donchian"
    KDJ = "kdj"
    MACD = "macd"
    RSI = "rsi"
    VOLUME_RATIO = "volume_ratio"


class MAKind(str, Enum):
    SMA = "sma"
    EMA = "ema"
    WMA = "wma"


class HistogramSign(str, Enum):
    POSITIVE = "POSITIVE"
    NON_POSITIVE = "NON_POSITIVE"


# =============================================================================
# OUTPUT: Points and Series
# =============================================================================


class Point(BaseModel):
    """One engine output unit."""

    time: Timestamp
    value: float


class HistogramPoint(Point):
    """MACD histogram bar with its sign classification."""

    sign: HistogramSign
    color: Optional[str] = None


Series = list[Point]


class BandSeries(BaseModel):
    """Three aligned lines (Bollinger, Donchian)."""

    upper: Series = Field(default_factory=list)
    middle: Series = Field(default_factory=list)
    lower: Series = Field(default_factory=list)


class KDJSeries(BaseModel):
    k: Series = Field(default_factory=list)
    d: Series = Field(default_factory=list)
    j: Series = Field(default_factory=list)


class MACDSeries(BaseModel):
    """MACD and signal lines with their display colors, plus the histogram."""

    macd: Series = Field(default_factory=list)
    signal: Series = Field(default_factory=list)
    histogram: list[HistogramPoint] = Field(default_factory=list)
    macd_color: Optional[str] = None
    signal_color: Optional[str] = None


class RSISeries(BaseModel):
    """RSI line plus constant reference bands on the same timestamps."""

    rsi: Series = Field(default_factory=list)
    upper: Series = Field(default_factory=list)
    lower: Series = Field(default_factory=list)


MultiSeries = Union[BandSeries, KDJSeries, MACDSeries, RSISeries]


# =============================================================================
# INPUT: Indicator parameters
# =============================================================================


class MAParams(BaseModel):
    period: int = Field(default=20, gt=0)
    kind: MAKind = MAKind.SMA
    source: PriceSource = PriceSource.CLOSE


class BollingerParams(BaseModel):
    period: int = Field(default=20, gt=0)
    multiplier: float = Field(default=2.0, ge=0)


class DonchianParams(BaseModel):
    period: int = Field(default=20, gt=0)


class KDJParams(BaseModel):
    period: int = Field(default=9, gt=0)
    k_period: int = Field(default=3, gt=0)
    d_period: int = Field(default=3, gt=0)


class MACDParams(BaseModel):
    short_period: int = Field(default=12, gt=0)
    long_period: int = Field(default=26, gt=0)
    signal_period: int = Field(default=9, gt=0)

    @model_validator(mode="after")
    def check_short_below_long(self) -> "MACDParams":
        if self.short_period >= self.long_period:
            raise ValueError("short_period must be less than long_period")
        return self


class RSIParams(BaseModel):
    period: int = Field(default=14, gt=0)
    upper_level: float = 70.0
    lower_level: float = 30.0


class VolumeRatioParams(BaseModel):
    window: int = Field(default=5, gt=0)


# =============================================================================
# INPUT: IndicatorRequest
# =============================================================================


class IndicatorRequest(BaseModel):
    """
    Request for several indicators over one bar sequence.

    Note: ``params`` is keyed by indicator name; indicators without an entry
    use the configured defaults.
    """

    symbol: Optional[str] = Field(None, description="Label echoed back in the response")
    bars: list[Bar] = Field(..., description="Time ordered bars")
    indicators: list[IndicatorName] = Field(..., min_length=1)
    params: dict[IndicatorName, dict] = Field(default_factory=dict)


# =============================================================================
# OUTPUT: IndicatorResponse
# =============================================================================


class IndicatorResponse(BaseModel):
    """All requested indicators, keyed by name."""

    symbol: Optional[str] = None
    bar_count: int
    results: dict[IndicatorName, Union[Series, MultiSeries]] = Field(default_factory=dict)

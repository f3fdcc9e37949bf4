"""
Indicator Engine Service Implementation

Runs several indicator pipelines over one bar sequence in one call.
Pure Python/NumPy calculations; no state is kept between calls.
"""

import logging
from functools import lru_cache
from typing import Callable, Optional, Union

from pydantic import BaseModel, ValidationError

from kline_indicators.core.config import settings
from kline_indicators.schemas.market import Bar
from kline_indicators.schemas.indicators import (
    BollingerParams,
    DonchianParams,
    IndicatorName,
    IndicatorRequest,
    IndicatorResponse,
    KDJParams,
    MACDParams,
    MAParams,
    MultiSeries,
    RSIParams,
    Series,
    VolumeRatioParams,
)
from kline_indicators.services.base import ConfigurationError
from kline_indicators.services.indicators.interface import IndicatorServiceInterface
from kline_indicators.services.indicators.series import (
    bollinger_series,
    donchian_series,
    kdj_series,
    ma_series,
    macd_series,
    rsi_series,
)
from kline_indicators.services.volume.ratio import day_ratio_series

logger = logging.getLogger(__name__)

Pipeline = Callable[..., Union[Series, MultiSeries]]


def _default_params() -> dict[IndicatorName, BaseModel]:
    """Parameter models built from the configured defaults."""
    return {
        IndicatorName.MA: MAParams(period=settings.ma_period, kind=settings.ma_kind),
        IndicatorName.BOLLINGER: BollingerParams(
            period=settings.bollinger_period,
            multiplier=settings.bollinger_multiplier,
        ),
        IndicatorName.DONCHIAN: DonchianParams(period=settings.donchian_period),
        IndicatorName.KDJ: KDJParams(
            period=settings.kdj_period,
            k_period=settings.kdj_k_period,
            d_period=settings.kdj_d_period,
        ),
        IndicatorName.MACD: MACDParams(
            short_period=settings.macd_short_period,
            long_period=settings.macd_long_period,
            signal_period=settings.macd_signal_period,
        ),
        IndicatorName.RSI: RSIParams(
            period=settings.rsi_period,
            upper_level=settings.rsi_upper_level,
            lower_level=settings.rsi_lower_level,
        ),
        IndicatorName.VOLUME_RATIO: VolumeRatioParams(window=settings.volume_ratio_window),
    }


_PIPELINES: dict[IndicatorName, Pipeline] = {
    IndicatorName.MA: ma_series,
    IndicatorName.BOLLINGER: bollinger_series,
    IndicatorName.DONCHIAN: donchian_series,
    IndicatorName.KDJ: kdj_series,
    IndicatorName.MACD: macd_series,
    IndicatorName.RSI: rsi_series,
    IndicatorName.VOLUME_RATIO: day_ratio_series,
}


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Computes charting indicators from OHLCV bars.
    All calculations are deterministic and reproducible, and no state is
    kept between calls, so one instance can serve many threads.

    Usage:
        service = get_indicator_service()
        response = service.execute(
            IndicatorRequest(
                symbol="600519",
                bars=bars,
                indicators=["macd", "rsi"],
                params={"rsi": {"period": 6}},
            )
        )
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    def execute(self, input_data: IndicatorRequest) -> IndicatorResponse:
        """Calculate the requested indicators over the request's bars."""
        # All parameters are validated before any pipeline runs
        resolved = self._resolve_all(input_data.indicators, input_data.params)

        results = {}
        for indicator, params in resolved.items():
            # dict(model) keeps enum members, which the pipelines accept
            results[indicator] = _PIPELINES[indicator](input_data.bars, **dict(params))

        logger.debug(
            f"{self.name}: {len(input_data.bars)} bars, "
            f"indicators={[i.value for i in resolved]}"
        )
        return IndicatorResponse(
            symbol=input_data.symbol,
            bar_count=len(input_data.bars),
            results=results,
        )

    def calculate(
        self, indicator: IndicatorName, bars: list[Bar], params: Optional[dict] = None
    ) -> Union[Series, MultiSeries]:
        """Run one indicator pipeline with defaults merged under ``params``."""
        indicator = self._indicator_name(indicator)
        resolved = self.resolve_params(indicator, params)
        return _PIPELINES[indicator](bars, **dict(resolved))

    def health_check(self) -> bool:
        return True

    def resolve_params(self, indicator: IndicatorName, overrides: Optional[dict] = None) -> BaseModel:
        """Merge overrides onto the configured defaults and validate them."""
        indicator = self._indicator_name(indicator)
        defaults = _default_params()[indicator]
        merged = {**defaults.model_dump(), **(overrides or {})}
        try:
            return type(defaults).model_validate(merged)
        except ValidationError as e:
            raise ConfigurationError(
                self.name,
                f"Invalid parameters for {indicator.value}",
                details={"errors": e.errors(include_url=False)},
            ) from e

    def _resolve_all(self, indicators: list, params: dict) -> dict[IndicatorName, BaseModel]:
        overrides = {self._indicator_name(k): v for k, v in params.items()}
        resolved = {}
        for indicator in indicators:
            indicator = self._indicator_name(indicator)
            resolved[indicator] = self.resolve_params(indicator, overrides.get(indicator))
        return resolved

    def _indicator_name(self, indicator) -> IndicatorName:
        try:
            return IndicatorName(indicator)
        except ValueError:
            raise ConfigurationError(self.name, f"Unknown indicator: {indicator}") from None


@lru_cache()
def get_indicator_service() -> IndicatorService:
    """Get cached indicator service instance."""
    return IndicatorService()

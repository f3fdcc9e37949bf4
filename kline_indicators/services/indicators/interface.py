"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Optional, Union

from pydantic import BaseModel

from kline_indicators.services.base import BaseService
from kline_indicators.schemas.market import Bar
from kline_indicators.schemas.indicators import (
    IndicatorName,
    IndicatorRequest,
    IndicatorResponse,
    MultiSeries,
    Series,
)


class IndicatorServiceInterface(BaseService[IndicatorRequest, IndicatorResponse]):
    """
    Indicator Engine Service Contract.

    INPUT: IndicatorRequest
        - bars: time-ordered Bars
        - indicators: names of the indicators to compute
        - params: optional per-indicator parameters

    OUTPUT: IndicatorResponse
        - results: Series or MultiSeries per indicator
        - bar_count: number of input bars
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    def execute(self, input_data: IndicatorRequest) -> IndicatorResponse:
        """Calculate every requested indicator over the request's bars."""
        pass

    @abstractmethod
    def calculate(
        self, indicator: IndicatorName, bars: list[Bar], params: Optional[dict] = None
    ) -> Union[Series, MultiSeries]:
        """
        Run one indicator pipeline.

        Args:
            indicator: Indicator to compute
            bars: Time-ordered bars
            params: Parameter overrides, merged over the configured defaults

        Returns:
            Series or MultiSeries aligned to the input bars

        Raises:
            ConfigurationError: Unknown indicator or invalid parameters
        """
        pass

    @abstractmethod
    def resolve_params(self, indicator: IndicatorName, overrides: Optional[dict] = None) -> BaseModel:
        """Validated parameter model for one indicator."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass

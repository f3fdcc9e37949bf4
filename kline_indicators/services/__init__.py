"""
Kline Indicator Services

Service layer containing all indicator computation.
Each service has a defined interface (contract) and implementation.
"""

from kline_indicators.services.base import BaseService, ServiceError, ConfigurationError

__all__ = ["BaseService", "ServiceError", "ConfigurationError"]

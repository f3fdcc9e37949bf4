"""
CONTRACT 1: Market Data

Input bars handed to the engine by the data layer, and the coarser bars
produced by aggregation.

Bars arrive already ordered by time and already validated.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Optional, Union

import numpy as np
from pydantic import BaseModel, BeforeValidator, Field


def native_scalar(value: Any) -> Any:
    """Unwrap numpy scalars (np.int64 etc.) into the matching Python value."""
    if isinstance(value, np.generic):
        return value.item()
    return value


# Opaque to the engine: compared and forwarded, never interpreted.
# numpy scalars are unwrapped first so an int64 epoch stays an exact int.
Timestamp = Annotated[Union[int, float, str, datetime, date], BeforeValidator(native_scalar)]


# =============================================================================
# ENUMS
# =============================================================================


class PriceSource(str, Enum):
    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    CLOSE = "close"
    VOLUME = "volume"


# =============================================================================
# BARS
# =============================================================================


class Bar(BaseModel):
    """Single candlestick data point."""

    time: Timestamp
    open: float
    high: float
    low: float
    close: float
    # Non-positive volume marks a missing day and is kept as given
    volume: Optional[float] = None


class AggregatedBar(BaseModel):
    """Bar built from a bucket of consecutive input bars."""

    time: Timestamp = Field(..., description="Time of the last bar in the bucket")
    open: float = Field(..., description="Open of the first bar in the bucket")
    high: float
    low: float
    close: float = Field(..., description="Close of the last bar in the bucket")
    volume: Optional[float] = None

"""
Market Hours Utility

Handles China A-share timezone, trading sessions and trading-minute counting.
"""

from datetime import datetime, date
from enum import Enum
from typing import Optional
import pytz

CST = pytz.timezone("Asia/Shanghai")

# Market timing (CST)
CALL_AUCTION_START = "09:15"
MARKET_OPEN = "09:30"
MIDDAY_BREAK_START = "11:30"
MIDDAY_BREAK_END = "13:00"
MARKET_CLOSE = "15:00"

# 09:30-11:30 + 13:00-15:00
FULL_DAY_MINUTES = 240


class MarketSession(str, Enum):
    CALL_AUCTION = "CALL_AUCTION"
    MORNING = "MORNING"
    MIDDAY_BREAK = "MIDDAY_BREAK"
    AFTERNOON = "AFTERNOON"
    CLOSED = "CLOSED"


def _minutes_of_day(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


_OPEN = _minutes_of_day(MARKET_OPEN)
_BREAK_START = _minutes_of_day(MIDDAY_BREAK_START)
_BREAK_END = _minutes_of_day(MIDDAY_BREAK_END)
_CLOSE = _minutes_of_day(MARKET_CLOSE)


def get_cst_now() -> datetime:
    """Get current time in CST."""
    return datetime.now(CST)


def to_exchange_time(dt: datetime) -> datetime:
    """
    Express a datetime in exchange-local wall-clock time.

    Naive datetimes are assumed to already be exchange-local.
    """
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(CST)


def is_weekend(dt: date) -> bool:
    """Check if date is a weekend."""
    return dt.weekday() >= 5  # Saturday = 5, Sunday = 6


def elapsed_trading_minutes(dt: datetime) -> int:
    """
    Minutes of continuous trading elapsed at ``dt``, excluding the midday break.

    Returns 0 before the open and FULL_DAY_MINUTES at or after the close.
    """
    local = to_exchange_time(dt)
    minute = local.hour * 60 + local.minute

    if minute < _OPEN:
        return 0
    if minute >= _CLOSE:
        return FULL_DAY_MINUTES

    morning = _BREAK_START - _OPEN
    if minute <= _BREAK_START:
        return minute - _OPEN
    if minute <= _BREAK_END:
        return morning
    return min(FULL_DAY_MINUTES, morning + minute - _BREAK_END)


def get_market_session(dt: Optional[datetime] = None) -> MarketSession:
    """Get market session at ``dt`` (defaults to now)."""
    if dt is None:
        dt = get_cst_now()

    local = to_exchange_time(dt)
    if is_weekend(local.date()):
        return MarketSession.CLOSED

    time_str = local.strftime("%H:%M")

    if time_str < CALL_AUCTION_START:
        return MarketSession.CLOSED
    elif time_str < MARKET_OPEN:
        return MarketSession.CALL_AUCTION
    elif time_str < MIDDAY_BREAK_START:
        return MarketSession.MORNING
    elif time_str < MIDDAY_BREAK_END:
        return MarketSession.MIDDAY_BREAK
    elif time_str < MARKET_CLOSE:
        return MarketSession.AFTERNOON
    else:
        return MarketSession.CLOSED


def is_trading_time(dt: Optional[datetime] = None) -> bool:
    """Check if continuous trading is in progress."""
    session = get_market_session(dt)
    return session in (MarketSession.MORNING, MarketSession.AFTERNOON)

"""
Kline Indicator Engine

Derives charting indicator series (MA, Bollinger, Donchian, KDJ, MACD, RSI,
volume ratio) and coarser bars from a time-ordered OHLCV bar sequence.
"""

__version__ = "0.1.0"

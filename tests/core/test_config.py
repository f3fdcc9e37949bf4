from kline_indicators.core.config import Settings, get_settings


def test_defaults():
    s = Settings()
    assert (s.macd_short_period, s.macd_long_period, s.macd_signal_period) == (12, 26, 9)
    assert (s.kdj_period, s.kdj_k_period, s.kdj_d_period) == (9, 3, 3)
    assert s.rsi_period == 14
    assert s.full_day_minutes == 240


def test_environment_override(monkeypatch):
    monkeypatch.setenv("KLINE_RSI_PERIOD", "6")
    monkeypatch.setenv("KLINE_BOLLINGER_MULTIPLIER", "2.5")
    s = Settings()
    assert s.rsi_period == 6
    assert s.bollinger_multiplier == 2.5


def test_get_settings_is_cached():
    assert get_settings() is get_settings()

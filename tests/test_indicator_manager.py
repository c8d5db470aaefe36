"""Tests for the indicator registry and chart composition."""
from dataclasses import dataclass
from typing import ClassVar

import pytest

from chart_indicators.config import IndicatorDefaults
from chart_indicators.core.exceptions import ConfigurationError, UnknownIndicatorError
from chart_indicators.indicators import (
    ATRConfig,
    Bar,
    BollingerConfig,
    EMAConfig,
    IndicatorManager,
    MACDConfig,
    Placement,
    RSIConfig,
    SARConfig,
    SMAConfig,
    StochasticConfig,
    VolumeConfig,
    calculate_indicator,
    default_chart_configs,
    list_indicators,
    macd,
    sma,
)
from chart_indicators.indicators.registry import INDICATOR_REGISTRY
from tests.fixtures.synthetic_data import bars_from_tuples, create_test_bars


@dataclass(frozen=True)
class UnregisteredConfig:
    name: ClassVar[str] = "ichimoku"

    def warmup_bars(self) -> int:
        return 1

    def label(self) -> str:
        return "ICHIMOKU"


class TestRegistry:
    """Calculator registration and dispatch."""

    def test_all_kinds_registered(self):
        assert list_indicators() == [
            "atr", "bollinger", "ema", "macd", "rsi", "sar", "sma", "stochastic", "volume",
        ]

    def test_metadata(self):
        assert INDICATOR_REGISTRY.get_metadata("rsi") == {"description": "Relative Strength Index"}
        assert INDICATOR_REGISTRY.is_registered("macd")
        assert not INDICATOR_REGISTRY.is_registered("ichimoku")

    def test_unknown_kind_raises(self):
        with pytest.raises(UnknownIndicatorError) as exc_info:
            calculate_indicator(create_test_bars(5), UnregisteredConfig())
        assert "ichimoku" in str(exc_info.value)
        assert "rsi" in exc_info.value.known
        assert isinstance(exc_info.value, ValueError)

    def test_dispatch_matches_direct_call(self, sample_bars):
        closes = [b.close for b in sample_bars]
        result = calculate_indicator(sample_bars, MACDConfig(fast=5, slow=10, signal=4))
        direct = macd(closes, 5, 10, 4)
        assert result == {
            "macd": direct.macd,
            "macdSignal": direct.signal,
            "histogram": direct.histogram,
        }

    def test_source_selection(self, sample_bars):
        result = calculate_indicator(sample_bars, SMAConfig(period=5, source="high"))
        assert result["ma5"] == sma([b.high for b in sample_bars], 5)

    def test_short_input_logs_warmup(self, captured_logs):
        calculate_indicator(create_test_bars(3), RSIConfig(period=14))
        assert any("warmup incomplete" in message for message in captured_logs)

    def test_volume_pane(self):
        bars = bars_from_tuples([(10, 8, 9), (11, 9, 10.5), (11, 8, 8.5)])
        result = calculate_indicator(bars, VolumeConfig())
        assert result["volume"] == [100.0, 100.0, 100.0]
        # open is the previous close; first bar opens at its own close
        assert result["volumeUp"] == [True, True, False]


class TestIndicatorConfigs:
    """Config metadata used by the chart panel."""

    def test_labels(self):
        assert RSIConfig().label() == "RSI(14)"
        assert MACDConfig().label() == "MACD(12,26,9)"
        assert StochasticConfig().label() == "STOCH(14,3)"
        assert ATRConfig().label() == "ATR(14)"
        assert VolumeConfig().label() == "Volume"

    def test_fields(self):
        assert SMAConfig(period=7).fields() == ("ma7",)
        assert EMAConfig(period=20).fields() == ("ema20",)
        assert BollingerConfig().fields() == ("bbUpper", "bbMiddle", "bbLower")
        assert MACDConfig().fields() == ("macd", "macdSignal", "histogram")
        assert StochasticConfig().fields() == ("stochK", "stochD")

    def test_reference_levels(self):
        assert RSIConfig().reference_levels() == (70.0, 30.0, 50.0)
        assert StochasticConfig().reference_levels() == (80.0, 20.0)
        assert MACDConfig().reference_levels() == (0.0,)
        assert ATRConfig().reference_levels() == ()

    def test_placement(self):
        assert SARConfig.placement is Placement.OVERLAY
        assert BollingerConfig.placement is Placement.OVERLAY
        assert RSIConfig.placement is Placement.PANE

    def test_warmup_bars(self):
        assert MACDConfig().warmup_bars() == 34
        assert StochasticConfig().warmup_bars() == 16
        assert RSIConfig().warmup_bars() == 15

    def test_unknown_source_rejected(self):
        with pytest.raises(ConfigurationError):
            SMAConfig(period=5, source="vwap")


class TestDefaultLayout:
    """Chart layout built from settings."""

    def test_default_layout(self):
        configs = default_chart_configs(IndicatorDefaults())
        assert [config.name for config in configs] == [
            "sma", "ema", "bollinger", "sar", "rsi", "macd", "stochastic", "atr", "volume",
        ]
        assert configs[4] == RSIConfig(period=14)

    def test_layout_follows_defaults(self):
        defaults = IndicatorDefaults(overlays="ema", panes="rsi, ATR", rsi_period=9, atr_period=5)
        assert default_chart_configs(defaults) == [EMAConfig(period=20), RSIConfig(period=9), ATRConfig(period=5)]

    def test_unknown_layout_name(self):
        with pytest.raises(ConfigurationError):
            default_chart_configs(IndicatorDefaults(panes="rsi,ichimoku"))


class TestIndicatorManager:
    """Composition of many indicators over one bar series."""

    def test_merge_onto_bars(self, sample_bars):
        manager = IndicatorManager([SMAConfig(period=20), RSIConfig(), MACDConfig()])
        rows = manager.merge_onto_bars(sample_bars)

        assert len(rows) == len(sample_bars)
        assert set(rows[0]) == {
            "time", "open", "high", "low", "close", "volume",
            "ma20", "rsi", "macd", "macdSignal", "histogram",
        }
        assert rows[0]["ma20"] is None
        assert rows[19]["ma20"] == sma([b.close for b in sample_bars], 20)[19]
        assert rows[5]["time"] == sample_bars[5].time
        assert rows[5]["close"] == sample_bars[5].close

    def test_merge_empty(self):
        assert IndicatorManager([RSIConfig()]).merge_onto_bars([]) == []

    def test_default_manager_uses_settings_layout(self, sample_bars):
        manager = IndicatorManager()
        assert len(manager.overlays()) == 4
        assert len(manager.panes()) == 5
        computed = manager.compute(sample_bars)
        assert set(computed) == set(manager.fields())
        assert all(len(series) == len(sample_bars) for series in computed.values())

    def test_duplicate_field_rejected(self):
        with pytest.raises(ConfigurationError):
            IndicatorManager([SMAConfig(period=20), SMAConfig(period=20, source="open")])

    def test_same_kind_different_periods(self, sample_bars):
        manager = IndicatorManager([SMAConfig(period=7), SMAConfig(period=20)])
        computed = manager.compute(sample_bars)
        assert computed["ma7"][6] is not None
        assert computed["ma20"][6] is None

    def test_cache_reuses_results(self, sample_bars):
        manager = IndicatorManager([RSIConfig(), ATRConfig()], cache_size=8)
        first = manager.compute(sample_bars)
        second = manager.compute(list(sample_bars))
        assert first == second
        assert len(manager._cache) == 2

        manager.clear_cache()
        assert len(manager._cache) == 0

    def test_cache_results_are_copies(self, sample_bars):
        manager = IndicatorManager([RSIConfig()], cache_size=8)
        first = manager.compute(sample_bars)
        first["rsi"][20] = -1.0
        assert manager.compute(sample_bars)["rsi"][20] != -1.0

    def test_cache_evicts_oldest(self):
        manager = IndicatorManager([RSIConfig()], cache_size=1)
        manager.compute(create_test_bars(30))
        manager.compute(create_test_bars(31))
        assert len(manager._cache) == 1

    def test_unhashable_bar_time_skips_cache(self, sample_bars):
        bars = [Bar(time={"t": b.time}, open=b.open, high=b.high, low=b.low, close=b.close) for b in sample_bars]
        manager = IndicatorManager([RSIConfig()], cache_size=8)
        computed = manager.compute(bars)
        assert computed["rsi"] == IndicatorManager([RSIConfig()], cache_size=0).compute(sample_bars)["rsi"]
        assert len(manager._cache) == 0

    def test_cache_disabled(self, sample_bars):
        manager = IndicatorManager([RSIConfig()], cache_size=0)
        manager.compute(sample_bars)
        assert len(manager._cache) == 0

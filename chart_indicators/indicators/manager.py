"""Indicator Manager - composes a chart's indicator set over one bar series.

One manager describes one chart layout (which overlays are drawn over price
and which oscillator panes sit below it). On every redraw the host passes
the full bar history; the manager runs each indicator once and zips the
results back onto the bars under named fields.
"""

from collections import OrderedDict
from typing import Any, Dict, List, Optional, Sequence, Tuple

from chart_indicators.config import settings
from chart_indicators.core.exceptions import ConfigurationError
from chart_indicators.logger import logger
from .base import Bar, IndicatorConfig, Placement, make_config
from .registry import calculate_indicator

# Bar keys an indicator field may not shadow ("volume" is shared with the volume pane)
_BAR_FIELDS = ("time", "open", "high", "low", "close")


def default_chart_configs(defaults=None) -> List[IndicatorConfig]:
    """Build the default chart layout from settings.

    Args:
        defaults: IndicatorDefaults section (None = global settings)

    Returns:
        Overlay configs followed by pane configs, in configured order

    Raises:
        ConfigurationError: If the layout names an unknown kind
    """
    defaults = defaults or settings.INDICATORS
    params = {
        "sma": {"period": defaults.sma_period},
        "ema": {"period": defaults.ema_period},
        "bollinger": {"period": defaults.bollinger_period, "k": defaults.bollinger_k},
        "sar": {"af0": defaults.sar_af0, "af_max": defaults.sar_af_max},
        "rsi": {"period": defaults.rsi_period},
        "macd": {"fast": defaults.macd_fast, "slow": defaults.macd_slow, "signal": defaults.macd_signal},
        "stochastic": {"k_period": defaults.stoch_k_period, "d_period": defaults.stoch_d_period},
        "atr": {"period": defaults.atr_period},
        "volume": {},
    }

    configs = []
    for name in defaults.overlay_names() + defaults.pane_names():
        if name not in params:
            raise ConfigurationError(
                f"Unknown indicator in chart layout: {name}. Choose from: {', '.join(sorted(params))}"
            )
        configs.append(make_config(name, **params[name]))
    return configs


class IndicatorManager:
    """Computes a fixed set of indicators over whole bar series.

    Results are cached per (config, bars) so redrawing an unchanged series
    does not recompute. Bars are frozen, so the cache key is the bar tuple.
    """

    def __init__(
        self,
        configs: Optional[Sequence[IndicatorConfig]] = None,
        cache_size: Optional[int] = None
    ):
        """Initialize indicator manager.

        Args:
            configs: Indicator configs (None = default layout from settings)
            cache_size: Max cached indicator results (None = settings, 0 = off)

        Raises:
            ConfigurationError: If two configs write the same output field
        """
        self.configs: List[IndicatorConfig] = list(configs) if configs is not None else default_chart_configs()
        self.cache_size = settings.CHART.cache_size if cache_size is None else cache_size
        self._cache: "OrderedDict[Tuple[IndicatorConfig, Tuple[Bar, ...]], Dict[str, list]]" = OrderedDict()
        self._check_fields()

        logger.debug(
            f"Chart layout: {len(self.overlays())} overlays, {len(self.panes())} panes "
            f"({', '.join(config.label() for config in self.configs)})"
        )

    def _check_fields(self):
        owners: Dict[str, str] = {}
        for config in self.configs:
            for field in config.fields():
                if field in _BAR_FIELDS:
                    raise ConfigurationError(f"{config.label()}: field '{field}' shadows a bar field")
                if field in owners:
                    raise ConfigurationError(
                        f"{config.label()}: field '{field}' already written by {owners[field]}"
                    )
                owners[field] = config.label()

    def overlays(self) -> List[IndicatorConfig]:
        return [config for config in self.configs if config.placement is Placement.OVERLAY]

    def panes(self) -> List[IndicatorConfig]:
        return [config for config in self.configs if config.placement is Placement.PANE]

    def fields(self) -> List[str]:
        """All output field names, in layout order."""
        return [field for config in self.configs for field in config.fields()]

    def compute(self, bars: Sequence[Bar]) -> Dict[str, list]:
        """Run every indicator in the layout.

        Args:
            bars: Full bar history, oldest first

        Returns:
            Dict of {field name: series}, each as long as ``bars``
        """
        key_bars = tuple(bars)
        cacheable = self.cache_size > 0
        if cacheable:
            try:
                hash(key_bars)
            except TypeError:
                logger.debug(f"Bars are not hashable, computing {len(key_bars)} bars without cache")
                cacheable = False

        results: Dict[str, list] = {}
        for config in self.configs:
            calculated = self._calculate(config, key_bars) if cacheable else calculate_indicator(key_bars, config)
            for field, series in calculated.items():
                results[field] = list(series)
        return results

    def merge_onto_bars(self, bars: Sequence[Bar]) -> List[Dict[str, Any]]:
        """Zip every indicator field onto its bar.

        Returns:
            One dict per bar: time, open, high, low, close, volume plus
            each indicator field (None while warming up)
        """
        computed = self.compute(bars)
        rows = []
        for i, bar in enumerate(bars):
            row: Dict[str, Any] = {
                "time": bar.time,
                "open": bar.open,
                "high": bar.high,
                "low": bar.low,
                "close": bar.close,
                "volume": bar.volume,
            }
            for field, series in computed.items():
                row[field] = series[i]
            rows.append(row)
        return rows

    def clear_cache(self):
        self._cache.clear()

    def _calculate(self, config: IndicatorConfig, bars: Tuple[Bar, ...]) -> Dict[str, list]:
        key = (config, bars)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            logger.trace(f"{config.label()}: cache hit ({len(bars)} bars)")
            return cached

        result = calculate_indicator(bars, config)
        self._cache[key] = result
        if len(self._cache) > self.cache_size:
            self._cache.popitem(last=False)
        return result

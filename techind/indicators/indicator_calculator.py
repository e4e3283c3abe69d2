"""Unified indicator calculator for batch processing."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from techind.utils.config import Config, ConfigError
from techind.utils.logger import get_logger
from .base_indicator import BarsInput, BaseIndicator, bar_times, to_frame
from .registry import INDICATORS, get_entry

logger = get_logger(__name__)


@dataclass
class IndicatorSpec:
    """One indicator to compute: a registry type id and parameter overrides."""
    type_id: str
    params: Dict[str, Any] = field(default_factory=dict)


def _default_specs() -> list[IndicatorSpec]:
    return [
        *(IndicatorSpec("sma", {"period": p}) for p in (5, 10, 20, 60)),
        *(IndicatorSpec("ema", {"period": p}) for p in (12, 26)),
        IndicatorSpec("rsi", {"period": 14}),
        IndicatorSpec("macd", {"fast_period": 12, "slow_period": 26, "signal_period": 9}),
        IndicatorSpec("stochastic", {"k_period": 9, "d_period": 3, "smooth": 3}),
        IndicatorSpec("adx", {"period": 14}),
        IndicatorSpec("atr", {"period": 14}),
        IndicatorSpec("obv"),
    ]


@dataclass
class IndicatorConfig:
    """Configuration for indicator calculation.

    Each spec produces one column per output. The same type may appear with
    several parameter sets, e.g. two RSI specs give both RSI_14 and RSI_7.
    """
    indicators: list[IndicatorSpec] = field(default_factory=_default_specs)

    @staticmethod
    def from_collected_params(
        collected: Dict[str, List[Dict[str, Any]]]
    ) -> "IndicatorConfig":
        """Build config from a type id -> parameter sets mapping.

        Duplicate parameter sets of the same type are computed once.

        Args:
            collected: {"rsi": [{"period": 14}, ...], "macd": [{}], ...}
        """
        config = IndicatorConfig(indicators=[])

        for type_id, param_sets in collected.items():
            seen = []
            for params in param_sets or [{}]:
                resolved = get_entry(type_id).create(params or None).params
                if resolved in seen:
                    continue
                seen.append(resolved)
                config.indicators.append(IndicatorSpec(type_id, dict(params or {})))

        return config

    @staticmethod
    def from_yaml(config_path: str) -> "IndicatorConfig":
        """Load the ``indicators`` list from a YAML file.

        Example:
            indicators:
              - type: sma
                params: {period: 20}
              - type: macd

        Raises:
            ConfigError: File missing, malformed, or an entry has no known type
        """
        entries = Config(config_path).get("indicators", [])
        if not isinstance(entries, list):
            raise ConfigError(f"'indicators' must be a list in {config_path}")

        specs = []
        for entry in entries:
            if not isinstance(entry, dict) or "type" not in entry:
                raise ConfigError(f"Indicator entry needs a 'type': {entry!r}")
            type_id = entry["type"]
            if type_id not in INDICATORS:
                raise ConfigError(f"Unknown indicator type in {config_path}: {type_id!r}")
            params = entry.get("params") or {}
            if not isinstance(params, dict):
                raise ConfigError(f"'params' of {type_id} must be a mapping")
            specs.append(IndicatorSpec(type_id, params))

        return IndicatorConfig(indicators=specs)

    def to_yaml(self, config_path: str) -> None:
        """Write the specs as the ``indicators`` list of a YAML file.

        Other keys of an existing file are kept; a missing file is created.
        Entries use the format read by ``from_yaml``.

        Raises:
            ConfigError: Existing file is malformed, or writing fails
        """
        entries = []
        for spec in self.indicators:
            entry: Dict[str, Any] = {"type": spec.type_id}
            if spec.params:
                # numpy scalars are not representable by yaml.safe_dump
                entry["params"] = {
                    key: value.item() if isinstance(value, np.generic) else value
                    for key, value in spec.params.items()
                }
            entries.append(entry)

        config = Config(config_path, create=True)
        config.set("indicators", entries)
        config.save()
        logger.debug(f"Saved {len(entries)} indicator specs to {config_path}")


def column_name(indicator: BaseIndicator, output: str) -> str:
    """Column for one output: SMA_20, MACD_signal_12_26_9, OBV, ..."""
    suffix = indicator.name[len(indicator.short_name):]
    if len(indicator.output_names) > 1:
        return f"{indicator.short_name}_{output}{suffix}"
    return f"{indicator.short_name}{suffix}"


class IndicatorCalculator:
    """Unified calculator for all registered technical indicators.

    Calculates indicators into one DataFrame indexed by bar time, with
    parameterized column names:
      RSI_14, RSI_7, MACD_macd_12_26_9, MACD_histogram_12_26_9, SMA_5, etc.

    Points projected past the last bar (Ichimoku senkou spans) have no row
    and are dropped; warm-up rows are NaN.
    """

    def __init__(self, config: Optional[IndicatorConfig] = None):
        self.config = config or IndicatorConfig()

    def get_indicator_names(self) -> list[str]:
        return list(INDICATORS)

    def calculate_all(self, bars: BarsInput) -> pd.DataFrame:
        return self._calculate(bars, self.config.indicators)

    def calculate_subset(self, bars: BarsInput, indicators: list[str]) -> pd.DataFrame:
        """Calculate the given type ids with default parameters.

        Raises:
            UnknownIndicatorType: If a type id is not registered
        """
        return self._calculate(bars, [IndicatorSpec(type_id) for type_id in indicators])

    def _calculate(self, bars: BarsInput, specs: list[IndicatorSpec]) -> pd.DataFrame:
        df = to_frame(bars)
        times = bar_times(df) if not df.empty else np.empty(0, dtype=np.int64)
        result = pd.DataFrame(index=pd.Index(times, name="time"))

        for spec in specs:
            indicator = get_entry(spec.type_id).create(spec.params or None)
            ind_result = indicator(df)
            for diagnostic in ind_result.diagnostics:
                logger.debug(f"{ind_result.name}: {diagnostic.code}, {diagnostic.message}")

            frame = ind_result.to_frame()
            for output in indicator.output_names:
                series = frame[output] if output in frame else pd.Series(dtype=float)
                series = series[~series.index.duplicated(keep="last")]
                result[column_name(indicator, output)] = series.reindex(result.index).to_numpy()

        return result

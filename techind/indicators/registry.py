"""Indicator registry: maps type ids to metadata and calculations.

The registry provides:
1. Indicator metadata (display name, category, overlay flag, default color)
2. Default parameters per type
3. A calculation callable per type: ``calculate(bars, params) -> IndicatorResult``

Params may be the family's dataclass, a mapping of field overrides, or None.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from techind.utils.logger import get_logger
from .base_indicator import BarsInput, BaseIndicator, IndicatorResult
from .momentum_indicators import (
    AwesomeOscillatorIndicator,
    CCIIndicator,
    MomentumIndicator,
    ROCIndicator,
    RSIIndicator,
    StochasticIndicator,
    StochasticRSIIndicator,
    WilliamsRIndicator,
)
from .params import IndicatorParams
from .trend_indicators import (
    ADXIndicator,
    AroonIndicator,
    DEMAIndicator,
    EMAIndicator,
    IchimokuIndicator,
    MACDIndicator,
    ParabolicSARIndicator,
    SMAIndicator,
    TEMAIndicator,
    WMAIndicator,
)
from .volatility_indicators import ATRIndicator, BollingerBandsIndicator, EnvelopeIndicator
from .volume_indicators import CMFIndicator, MFIIndicator, OBVIndicator, VWAPIndicator

logger = get_logger(__name__)

CATEGORIES = ("trend", "momentum", "volatility", "volume")

Calculation = Callable[[BarsInput, Optional[Any]], IndicatorResult]


class UnknownIndicatorType(LookupError):
    """Raised when a type id is not registered."""
    pass


@dataclass(frozen=True)
class RegistryEntry:
    """Metadata and calculation for one indicator type."""
    type_id: str
    display_name: str
    short_name: str
    category: str
    is_overlay: bool
    default_params: IndicatorParams
    default_color: str
    description: str
    indicator_class: type

    @property
    def outputs(self) -> tuple[str, ...]:
        """Output names produced with the default parameters."""
        return self.create().output_names

    def create(self, params: Optional[Any] = None) -> BaseIndicator:
        return self.indicator_class(params)

    def calculate(self, bars: BarsInput, params: Optional[Any] = None) -> IndicatorResult:
        return self.create(params)(bars)


def _entry(
    type_id: str,
    display_name: str,
    short_name: str,
    category: str,
    is_overlay: bool,
    default_color: str,
    description: str,
    indicator_class: type,
) -> RegistryEntry:
    return RegistryEntry(
        type_id=type_id,
        display_name=display_name,
        short_name=short_name,
        category=category,
        is_overlay=is_overlay,
        default_params=indicator_class.params_type(),
        default_color=default_color,
        description=description,
        indicator_class=indicator_class,
    )


# ── Registered indicators ─────────────────────────────────
# Overlays first, then the separate-pane oscillators.

_ENTRIES = [
    # Overlays
    _entry("sma", "Simple Moving Average", "SMA", "trend", True, "#2196F3",
           "Average of prices over a specified period", SMAIndicator),
    _entry("ema", "Exponential Moving Average", "EMA", "trend", True, "#FF9800",
           "Weighted average giving more importance to recent prices", EMAIndicator),
    _entry("wma", "Weighted Moving Average", "WMA", "trend", True, "#9C27B0",
           "Linear weighted moving average", WMAIndicator),
    _entry("dema", "Double Exponential Moving Average", "DEMA", "trend", True, "#00BCD4",
           "Faster-responding moving average with reduced lag", DEMAIndicator),
    _entry("tema", "Triple Exponential Moving Average", "TEMA", "trend", True, "#4CAF50",
           "Even faster-responding moving average", TEMAIndicator),
    _entry("vwap", "Volume Weighted Average Price", "VWAP", "volume", True, "#673AB7",
           "Average price weighted by volume", VWAPIndicator),
    _entry("bollinger_bands", "Bollinger Bands", "BB", "volatility", True, "#607D8B",
           "Volatility bands around moving average", BollingerBandsIndicator),
    _entry("envelope", "Moving Average Envelope", "ENV", "volatility", True, "#795548",
           "Percentage bands around moving average", EnvelopeIndicator),
    _entry("parabolic_sar", "Parabolic SAR", "PSAR", "trend", True, "#E91E63",
           "Stop and reverse trend indicator", ParabolicSARIndicator),
    _entry("ichimoku", "Ichimoku Cloud", "ICHI", "trend", True, "#3F51B5",
           "Comprehensive trend indicator with cloud support/resistance", IchimokuIndicator),
    # Oscillators
    _entry("rsi", "Relative Strength Index", "RSI", "momentum", False, "#9C27B0",
           "Momentum oscillator measuring speed and change of price movements", RSIIndicator),
    _entry("macd", "Moving Average Convergence Divergence", "MACD", "momentum", False,
           "#2196F3", "Trend-following momentum indicator", MACDIndicator),
    _entry("stochastic", "Stochastic Oscillator", "STOCH", "momentum", False, "#FF5722",
           "Momentum indicator comparing closing price to price range", StochasticIndicator),
    _entry("stochastic_rsi", "Stochastic RSI", "SRSI", "momentum", False, "#8BC34A",
           "Stochastic oscillator applied to RSI values", StochasticRSIIndicator),
    _entry("williams_r", "Williams %R", "%R", "momentum", False, "#00BCD4",
           "Momentum indicator showing overbought/oversold levels", WilliamsRIndicator),
    _entry("cci", "Commodity Channel Index", "CCI", "momentum", False, "#FFC107",
           "Oscillator measuring price deviation from average", CCIIndicator),
    _entry("atr", "Average True Range", "ATR", "volatility", False, "#FF9800",
           "Volatility indicator measuring price range", ATRIndicator),
    _entry("adx", "Average Directional Index", "ADX", "trend", False, "#673AB7",
           "Trend strength indicator", ADXIndicator),
    _entry("roc", "Rate of Change", "ROC", "momentum", False, "#03A9F4",
           "Momentum oscillator measuring percentage change", ROCIndicator),
    _entry("momentum", "Momentum", "MOM", "momentum", False, "#4CAF50",
           "Price change over a specified period", MomentumIndicator),
    _entry("obv", "On-Balance Volume", "OBV", "volume", False, "#9E9E9E",
           "Cumulative volume-based momentum indicator", OBVIndicator),
    _entry("cmf", "Chaikin Money Flow", "CMF", "volume", False, "#795548",
           "Volume-weighted measure of accumulation/distribution", CMFIndicator),
    _entry("mfi", "Money Flow Index", "MFI", "volume", False, "#E91E63",
           "Volume-weighted RSI", MFIIndicator),
    _entry("aroon", "Aroon Indicator", "AROON", "trend", False, "#3F51B5",
           "Identifies trend changes and strength", AroonIndicator),
    _entry("awesome_oscillator", "Awesome Oscillator", "AO", "momentum", False, "#22c55e",
           "Measures market momentum", AwesomeOscillatorIndicator),
]

INDICATORS: dict[str, RegistryEntry] = {entry.type_id: entry for entry in _ENTRIES}


def list_indicators() -> list[RegistryEntry]:
    """All registered indicators, overlays first."""
    return list(_ENTRIES)


def indicators_by_category(category: str) -> list[RegistryEntry]:
    """Registered indicators of one category, in listing order.

    Raises:
        ValueError: If ``category`` is not one of CATEGORIES
    """
    if category not in CATEGORIES:
        raise ValueError(
            f"Unknown category {category!r}, expected one of {', '.join(CATEGORIES)}"
        )
    return [entry for entry in _ENTRIES if entry.category == category]


def overlay_indicators() -> list[RegistryEntry]:
    """Indicators drawn on the price chart."""
    return [entry for entry in _ENTRIES if entry.is_overlay]


def oscillator_indicators() -> list[RegistryEntry]:
    """Indicators drawn in their own pane."""
    return [entry for entry in _ENTRIES if not entry.is_overlay]


def get_entry(type_id: str) -> RegistryEntry:
    """Look up a registered indicator.

    Raises:
        UnknownIndicatorType: If ``type_id`` is not registered
    """
    try:
        return INDICATORS[type_id]
    except KeyError:
        raise UnknownIndicatorType(f"Unknown indicator type: {type_id!r}") from None


def get_calculation(type_id: str) -> Calculation:
    """Calculation callable for a type: ``calculate(bars, params=None)``.

    Raises:
        UnknownIndicatorType: If ``type_id`` is not registered
    """
    return get_entry(type_id).calculate


def get_default_params(type_id: str) -> IndicatorParams:
    """Default parameters for a type (immutable, safe to share).

    Raises:
        UnknownIndicatorType: If ``type_id`` is not registered
    """
    return get_entry(type_id).default_params


def compute_indicator(
    type_id: str, bars: BarsInput, params: Optional[Any] = None
) -> IndicatorResult:
    """Calculate one registered indicator by type id.

    Raises:
        UnknownIndicatorType: If ``type_id`` is not registered
    """
    result = get_calculation(type_id)(bars, params)
    logger.debug(f"{type_id}: computed {result.name}, {len(result.values)} points")
    return result

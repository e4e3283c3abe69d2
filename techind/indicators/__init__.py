"""Technical indicator calculation module.

Provides technical analysis indicators over OHLCV bars:
- Trend indicators: SMA, EMA, WMA, DEMA, TEMA, MACD, ADX, Aroon, Parabolic SAR, Ichimoku
- Momentum indicators: RSI, Stochastic, Stochastic RSI, Williams %R, CCI, ROC,
  Momentum, Awesome Oscillator
- Volatility indicators: Bollinger Bands, Envelope, ATR
- Volume indicators: OBV, CMF, MFI, VWAP
- Registry of all indicators by type id, and a unified calculator for batch processing
"""

from .base_indicator import (
    Bar,
    BaseIndicator,
    Diagnostic,
    DiagnosticLevel,
    IndicatorPoint,
    IndicatorResult,
    PriceSource,
    to_frame,
)
from .trend_indicators import (
    SMAIndicator,
    EMAIndicator,
    WMAIndicator,
    DEMAIndicator,
    TEMAIndicator,
    MACDIndicator,
    ADXIndicator,
    AroonIndicator,
    ParabolicSARIndicator,
    IchimokuIndicator,
)
from .momentum_indicators import (
    RSIIndicator,
    StochasticIndicator,
    FastStochasticIndicator,
    StochasticRSIIndicator,
    WilliamsRIndicator,
    CCIIndicator,
    ROCIndicator,
    MomentumIndicator,
    AwesomeOscillatorIndicator,
)
from .volatility_indicators import (
    BollingerBandsIndicator,
    EnvelopeIndicator,
    ATRIndicator,
    band_width,
    percent_b,
)
from .volume_indicators import OBVIndicator, CMFIndicator, MFIIndicator, VWAPIndicator
from .registry import (
    RegistryEntry,
    UnknownIndicatorType,
    compute_indicator,
    get_calculation,
    get_default_params,
    get_entry,
    indicators_by_category,
    list_indicators,
    oscillator_indicators,
    overlay_indicators,
)
from .indicator_calculator import IndicatorCalculator, IndicatorConfig, IndicatorSpec

__all__ = [
    # Base
    "Bar",
    "BaseIndicator",
    "Diagnostic",
    "DiagnosticLevel",
    "IndicatorPoint",
    "IndicatorResult",
    "PriceSource",
    "to_frame",
    # Trend
    "SMAIndicator",
    "EMAIndicator",
    "WMAIndicator",
    "DEMAIndicator",
    "TEMAIndicator",
    "MACDIndicator",
    "ADXIndicator",
    "AroonIndicator",
    "ParabolicSARIndicator",
    "IchimokuIndicator",
    # Momentum
    "RSIIndicator",
    "StochasticIndicator",
    "FastStochasticIndicator",
    "StochasticRSIIndicator",
    "WilliamsRIndicator",
    "CCIIndicator",
    "ROCIndicator",
    "MomentumIndicator",
    "AwesomeOscillatorIndicator",
    # Volatility
    "BollingerBandsIndicator",
    "EnvelopeIndicator",
    "ATRIndicator",
    "band_width",
    "percent_b",
    # Volume
    "OBVIndicator",
    "CMFIndicator",
    "MFIIndicator",
    "VWAPIndicator",
    # Registry
    "RegistryEntry",
    "UnknownIndicatorType",
    "compute_indicator",
    "get_calculation",
    "get_default_params",
    "get_entry",
    "indicators_by_category",
    "list_indicators",
    "oscillator_indicators",
    "overlay_indicators",
    # Calculator
    "IndicatorCalculator",
    "IndicatorConfig",
    "IndicatorSpec",
]

"""Interpretation helpers that turn indicator values into readable states.

All helpers work on plain floats, typically the latest point(s) of an
output, e.g. ``rsi_zone(result.values[-1].value)``.
"""

from enum import Enum
from typing import Optional

# Oscillator reference levels
RSI_OVERBOUGHT, RSI_OVERSOLD = 70.0, 30.0
STOCHASTIC_OVERBOUGHT, STOCHASTIC_OVERSOLD = 80.0, 20.0
MFI_OVERBOUGHT, MFI_OVERSOLD = 80.0, 20.0
CCI_OVERBOUGHT, CCI_OVERSOLD = 100.0, -100.0
WILLIAMS_R_OVERBOUGHT, WILLIAMS_R_OVERSOLD = -20.0, -80.0

ADX_WEAK, ADX_STRONG, ADX_VERY_STRONG = 25.0, 50.0, 75.0
ADX_DIRECTION_BAND = 5.0
AROON_STRONG, AROON_WEAK = 70.0, 30.0
CMF_THRESHOLD = 0.05


class Zone(str, Enum):
    """Oscillator zone relative to its overbought/oversold levels."""
    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    NEUTRAL = "neutral"


class Bias(str, Enum):
    """Directional reading of an indicator."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class TrendStrength(str, Enum):
    """ADX trend strength buckets.

    - WEAK: ADX < 25
    - STRONG: 25 <= ADX < 50
    - VERY_STRONG: 50 <= ADX < 75
    - EXTREME: ADX >= 75
    """
    WEAK = "weak"
    STRONG = "strong"
    VERY_STRONG = "very_strong"
    EXTREME = "extreme"


class ZeroCross(str, Enum):
    BULLISH_CROSS = "bullish_cross"
    BEARISH_CROSS = "bearish_cross"


def _zone(value: float, overbought: float, oversold: float) -> Zone:
    if value >= overbought:
        return Zone.OVERBOUGHT
    elif value <= oversold:
        return Zone.OVERSOLD
    return Zone.NEUTRAL


def rsi_zone(value: float) -> Zone:
    """RSI zone: >= 70 overbought, <= 30 oversold."""
    return _zone(value, RSI_OVERBOUGHT, RSI_OVERSOLD)


def mfi_zone(value: float) -> Zone:
    """MFI zone: >= 80 overbought, <= 20 oversold."""
    return _zone(value, MFI_OVERBOUGHT, MFI_OVERSOLD)


def cci_zone(value: float) -> Zone:
    """CCI zone: >= 100 overbought, <= -100 oversold."""
    return _zone(value, CCI_OVERBOUGHT, CCI_OVERSOLD)


def williams_r_zone(value: float) -> Zone:
    """Williams %R zone: >= -20 overbought, <= -80 oversold."""
    return _zone(value, WILLIAMS_R_OVERBOUGHT, WILLIAMS_R_OVERSOLD)


def stochastic_zone(k: float, d: Optional[float] = None) -> Zone:
    """Stochastic zone of %K, or of the %K/%D average when %D is given.

    Args:
        k: %K value
        d: Optional %D value

    Returns:
        Zone against the 80/20 levels
    """
    value = (k + d) / 2 if d is not None else k
    return _zone(value, STOCHASTIC_OVERBOUGHT, STOCHASTIC_OVERSOLD)


def _rising_bias(value: float, previous: float) -> Bias:
    if value > 0 and value > previous:
        return Bias.BULLISH
    elif value < 0 and value < previous:
        return Bias.BEARISH
    return Bias.NEUTRAL


def _sign_bias(value: float) -> Bias:
    if value > 0:
        return Bias.BULLISH
    elif value < 0:
        return Bias.BEARISH
    return Bias.NEUTRAL


def macd_bias(histogram: float, previous_histogram: float) -> Bias:
    """Bullish when the histogram is positive and growing, bearish when
    negative and falling."""
    return _rising_bias(histogram, previous_histogram)


def awesome_oscillator_bias(value: float, previous: float) -> Bias:
    """Same rule as the MACD histogram, applied to AO bars."""
    return _rising_bias(value, previous)


def momentum_bias(value: float, previous: Optional[float] = None) -> Bias:
    """Momentum bias by sign, and by direction too when ``previous`` is given."""
    if previous is None:
        return _sign_bias(value)
    return _rising_bias(value, previous)


def roc_bias(value: float) -> Bias:
    return _sign_bias(value)


def obv_bias(obv: float, previous_obv: float) -> Bias:
    """Direction of the latest OBV change."""
    return _sign_bias(obv - previous_obv)


def cmf_bias(value: float) -> Bias:
    """Bullish above +0.05, bearish below -0.05."""
    if value > CMF_THRESHOLD:
        return Bias.BULLISH
    elif value < -CMF_THRESHOLD:
        return Bias.BEARISH
    return Bias.NEUTRAL


def aroon_bias(aroon_up: float, aroon_down: float) -> Bias:
    """Bullish when Up > 70 and Down < 30; bearish for the mirror case."""
    if aroon_up > AROON_STRONG and aroon_down < AROON_WEAK:
        return Bias.BULLISH
    elif aroon_down > AROON_STRONG and aroon_up < AROON_WEAK:
        return Bias.BEARISH
    return Bias.NEUTRAL


def adx_strength(adx: float) -> TrendStrength:
    """Bucket an ADX value.

    Args:
        adx: ADX value (0-100)

    Returns:
        TrendStrength bucket
    """
    if adx >= ADX_VERY_STRONG:
        return TrendStrength.EXTREME
    elif adx >= ADX_STRONG:
        return TrendStrength.VERY_STRONG
    elif adx >= ADX_WEAK:
        return TrendStrength.STRONG
    return TrendStrength.WEAK


def adx_direction(plus_di: float, minus_di: float) -> Bias:
    """Trend direction from the DI lines; neutral while they are within 5 points."""
    diff = plus_di - minus_di
    if abs(diff) < ADX_DIRECTION_BAND:
        return Bias.NEUTRAL
    return Bias.BULLISH if diff > 0 else Bias.BEARISH


def ichimoku_cloud(senkou_span_a: float, senkou_span_b: float) -> Bias:
    """Cloud colour: bullish when Span A is above Span B."""
    return _sign_bias(senkou_span_a - senkou_span_b)


def zero_line_cross(value: float, previous: float) -> Optional[ZeroCross]:
    """Detect a cross of the zero line between two consecutive values.

    Returns:
        ZeroCross, or None when the line was not crossed
    """
    if previous < 0 and value >= 0:
        return ZeroCross.BULLISH_CROSS
    elif previous > 0 and value <= 0:
        return ZeroCross.BEARISH_CROSS
    return None

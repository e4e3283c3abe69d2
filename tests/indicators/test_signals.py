"""Tests for indicator interpretation helpers."""

import pytest
from techind.indicators.signals import (
    Bias,
    TrendStrength,
    Zone,
    ZeroCross,
    adx_direction,
    adx_strength,
    aroon_bias,
    awesome_oscillator_bias,
    cci_zone,
    cmf_bias,
    ichimoku_cloud,
    macd_bias,
    mfi_zone,
    momentum_bias,
    obv_bias,
    roc_bias,
    rsi_zone,
    stochastic_zone,
    williams_r_zone,
    zero_line_cross,
)


class TestZones:
    """Tests for overbought/oversold zones."""

    @pytest.mark.parametrize("value,expected", [
        (75.0, Zone.OVERBOUGHT),
        (70.0, Zone.OVERBOUGHT),
        (50.0, Zone.NEUTRAL),
        (30.0, Zone.OVERSOLD),
        (10.0, Zone.OVERSOLD),
    ])
    def test_rsi_zone(self, value, expected):
        """Test RSI levels 70/30 are inclusive."""
        assert rsi_zone(value) == expected

    def test_mfi_and_stochastic_levels(self):
        """Test MFI and Stochastic use 80/20."""
        assert mfi_zone(80.0) == Zone.OVERBOUGHT
        assert mfi_zone(75.0) == Zone.NEUTRAL
        assert stochastic_zone(15.0) == Zone.OVERSOLD

    def test_stochastic_zone_averages_k_and_d(self):
        """Test %K and %D are averaged when both are given."""
        assert stochastic_zone(90.0, 60.0) == Zone.NEUTRAL
        assert stochastic_zone(90.0, 80.0) == Zone.OVERBOUGHT

    def test_cci_zone(self):
        """Test CCI uses +/-100."""
        assert cci_zone(150.0) == Zone.OVERBOUGHT
        assert cci_zone(-100.0) == Zone.OVERSOLD
        assert cci_zone(0.0) == Zone.NEUTRAL

    def test_williams_r_zone(self):
        """Test Williams %R uses -20/-80."""
        assert williams_r_zone(-10.0) == Zone.OVERBOUGHT
        assert williams_r_zone(-90.0) == Zone.OVERSOLD
        assert williams_r_zone(-50.0) == Zone.NEUTRAL

    def test_zone_is_string_enum(self):
        """Test zones compare equal to their string values."""
        assert Zone.OVERBOUGHT == "overbought"


class TestBias:
    """Tests for directional readings."""

    def test_macd_bias(self):
        """Test growing positive histogram is bullish, falling negative bearish."""
        assert macd_bias(0.5, 0.3) == Bias.BULLISH
        assert macd_bias(-0.5, -0.3) == Bias.BEARISH
        assert macd_bias(0.3, 0.5) == Bias.NEUTRAL

    def test_awesome_oscillator_bias(self):
        """Test AO follows the histogram rule."""
        assert awesome_oscillator_bias(2.0, 1.0) == Bias.BULLISH
        assert awesome_oscillator_bias(-2.0, -1.0) == Bias.BEARISH

    def test_momentum_bias(self):
        """Test momentum by sign, or by sign and direction."""
        assert momentum_bias(1.0) == Bias.BULLISH
        assert momentum_bias(-1.0) == Bias.BEARISH
        assert momentum_bias(0.0) == Bias.NEUTRAL
        assert momentum_bias(1.0, previous=2.0) == Bias.NEUTRAL

    def test_roc_and_obv_bias(self):
        """Test ROC sign and OBV change."""
        assert roc_bias(3.0) == Bias.BULLISH
        assert obv_bias(900.0, 1000.0) == Bias.BEARISH
        assert obv_bias(1000.0, 1000.0) == Bias.NEUTRAL

    def test_cmf_bias(self):
        """Test CMF threshold of 0.05."""
        assert cmf_bias(0.06) == Bias.BULLISH
        assert cmf_bias(-0.06) == Bias.BEARISH
        assert cmf_bias(0.05) == Bias.NEUTRAL

    def test_aroon_bias(self):
        """Test Aroon needs one line above 70 and the other below 30."""
        assert aroon_bias(100.0, 10.0) == Bias.BULLISH
        assert aroon_bias(10.0, 100.0) == Bias.BEARISH
        assert aroon_bias(80.0, 50.0) == Bias.NEUTRAL

    def test_ichimoku_cloud(self):
        """Test cloud colour from span A vs span B."""
        assert ichimoku_cloud(105.0, 100.0) == Bias.BULLISH
        assert ichimoku_cloud(95.0, 100.0) == Bias.BEARISH


class TestADXReadings:
    """Tests for ADX strength and direction."""

    @pytest.mark.parametrize("adx,expected", [
        (10.0, TrendStrength.WEAK),
        (25.0, TrendStrength.STRONG),
        (50.0, TrendStrength.VERY_STRONG),
        (80.0, TrendStrength.EXTREME),
    ])
    def test_adx_strength(self, adx, expected):
        """Test ADX buckets at 25/50/75."""
        assert adx_strength(adx) == expected

    def test_adx_direction(self):
        """Test DI lines within 5 points are neutral."""
        assert adx_direction(30.0, 20.0) == Bias.BULLISH
        assert adx_direction(20.0, 30.0) == Bias.BEARISH
        assert adx_direction(22.0, 20.0) == Bias.NEUTRAL


class TestZeroLineCross:
    """Tests for zero line crosses."""

    def test_crosses(self):
        """Test crossing up and down, and no cross."""
        assert zero_line_cross(0.5, -0.5) == ZeroCross.BULLISH_CROSS
        assert zero_line_cross(-0.5, 0.5) == ZeroCross.BEARISH_CROSS
        assert zero_line_cross(0.5, 0.2) is None

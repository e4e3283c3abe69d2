"""Tests for momentum indicators (RSI, Stochastic, Stochastic RSI, Williams %R, CCI, ROC, Momentum, AO)."""

import pytest
import pandas as pd
import numpy as np
from techind.indicators.base_indicator import IndicatorResult
from techind.indicators.momentum_indicators import (
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

DAY = 86400


@pytest.fixture
def sample_ohlcv():
    """Create sample OHLCV data for testing."""
    np.random.seed(42)
    n = 100
    close = 100 + np.cumsum(np.random.randn(n) * 2)
    return pd.DataFrame({
        "time": 1_700_000_000 + np.arange(n) * DAY,
        "open": close - np.random.rand(n),
        "high": close + np.random.rand(n) * 2,
        "low": close - np.random.rand(n) * 2,
        "close": close,
        "volume": np.random.randint(1000, 10000, n)
    })


@pytest.fixture
def flat_ohlcv():
    """Bars with identical prices, every window has zero range."""
    n = 40
    return pd.DataFrame({
        "time": np.arange(n) * DAY,
        "open": np.full(n, 50.0),
        "high": np.full(n, 50.0),
        "low": np.full(n, 50.0),
        "close": np.full(n, 50.0),
        "volume": np.full(n, 1000.0),
    })


def _values(output):
    return np.array([p.value for p in output])


def _reference_rsi(close, period):
    """Straightforward Wilder RSI used to check the vectorised version."""
    changes = np.diff(close)
    gains = np.where(changes > 0, changes, 0.0)
    losses = np.where(changes < 0, -changes, 0.0)
    avg_gain = gains[:period].mean()
    avg_loss = losses[:period].mean()
    out = []
    for i in range(period, len(changes) + 1):
        if i > period:
            avg_gain = (avg_gain * (period - 1) + gains[i - 1]) / period
            avg_loss = (avg_loss * (period - 1) + losses[i - 1]) / period
        out.append(100.0 if avg_loss == 0 else 100 - 100 / (1 + avg_gain / avg_loss))
    return np.array(out)


class TestRSIIndicator:
    """Tests for Relative Strength Index indicator."""

    def test_rsi_name(self):
        """Test RSI indicator name includes period."""
        rsi = RSIIndicator(period=14)
        assert rsi.name == "RSI_14"

    def test_rsi_required_columns(self):
        """Test RSI requires close column."""
        rsi = RSIIndicator()
        assert "close" in rsi.required_columns

    def test_rsi_calculation(self, sample_ohlcv):
        """Test RSI calculation produces valid values."""
        result = RSIIndicator(period=14)(sample_ohlcv)

        assert isinstance(result, IndicatorResult)
        values = _values(result.values)
        assert ((values >= 0) & (values <= 100)).all()

    def test_rsi_length(self, sample_ohlcv):
        """Test RSI has len - period points, starting at bar period."""
        result = RSIIndicator(period=14)(sample_ohlcv)
        assert len(result.values) == len(sample_ohlcv) - 14
        assert result.values[0].time == sample_ohlcv["time"].iloc[14]

    def test_rsi_too_short(self, sample_ohlcv):
        """Test fewer than period + 1 bars is empty."""
        result = RSIIndicator(period=14)(sample_ohlcv.iloc[:14])
        assert result.is_empty
        assert result.has_diagnostic("insufficient_data")
        assert len(RSIIndicator(period=14)(sample_ohlcv.iloc[:15]).values) == 1

    def test_rsi_matches_reference(self, sample_ohlcv):
        """Test RSI matches a loop implementation of Wilder's method."""
        close = sample_ohlcv["close"].to_numpy()
        result = RSIIndicator(period=14)(sample_ohlcv)
        np.testing.assert_allclose(_values(result.values), _reference_rsi(close, 14))

    def test_rsi_all_rising_is_exactly_100(self):
        """Test no losses gives RSI of exactly 100."""
        df = pd.DataFrame({"time": np.arange(30), "close": np.arange(30, dtype=float)})
        values = _values(RSIIndicator(period=14)(df).values)
        assert (values == 100.0).all()

    def test_rsi_all_falling_is_0(self):
        """Test no gains gives RSI of 0."""
        df = pd.DataFrame({"time": np.arange(30), "close": np.arange(30, 0, -1, dtype=float)})
        values = _values(RSIIndicator(period=14)(df).values)
        assert values == pytest.approx(np.zeros(len(values)))


class TestStochasticIndicator:
    """Tests for Stochastic Oscillator."""

    def test_stochastic_name(self):
        """Test stochastic name includes its three periods."""
        assert StochasticIndicator().name == "STOCH_14_3_3"

    def test_stochastic_outputs_in_range(self, sample_ohlcv):
        """Test %K and %D stay within 0-100."""
        result = StochasticIndicator()(sample_ohlcv)
        for output in ("k", "d"):
            values = _values(result[output])
            assert ((values >= 0) & (values <= 100)).all()

    def test_stochastic_offsets(self, sample_ohlcv):
        """Test smoothed %K and %D start after their SMA warm-ups."""
        result = StochasticIndicator(k_period=14, d_period=3, smooth=3)(sample_ohlcv)
        assert result["k"][0].time == sample_ohlcv["time"].iloc[15]
        assert result["d"][0].time == sample_ohlcv["time"].iloc[17]

    def test_d_is_sma_of_k(self, sample_ohlcv):
        """Test %D is the 3-bar SMA of %K."""
        result = StochasticIndicator()(sample_ohlcv)
        k = pd.Series(_values(result["k"]))
        expected = k.rolling(3).mean().dropna().to_numpy()
        np.testing.assert_allclose(_values(result["d"]), expected)

    def test_fast_stochastic_is_raw_k(self, sample_ohlcv):
        """Test fast stochastic %K is the unsmoothed position in the range."""
        result = FastStochasticIndicator(k_period=14)(sample_ohlcv)
        highest = sample_ohlcv["high"].rolling(14).max()
        lowest = sample_ohlcv["low"].rolling(14).min()
        expected = ((sample_ohlcv["close"] - lowest) / (highest - lowest) * 100).dropna()
        np.testing.assert_allclose(_values(result["k"]), expected.to_numpy())
        assert result["k"][0].time == sample_ohlcv["time"].iloc[13]

    def test_fast_stochastic_ignores_smooth_override(self):
        """Test fast stochastic always uses smooth=1."""
        assert FastStochasticIndicator(smooth=5).params.smooth == 1

    def test_stochastic_flat_market_is_50(self, flat_ohlcv):
        """Test zero range gives %K of 50."""
        result = StochasticIndicator()(flat_ohlcv)
        assert (_values(result["k"]) == 50.0).all()
        assert (_values(result["d"]) == 50.0).all()


class TestStochasticRSIIndicator:
    """Tests for Stochastic RSI."""

    def test_stochastic_rsi_range(self, sample_ohlcv):
        """Test Stochastic RSI %K stays within 0-100."""
        result = StochasticRSIIndicator()(sample_ohlcv)
        values = _values(result["k"])
        assert len(values) > 0
        assert ((values >= 0) & (values <= 100)).all()

    def test_stochastic_rsi_offsets(self, sample_ohlcv):
        """Test %K starts after RSI, lookback and smoothing warm-ups."""
        result = StochasticRSIIndicator(rsi_period=14, k_period=14, d_period=3, smooth=3)(sample_ohlcv)
        # RSI from 14, raw %K from 14 + 13, smoothed %K from + 2, %D from + 2
        assert result["k"][0].time == sample_ohlcv["time"].iloc[29]
        assert result["d"][0].time == sample_ohlcv["time"].iloc[31]

    def test_stochastic_rsi_matches_stochastic_of_rsi(self, sample_ohlcv):
        """Test it equals the stochastic transform of the RSI series."""
        rsi = _values(RSIIndicator(period=14)(sample_ohlcv).values)
        rsi_bars = pd.DataFrame({
            "time": np.arange(len(rsi)), "high": rsi, "low": rsi, "close": rsi,
        })
        expected = StochasticIndicator(k_period=14, d_period=3, smooth=3)(rsi_bars)
        result = StochasticRSIIndicator()(sample_ohlcv)
        np.testing.assert_allclose(_values(result["k"]), _values(expected["k"]))


class TestWilliamsRIndicator:
    """Tests for Williams %R."""

    def test_williams_r_range(self, sample_ohlcv):
        """Test %R stays within -100..0."""
        values = _values(WilliamsRIndicator()(sample_ohlcv).values)
        assert ((values >= -100) & (values <= 0)).all()

    def test_williams_r_matches_ta(self, sample_ohlcv):
        """Test %R agrees with the ta library."""
        ta_momentum = pytest.importorskip("ta.momentum")
        expected = ta_momentum.WilliamsRIndicator(
            sample_ohlcv["high"], sample_ohlcv["low"], sample_ohlcv["close"], lbp=14
        ).williams_r().dropna()
        result = WilliamsRIndicator(period=14)(sample_ohlcv)
        np.testing.assert_allclose(_values(result.values), expected.to_numpy())

    def test_williams_r_flat_market(self, flat_ohlcv):
        """Test zero range gives -50."""
        values = _values(WilliamsRIndicator()(flat_ohlcv).values)
        assert (values == -50.0).all()


class TestCCIIndicator:
    """Tests for Commodity Channel Index."""

    def test_cci_default_period(self):
        """Test CCI defaults to 20 bars."""
        assert CCIIndicator().name == "CCI_20"

    def test_cci_matches_definition(self, sample_ohlcv):
        """Test CCI against a pandas rolling implementation."""
        tp = (sample_ohlcv["high"] + sample_ohlcv["low"] + sample_ohlcv["close"]) / 3
        sma = tp.rolling(20).mean()
        mad = tp.rolling(20).apply(lambda w: np.abs(w - w.mean()).mean(), raw=True)
        expected = ((tp - sma) / (0.015 * mad)).dropna()
        result = CCIIndicator(period=20)(sample_ohlcv)
        np.testing.assert_allclose(_values(result.values), expected.to_numpy())

    def test_cci_constant_prices_are_zero(self, flat_ohlcv):
        """Test a constant window gives CCI of 0, not NaN."""
        values = _values(CCIIndicator(period=20)(flat_ohlcv).values)
        assert len(values) == len(flat_ohlcv) - 19
        assert (values == 0.0).all()

    def test_cci_constant_inexact_prices_are_zero(self):
        """Test a constant window stays 0 when the mean is not exactly representable."""
        n = 10
        df = pd.DataFrame({
            "time": np.arange(n),
            "high": np.full(n, 0.1),
            "low": np.full(n, 0.1),
            "close": np.full(n, 0.1),
        })
        values = _values(CCIIndicator(period=3)(df).values)
        assert (values == 0.0).all()


class TestROCAndMomentum:
    """Tests for Rate of Change and Momentum."""

    def test_roc_matches_ta(self, sample_ohlcv):
        """Test ROC agrees with the ta library."""
        ta_momentum = pytest.importorskip("ta.momentum")
        expected = ta_momentum.ROCIndicator(sample_ohlcv["close"], window=12).roc().dropna()
        result = ROCIndicator(period=12)(sample_ohlcv)
        np.testing.assert_allclose(_values(result.values), expected.to_numpy())

    def test_roc_values(self):
        """Test ROC percent change and start index."""
        df = pd.DataFrame({"time": [0, 1, 2], "close": [100.0, 105.0, 110.0]})
        result = ROCIndicator(period=2)(df)
        assert [p.time for p in result.values] == [2]
        assert result.values[0].value == pytest.approx(10.0)

    def test_roc_zero_past_close(self):
        """Test a zero past close gives 0 instead of infinity."""
        df = pd.DataFrame({"time": [0, 1], "close": [0.0, 5.0]})
        assert ROCIndicator(period=1)(df).values[0].value == 0.0

    def test_roc_needs_more_than_period(self):
        """Test ROC with exactly period bars is empty."""
        df = pd.DataFrame({"time": [0, 1], "close": [1.0, 2.0]})
        assert ROCIndicator(period=2)(df).is_empty

    def test_momentum_values(self):
        """Test momentum is the close difference over period bars."""
        df = pd.DataFrame({"time": np.arange(5), "close": [1.0, 3.0, 6.0, 10.0, 15.0]})
        result = MomentumIndicator(period=2)(df)
        assert list(_values(result.values)) == [5.0, 7.0, 9.0]
        assert result.values[0].time == 2

    def test_momentum_default_period(self):
        """Test momentum defaults to 10 bars."""
        assert MomentumIndicator().name == "MOM_10"


class TestAwesomeOscillatorIndicator:
    """Tests for Awesome Oscillator."""

    def test_ao_matches_definition(self, sample_ohlcv):
        """Test AO = SMA5 - SMA34 of the median price."""
        median = (sample_ohlcv["high"] + sample_ohlcv["low"]) / 2
        expected = (median.rolling(5).mean() - median.rolling(34).mean()).dropna()
        result = AwesomeOscillatorIndicator()(sample_ohlcv)
        np.testing.assert_allclose(_values(result.values), expected.to_numpy())
        assert result.values[0].time == sample_ohlcv["time"].iloc[33]

    def test_ao_direction_labels(self, sample_ohlcv):
        """Test bars are labelled by change from the previous value."""
        result = AwesomeOscillatorIndicator()(sample_ohlcv)
        values = _values(result.values)
        labels = result.labels["direction"]
        assert len(labels) == len(values)
        assert labels[0] == ("bullish" if values[0] >= 0 else "bearish")
        for i in range(1, len(values)):
            assert labels[i] == ("bullish" if values[i] >= values[i - 1] else "bearish")

    def test_ao_fast_not_below_slow_warns(self, sample_ohlcv):
        """Test fast >= slow is flagged but still computed."""
        result = AwesomeOscillatorIndicator(fast_period=34, slow_period=5)(sample_ohlcv)
        assert result.has_diagnostic("non_standard_parameter")
        assert not result.is_empty


class TestZeroDivisionPolicy:
    """Degenerate windows never leak NaN or infinity."""

    @pytest.mark.parametrize("indicator", [
        RSIIndicator(), StochasticIndicator(), StochasticRSIIndicator(),
        WilliamsRIndicator(), CCIIndicator(), ROCIndicator(), MomentumIndicator(),
    ])
    def test_flat_market_is_finite(self, indicator, flat_ohlcv):
        """Test every output value is finite on a flat market."""
        result = indicator(flat_ohlcv)
        for points in result.outputs.values():
            assert np.isfinite(_values(points)).all()

"""Momentum and oscillator technical indicators."""

import numpy as np
import pandas as pd

from .base_indicator import BaseIndicator, IndicatorResult
from .params import (
    AwesomeOscillatorParams,
    CCIParams,
    MomentumParams,
    ROCParams,
    RSIParams,
    StochasticParams,
    StochasticRSIParams,
    WilliamsRParams,
)
from .smoothing import (
    Windowed,
    median_price,
    rolling_max,
    rolling_min,
    safe_divide,
    sma,
    typical_price,
    wilder,
    windows,
)

# Lambert's constant, scales CCI so most values fall within +/-100
CCI_CONSTANT = 0.015


def rsi_values(close: np.ndarray, period: int) -> Windowed:
    """Wilder RSI; the first value aligns with bar ``period``."""
    changes = np.diff(np.asarray(close, dtype=float))
    avg_gain = wilder(np.clip(changes, 0.0, None), period)
    avg_loss = wilder(np.clip(-changes, 0.0, None), period)

    rs = safe_divide(avg_gain.values, avg_loss.values)
    rsi = np.where(avg_loss.values == 0, 100.0, 100.0 - 100.0 / (1.0 + rs))
    # changes[j] belongs to bar j + 1
    return Windowed(rsi, avg_gain.start + 1)


def stochastic_lines(
    high: np.ndarray,
    low: np.ndarray,
    close: np.ndarray,
    k_period: int,
    d_period: int,
    smooth: int,
) -> tuple[Windowed, Windowed]:
    """%K (optionally SMA-smoothed) and %D = SMA(%K); 50 on a flat window."""
    highest = rolling_max(high, k_period)
    lowest = rolling_min(low, k_period)
    price_range = highest.values - lowest.values
    current = np.asarray(close, dtype=float)[highest.start:]

    raw = np.where(
        price_range == 0, 50.0, safe_divide(current - lowest.values, price_range) * 100
    )
    k = Windowed(raw, highest.start)
    if smooth > 1:
        k = k.then(sma, smooth)
    return k, k.then(sma, d_period)


class RSIIndicator(BaseIndicator):
    """Relative Strength Index indicator.

    RSI measures the speed and magnitude of price changes on a 0-100 scale.
    - RSI > 70: Overbought condition
    - RSI < 30: Oversold condition
    """

    params_type = RSIParams
    short_name = "RSI"

    @property
    def required_columns(self) -> list[str]:
        return ["close"]

    @property
    def min_length(self) -> int:
        return self.params.period + 1

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate RSI values.

        Args:
            df: DataFrame with 'close' column

        Returns:
            IndicatorResult with RSI values (0-100)
        """
        close = df["close"].to_numpy(dtype=float)
        return self.build_result(df, value=rsi_values(close, self.params.period))


class StochasticIndicator(BaseIndicator):
    """Stochastic Oscillator indicator.

    Compares the close with the high-low range over ``k_period`` bars.
    - %K: position of the close in the range, smoothed over ``smooth`` bars
    - %D: SMA of %K over ``d_period`` bars

    Above 80 is overbought, below 20 oversold.
    """

    params_type = StochasticParams
    short_name = "STOCH"
    outputs = ("k", "d")

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low", "close"]

    @property
    def min_length(self) -> int:
        return self.params.k_period + self.params.smooth - 1

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        p = self.params
        k, d = stochastic_lines(
            df["high"].to_numpy(dtype=float),
            df["low"].to_numpy(dtype=float),
            df["close"].to_numpy(dtype=float),
            p.k_period,
            p.d_period,
            p.smooth,
        )
        return self.build_result(df, k=k, d=d)


class FastStochasticIndicator(StochasticIndicator):
    """Fast Stochastic: raw %K with no smoothing."""

    short_name = "FSTOCH"

    def __init__(self, params=None, **overrides):
        overrides["smooth"] = 1
        super().__init__(params, **overrides)


class StochasticRSIIndicator(BaseIndicator):
    """Stochastic oscillator applied to the RSI series instead of prices."""

    params_type = StochasticRSIParams
    short_name = "STOCHRSI"
    outputs = ("k", "d")

    @property
    def required_columns(self) -> list[str]:
        return ["close"]

    @property
    def min_length(self) -> int:
        p = self.params
        return p.rsi_period + p.k_period + p.smooth - 1

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        p = self.params
        rsi = rsi_values(df["close"].to_numpy(dtype=float), p.rsi_period)
        k, d = stochastic_lines(
            rsi.values, rsi.values, rsi.values, p.k_period, p.d_period, p.smooth
        )
        return self.build_result(
            df,
            k=Windowed(k.values, rsi.start + k.start),
            d=Windowed(d.values, rsi.start + d.start),
        )


class WilliamsRIndicator(BaseIndicator):
    """Williams %R: close relative to the window high, on a -100..0 scale.

    -50 when the window has no range.
    """

    params_type = WilliamsRParams
    short_name = "WILLR"

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low", "close"]

    @property
    def min_length(self) -> int:
        return self.params.period

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        period = self.params.period
        highest = rolling_max(df["high"].to_numpy(dtype=float), period)
        lowest = rolling_min(df["low"].to_numpy(dtype=float), period)
        close = df["close"].to_numpy(dtype=float)[highest.start:]

        price_range = highest.values - lowest.values
        values = np.where(
            price_range == 0, -50.0, safe_divide(highest.values - close, price_range) * -100
        )
        return self.build_result(df, value=Windowed(values, highest.start))


class CCIIndicator(BaseIndicator):
    """Commodity Channel Index on the typical price.

    CCI = (TP - SMA(TP)) / (0.015 * mean deviation); 0 on a flat window.
    """

    params_type = CCIParams
    short_name = "CCI"

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low", "close"]

    @property
    def min_length(self) -> int:
        return self.params.period

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        period = self.params.period
        typical = typical_price(df["high"], df["low"], df["close"])
        tp_windows = windows(typical, period)

        mean = tp_windows.mean(axis=1)
        mean_deviation = np.abs(tp_windows - mean[:, None]).mean(axis=1)
        flat = tp_windows.max(axis=1) == tp_windows.min(axis=1)

        cci = safe_divide(typical[period - 1:] - mean, CCI_CONSTANT * mean_deviation)
        cci[flat] = 0.0
        return self.build_result(df, value=Windowed(cci, period - 1))


class ROCIndicator(BaseIndicator):
    """Rate of Change: percent change against the close ``period`` bars back."""

    params_type = ROCParams
    short_name = "ROC"

    @property
    def required_columns(self) -> list[str]:
        return ["close"]

    @property
    def min_length(self) -> int:
        return self.params.period + 1

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        period = self.params.period
        close = df["close"].to_numpy(dtype=float)
        past = close[:-period]
        roc = safe_divide(close[period:] - past, past) * 100
        return self.build_result(df, value=Windowed(roc, period))


class MomentumIndicator(BaseIndicator):
    """Momentum: close minus the close ``period`` bars back."""

    params_type = MomentumParams
    short_name = "MOM"

    @property
    def required_columns(self) -> list[str]:
        return ["close"]

    @property
    def min_length(self) -> int:
        return self.params.period + 1

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        period = self.params.period
        close = df["close"].to_numpy(dtype=float)
        return self.build_result(
            df, value=Windowed(close[period:] - close[:-period], period)
        )


class AwesomeOscillatorIndicator(BaseIndicator):
    """Awesome Oscillator: SMA(fast) - SMA(slow) of the median price (hl2).

    Each bar is labelled bullish when the value did not fall from the
    previous bar; the first bar is labelled by its sign.
    """

    params_type = AwesomeOscillatorParams
    short_name = "AO"

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low"]

    @property
    def min_length(self) -> int:
        return max(self.params.fast_period, self.params.slow_period)

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        median = median_price(df["high"], df["low"])
        fast = sma(median, self.params.fast_period)
        slow = sma(median, self.params.slow_period)
        start = max(fast.start, slow.start)
        ao = fast.since(start) - slow.since(start)

        rising = np.empty(len(ao), dtype=bool)
        rising[0] = ao[0] >= 0
        rising[1:] = ao[1:] >= ao[:-1]
        directions = ["bullish" if r else "bearish" for r in rising]

        return self.build_result(
            df, labels={"direction": directions}, value=Windowed(ao, start)
        )

"""Trend-following technical indicators."""

from abc import abstractmethod

import numpy as np
import pandas as pd

from .base_indicator import (
    BaseIndicator,
    IndicatorPoint,
    IndicatorResult,
    bar_times,
    extract_prices,
    source_columns,
)
from .params import (
    ADXParams,
    AroonParams,
    IchimokuParams,
    MACDParams,
    MovingAverageParams,
    ParabolicSARParams,
)
from .smoothing import Windowed, ema, midpoint, safe_divide, sma, true_range, wilder, windows, wma


class _MovingAverageIndicator(BaseIndicator):
    """Shared plumbing for single-line averages over a price source."""

    params_type = MovingAverageParams

    @property
    def required_columns(self) -> list[str]:
        return source_columns(self.params.source)

    @property
    def min_length(self) -> int:
        return self.params.period

    @abstractmethod
    def smooth(self, prices: np.ndarray) -> Windowed:
        """Average of ``prices`` over ``params.period``."""
        pass

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        prices = extract_prices(df, self.params.source)
        return self.build_result(df, value=self.smooth(prices))


class SMAIndicator(_MovingAverageIndicator):
    """Simple Moving Average indicator.

    SMA smooths price data by calculating the average over a fixed window.
    Used for trend identification and support/resistance levels.
    """

    short_name = "SMA"

    def smooth(self, prices: np.ndarray) -> Windowed:
        return sma(prices, self.params.period)


class EMAIndicator(_MovingAverageIndicator):
    """Exponential Moving Average indicator.

    EMA gives more weight to recent prices, making it more responsive
    to new information than SMA. Seeded with the SMA of the first window.
    """

    short_name = "EMA"

    def smooth(self, prices: np.ndarray) -> Windowed:
        return ema(prices, self.params.period)


class WMAIndicator(_MovingAverageIndicator):
    """Weighted Moving Average, linear weights with the newest bar heaviest."""

    short_name = "WMA"

    def smooth(self, prices: np.ndarray) -> Windowed:
        return wma(prices, self.params.period)


class DEMAIndicator(_MovingAverageIndicator):
    """Double EMA: 2 * EMA - EMA(EMA), reduces lag of a plain EMA."""

    short_name = "DEMA"

    @property
    def min_length(self) -> int:
        return 2 * self.params.period - 1

    def smooth(self, prices: np.ndarray) -> Windowed:
        period = self.params.period
        ema1 = ema(prices, period)
        ema2 = ema1.then(ema, period)
        return Windowed(2 * ema1.since(ema2.start) - ema2.values, ema2.start)


class TEMAIndicator(_MovingAverageIndicator):
    """Triple EMA: 3 * EMA1 - 3 * EMA2 + EMA3."""

    short_name = "TEMA"

    @property
    def min_length(self) -> int:
        return 3 * self.params.period - 2

    def smooth(self, prices: np.ndarray) -> Windowed:
        period = self.params.period
        ema1 = ema(prices, period)
        ema2 = ema1.then(ema, period)
        ema3 = ema2.then(ema, period)
        start = ema3.start
        return Windowed(
            3 * ema1.since(start) - 3 * ema2.since(start) + ema3.values, start
        )


class MACDIndicator(BaseIndicator):
    """Moving Average Convergence Divergence indicator.

    MACD shows the relationship between two EMAs of closing prices.
    Components:
    - macd: Fast EMA - Slow EMA
    - signal: EMA of the MACD line
    - histogram: macd - signal
    """

    params_type = MACDParams
    short_name = "MACD"
    outputs = ("macd", "signal", "histogram")

    @property
    def required_columns(self) -> list[str]:
        return ["close"]

    @property
    def min_length(self) -> int:
        return max(self.params.fast_period, self.params.slow_period)

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate MACD components.

        Args:
            df: DataFrame with 'close' column

        Returns:
            IndicatorResult with macd, signal and histogram outputs
        """
        p = self.params
        close = df["close"].to_numpy(dtype=float)

        fast = ema(close, p.fast_period)
        slow = ema(close, p.slow_period)
        start = max(fast.start, slow.start)
        macd = Windowed(fast.since(start) - slow.since(start), start)

        signal = macd.then(ema, p.signal_period)
        histogram = Windowed(macd.since(signal.start) - signal.values, signal.start)

        return self.build_result(df, macd=macd, signal=signal, histogram=histogram)


class ADXIndicator(BaseIndicator):
    """Average Directional Index indicator.

    ADX measures trend strength regardless of direction.
    Values above 25 typically indicate a strong trend.
    Also provides +DI and -DI for direction.
    """

    params_type = ADXParams
    short_name = "ADX"
    outputs = ("adx", "plus_di", "minus_di")

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low", "close"]

    @property
    def min_length(self) -> int:
        return 2 * self.params.period

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate ADX with Wilder smoothing of TR, +DM and -DM.

        Args:
            df: DataFrame with 'high', 'low', 'close' columns

        Returns:
            IndicatorResult with adx, plus_di and minus_di outputs
        """
        period = self.params.period
        high = df["high"].to_numpy(dtype=float)
        low = df["low"].to_numpy(dtype=float)
        close = df["close"].to_numpy(dtype=float)

        up_move = np.diff(high, prepend=high[0])
        down_move = -np.diff(low, prepend=low[0])
        plus_dm = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
        minus_dm = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)

        smoothed_tr = wilder(true_range(high, low, close), period)
        smoothed_plus = wilder(plus_dm, period)
        smoothed_minus = wilder(minus_dm, period)

        plus_di = safe_divide(100 * smoothed_plus.values, smoothed_tr.values)
        minus_di = safe_divide(100 * smoothed_minus.values, smoothed_tr.values)
        dx = safe_divide(100 * np.abs(plus_di - minus_di), plus_di + minus_di)

        start = smoothed_tr.start
        adx = Windowed(dx, start).then(wilder, period)

        return self.build_result(
            df,
            adx=adx,
            plus_di=Windowed(plus_di, start),
            minus_di=Windowed(minus_di, start),
        )


class AroonIndicator(BaseIndicator):
    """Aroon Up/Down: how recently the window's extreme high and low occurred.

    The window spans ``period + 1`` bars; ties resolve to the most recent bar.
    """

    params_type = AroonParams
    short_name = "AROON"
    outputs = ("aroon_up", "aroon_down", "oscillator")

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low"]

    @property
    def min_length(self) -> int:
        return self.params.period + 1

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        period = self.params.period
        # Reversed windows put the newest bar first, so argmax/argmin give
        # bars-since of the most recent extreme.
        high_windows = windows(df["high"].to_numpy(dtype=float), period + 1)[:, ::-1]
        low_windows = windows(df["low"].to_numpy(dtype=float), period + 1)[:, ::-1]
        since_high = np.argmax(high_windows, axis=1)
        since_low = np.argmin(low_windows, axis=1)

        up = (period - since_high) / period * 100
        down = (period - since_low) / period * 100

        return self.build_result(
            df,
            aroon_up=Windowed(up, period),
            aroon_down=Windowed(down, period),
            oscillator=Windowed(up - down, period),
        )


class ParabolicSARIndicator(BaseIndicator):
    """Wilder's Parabolic Stop and Reverse.

    Defined from the first bar. The initial trend is up when the second
    close exceeds the first. On a reversal the SAR jumps to the prior
    extreme point and the acceleration factor resets to ``step``.
    """

    params_type = ParabolicSARParams
    short_name = "PSAR"

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low", "close"]

    @property
    def min_length(self) -> int:
        return 2

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        step = self.params.step
        max_step = self.params.max_step
        high = df["high"].to_numpy(dtype=float)
        low = df["low"].to_numpy(dtype=float)
        close = df["close"].to_numpy(dtype=float)

        uptrend = bool(close[1] > close[0])
        af = step
        ep = high[0] if uptrend else low[0]
        sar = low[0] if uptrend else high[0]

        values = [sar]
        trends = ["up" if uptrend else "down"]
        for i in range(1, len(df)):
            sar = sar + af * (ep - sar)

            if uptrend:
                sar = min(sar, low[i - 1], low[i - 2] if i >= 2 else low[i - 1])
                if low[i] < sar:
                    uptrend = False
                    sar = ep
                    ep = low[i]
                    af = step
                elif high[i] > ep:
                    ep = high[i]
                    af = min(af + step, max_step)
            else:
                sar = max(sar, high[i - 1], high[i - 2] if i >= 2 else high[i - 1])
                if high[i] > sar:
                    uptrend = True
                    sar = ep
                    ep = high[i]
                    af = step
                elif low[i] < ep:
                    ep = low[i]
                    af = min(af + step, max_step)

            values.append(sar)
            trends.append("up" if uptrend else "down")

        return self.build_result(
            df,
            labels={"trend": trends},
            value=Windowed(np.asarray(values), 0),
        )


def project_times(times: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Bar times for ``indices``, extrapolating past the last bar.

    Future bars are spaced by the average interval of the input, rounded to
    whole seconds.
    """
    n = len(times)
    step = int(round((times[-1] - times[0]) / (n - 1))) if n > 1 else 0
    clipped = np.minimum(indices, n - 1)
    return np.where(indices < n, times[clipped], times[-1] + (indices - (n - 1)) * step)


class IchimokuIndicator(BaseIndicator):
    """Ichimoku Kinko Hyo.

    Tenkan and Kijun are window midpoints. Senkou spans are projected
    ``kijun_period`` bars forward (past the last bar where needed); the
    Chikou span is the close plotted ``kijun_period`` bars back.
    """

    params_type = IchimokuParams
    short_name = "ICHIMOKU"
    outputs = ("tenkan_sen", "kijun_sen", "senkou_span_a", "senkou_span_b", "chikou_span")

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low", "close"]

    @property
    def min_length(self) -> int:
        p = self.params
        return max(p.tenkan_period, p.kijun_period, p.senkou_period)

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        p = self.params
        high = df["high"].to_numpy(dtype=float)
        low = df["low"].to_numpy(dtype=float)
        close = df["close"].to_numpy(dtype=float)
        times = bar_times(df)
        shift = p.kijun_period

        tenkan = midpoint(high, low, p.tenkan_period)
        kijun = midpoint(high, low, p.kijun_period)
        start = max(tenkan.start, kijun.start)
        span_a = Windowed((tenkan.since(start) + kijun.since(start)) / 2.0, start)
        span_b = midpoint(high, low, p.senkou_period)

        def projected(series: Windowed) -> list[IndicatorPoint]:
            indices = np.arange(series.start, series.end) + shift
            stamps = project_times(times, indices)
            return [IndicatorPoint(int(t), float(v)) for t, v in zip(stamps, series.values)]

        chikou = [
            IndicatorPoint(int(t), float(v)) for t, v in zip(times[:-shift], close[shift:])
        ]

        return self.build_result(
            df,
            tenkan_sen=tenkan,
            kijun_sen=kijun,
            senkou_span_a=projected(span_a),
            senkou_span_b=projected(span_b),
            chikou_span=chikou,
        )

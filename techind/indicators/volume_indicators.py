"""Volume-weighted technical indicators."""

import numpy as np
import pandas as pd

from .base_indicator import BaseIndicator, IndicatorResult, bar_times
from .params import CMFParams, MFIParams, OBVParams, VWAPParams
from .smoothing import Windowed, rolling_sum, safe_divide, sma, typical_price

SECONDS_PER_DAY = 86400


class OBVIndicator(BaseIndicator):
    """On-Balance Volume indicator.

    OBV measures buying and selling pressure as a cumulative indicator:
    - Price up: Add volume to OBV
    - Price down: Subtract volume from OBV
    - Price unchanged: OBV unchanged

    Used to confirm price trends and detect divergences.
    Rising OBV with flat price suggests accumulation.
    Falling OBV with flat price suggests distribution.
    """

    params_type = OBVParams
    short_name = "OBV"

    @property
    def output_names(self) -> tuple[str, ...]:
        if self.params.signal_period:
            return ("obv", "signal")
        return ("obv",)

    @property
    def required_columns(self) -> list[str]:
        return ["close", "volume"]

    @property
    def min_length(self) -> int:
        return 1

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate On-Balance Volume.

        Args:
            df: DataFrame with 'close' and 'volume' columns

        Returns:
            IndicatorResult with cumulative OBV values, 0 on the first bar
        """
        close = df["close"].to_numpy(dtype=float)
        volume = df["volume"].to_numpy(dtype=float)

        direction = np.sign(np.diff(close))
        obv = Windowed(np.concatenate([[0.0], np.cumsum(direction * volume[1:])]), 0)

        if self.params.signal_period:
            return self.build_result(
                df, obv=obv, signal=obv.then(sma, self.params.signal_period)
            )
        return self.build_result(df, obv=obv)


class CMFIndicator(BaseIndicator):
    """Chaikin Money Flow.

    Sum of money-flow volume over the window divided by the window's volume.
    The money-flow multiplier is 0 on bars with no range, and CMF is 0 on
    windows with no volume.
    """

    params_type = CMFParams
    short_name = "CMF"

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low", "close", "volume"]

    @property
    def min_length(self) -> int:
        return self.params.period

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        period = self.params.period
        high = df["high"].to_numpy(dtype=float)
        low = df["low"].to_numpy(dtype=float)
        close = df["close"].to_numpy(dtype=float)
        volume = df["volume"].to_numpy(dtype=float)

        multiplier = safe_divide((close - low) - (high - close), high - low)
        flow_volume = rolling_sum(multiplier * volume, period)
        total_volume = rolling_sum(volume, period)

        cmf = safe_divide(flow_volume.values, total_volume.values)
        return self.build_result(df, value=Windowed(cmf, flow_volume.start))


class MFIIndicator(BaseIndicator):
    """Money Flow Index, a volume-weighted RSI on the typical price.

    100 when the window has no negative flow, 0 when it has no positive flow.
    """

    params_type = MFIParams
    short_name = "MFI"

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low", "close", "volume"]

    @property
    def min_length(self) -> int:
        return self.params.period + 1

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        period = self.params.period
        typical = typical_price(df["high"], df["low"], df["close"])
        raw_flow = typical * df["volume"].to_numpy(dtype=float)

        # flow[j] belongs to bar j + 1
        change = np.diff(typical)
        positive = rolling_sum(np.where(change > 0, raw_flow[1:], 0.0), period)
        negative = rolling_sum(np.where(change < 0, raw_flow[1:], 0.0), period)

        ratio = safe_divide(positive.values, negative.values)
        mfi = np.where(
            negative.values == 0,
            100.0,
            np.where(positive.values == 0, 0.0, 100.0 - 100.0 / (1.0 + ratio)),
        )
        return self.build_result(df, value=Windowed(mfi, positive.start + 1))


class VWAPIndicator(BaseIndicator):
    """Volume Weighted Average Price.

    Cumulative sum(typical price * volume) / sum(volume), restarted at each
    UTC day boundary when ``reset_on_session`` is set. Where no volume has
    traded yet the typical price is used. With ``bands`` enabled, upper and
    lower bands sit ``band_multiplier`` volume-weighted standard deviations
    from the VWAP.
    """

    params_type = VWAPParams
    short_name = "VWAP"

    @property
    def name(self) -> str:
        if self.params.bands:
            return f"VWAP_{self.params.band_multiplier}"
        return "VWAP"

    @property
    def output_names(self) -> tuple[str, ...]:
        if self.params.bands:
            return ("vwap", "upper", "lower")
        return ("vwap",)

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low", "close", "volume"]

    @property
    def min_length(self) -> int:
        return 1

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        typical = pd.Series(typical_price(df["high"], df["low"], df["close"]))
        volume = pd.Series(df["volume"].to_numpy(dtype=float))

        if self.params.reset_on_session:
            day = pd.Series(bar_times(df) // SECONDS_PER_DAY)
            session = (day != day.shift()).cumsum()
        else:
            session = pd.Series(np.zeros(len(df), dtype=int))

        cum_volume = volume.groupby(session).cumsum().to_numpy()
        cum_tpv = (typical * volume).groupby(session).cumsum().to_numpy()
        tp = typical.to_numpy()
        vwap = np.where(cum_volume > 0, safe_divide(cum_tpv, cum_volume), tp)

        if not self.params.bands:
            return self.build_result(df, vwap=Windowed(vwap, 0))

        cum_tp2v = (typical ** 2 * volume).groupby(session).cumsum().to_numpy()
        variance = np.where(cum_volume > 0, safe_divide(cum_tp2v, cum_volume) - vwap ** 2, 0.0)
        deviation = self.params.band_multiplier * np.sqrt(np.maximum(variance, 0.0))

        return self.build_result(
            df,
            vwap=Windowed(vwap, 0),
            upper=Windowed(vwap + deviation, 0),
            lower=Windowed(vwap - deviation, 0),
        )

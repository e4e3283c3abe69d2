"""Volatility and band indicators."""

import pandas as pd

from .base_indicator import (
    BarsInput,
    BaseIndicator,
    IndicatorOutput,
    IndicatorPoint,
    IndicatorResult,
    bar_times,
    extract_prices,
    source_columns,
    to_frame,
)
from .params import ATRParams, BollingerParams, EnvelopeParams
from .smoothing import Windowed, rolling_std, safe_divide, sma, true_range, wilder


class BollingerBandsIndicator(BaseIndicator):
    """Bollinger Bands indicator.

    Middle band is the SMA; upper and lower bands sit ``std_dev_multiplier``
    population standard deviations away from it.
    """

    params_type = BollingerParams
    short_name = "BB"
    outputs = ("upper", "middle", "lower")

    @property
    def required_columns(self) -> list[str]:
        return source_columns(self.params.source)

    @property
    def min_length(self) -> int:
        return self.params.period

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate the three bands.

        Args:
            df: DataFrame with the columns of the configured price source

        Returns:
            IndicatorResult with upper, middle and lower outputs
        """
        period = self.params.period
        prices = extract_prices(df, self.params.source)
        middle = sma(prices, period)
        width = self.params.std_dev_multiplier * rolling_std(prices, period).values

        return self.build_result(
            df,
            upper=Windowed(middle.values + width, middle.start),
            middle=middle,
            lower=Windowed(middle.values - width, middle.start),
        )


class EnvelopeIndicator(BaseIndicator):
    """Moving Average Envelope: SMA shifted up and down by a fixed percentage."""

    params_type = EnvelopeParams
    short_name = "ENV"
    outputs = ("upper", "middle", "lower")

    @property
    def required_columns(self) -> list[str]:
        return source_columns(self.params.source)

    @property
    def min_length(self) -> int:
        return self.params.period

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        prices = extract_prices(df, self.params.source)
        middle = sma(prices, self.params.period)
        offset = self.params.percentage / 100.0

        return self.build_result(
            df,
            upper=Windowed(middle.values * (1 + offset), middle.start),
            middle=middle,
            lower=Windowed(middle.values * (1 - offset), middle.start),
        )


class ATRIndicator(BaseIndicator):
    """Average True Range indicator.

    ATR measures market volatility by calculating the average of true ranges:
    - True Range = max(high-low, |high-prev_close|, |low-prev_close|)

    Used for:
    - Position sizing (higher ATR = smaller position)
    - Stop-loss placement (e.g., 2x ATR trailing stop)

    ATR doesn't indicate direction, only volatility magnitude.
    """

    params_type = ATRParams
    short_name = "ATR"

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low", "close"]

    @property
    def min_length(self) -> int:
        return self.params.period + 1

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate Average True Range.

        Seeded with the mean of the first ``period`` true ranges, then
        Wilder-smoothed.

        Args:
            df: DataFrame with 'high', 'low', 'close' columns

        Returns:
            IndicatorResult with ATR values
        """
        tr = true_range(
            df["high"].to_numpy(dtype=float),
            df["low"].to_numpy(dtype=float),
            df["close"].to_numpy(dtype=float),
        )
        return self.build_result(df, value=wilder(tr, self.params.period))


def _band_frame(result: IndicatorResult) -> pd.DataFrame:
    frame = result.to_frame()
    missing = {"upper", "middle", "lower"} - set(frame.columns)
    if missing:
        raise ValueError(f"{result.name} has no band outputs {sorted(missing)}")
    return frame.dropna(subset=["upper", "middle", "lower"])


def band_width(result: IndicatorResult) -> IndicatorOutput:
    """Band width in percent of the middle band: (upper - lower) / middle * 100.

    Works on any upper/middle/lower result (Bollinger Bands, Envelope);
    0 where the middle band is 0.

    Raises:
        ValueError: If the result has no upper/middle/lower outputs
    """
    frame = _band_frame(result)
    width = safe_divide(frame["upper"] - frame["lower"], frame["middle"]) * 100
    return [IndicatorPoint(int(t), float(v)) for t, v in zip(frame.index, width)]


def percent_b(
    bars: BarsInput, result: IndicatorResult, source: str = "close"
) -> IndicatorOutput:
    """%B: where the price sits inside the band, 0 at lower and 1 at upper.

    0.5 where the band has zero width. Bars without a band value are skipped.

    Raises:
        ValueError: If the result has no upper/middle/lower outputs
    """
    frame = _band_frame(result)
    df = to_frame(bars)
    if df.empty or frame.empty:
        return []

    prices = pd.Series(extract_prices(df, source), index=bar_times(df))
    prices = prices[~prices.index.duplicated(keep="last")]
    aligned = prices.reindex(frame.index)
    frame = frame[aligned.notna().to_numpy()]
    aligned = aligned.dropna()

    band = (frame["upper"] - frame["lower"]).to_numpy()
    values = safe_divide(aligned.to_numpy() - frame["lower"].to_numpy(), band, fill=0.5)
    return [IndicatorPoint(int(t), float(v)) for t, v in zip(frame.index, values)]

"""Moving-average and windowed-statistics primitives.

Every primitive returns a ``Windowed`` series: the defined values only, plus
the index of the input element the first value lines up with. Undefined
leading positions are never materialised, so nothing downstream has to
filter NaN padding.
"""

from dataclasses import dataclass
from typing import Callable

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view


@dataclass(frozen=True)
class Windowed:
    """Defined values of a derived series and the input index of the first one."""
    values: np.ndarray
    start: int

    def __len__(self) -> int:
        return len(self.values)

    @property
    def end(self) -> int:
        """Input index one past the last value."""
        return self.start + len(self.values)

    def at(self, index: int) -> float:
        return float(self.values[index - self.start])

    def since(self, index: int) -> np.ndarray:
        """Values aligned to input positions ``index`` onward."""
        return self.values[max(index - self.start, 0):]

    def then(self, fn: Callable[..., "Windowed"], *args) -> "Windowed":
        """Apply another primitive to these values, keeping input alignment."""
        inner = fn(self.values, *args)
        return Windowed(inner.values, self.start + inner.start)


def _as_array(values) -> np.ndarray:
    return np.asarray(values, dtype=float)


def _empty(start: int) -> Windowed:
    return Windowed(np.empty(0), start)


def safe_divide(numerator, denominator, fill: float = 0.0) -> np.ndarray:
    """Element-wise division with ``fill`` wherever the denominator is zero."""
    numerator = _as_array(numerator)
    denominator = _as_array(denominator)
    out = np.full(np.broadcast(numerator, denominator).shape, fill, dtype=float)
    np.divide(numerator, denominator, out=out, where=denominator != 0)
    return out


def windows(values, period: int) -> np.ndarray:
    """Trailing windows of ``period`` elements, one row per defined position."""
    x = _as_array(values)
    if len(x) < period:
        return np.empty((0, period))
    return sliding_window_view(x, period)


def sma(values, period: int) -> Windowed:
    """Arithmetic mean of each trailing window."""
    return Windowed(windows(values, period).mean(axis=1), period - 1)


def ema(values, period: int) -> Windowed:
    """Exponential average with k = 2 / (period + 1), seeded with the first SMA."""
    return _recursive_average(values, period, 2.0 / (period + 1))


def wilder(values, period: int) -> Windowed:
    """Wilder's smoothing: avg = (prev * (period - 1) + x) / period, SMA seed."""
    return _recursive_average(values, period, 1.0 / period)


def _recursive_average(values, period: int, k: float) -> Windowed:
    x = _as_array(values)
    if len(x) < period:
        return _empty(period - 1)

    out = np.empty(len(x) - period + 1)
    current = x[:period].mean()
    out[0] = current
    for i, price in enumerate(x[period:], start=1):
        current = (price - current) * k + current
        out[i] = current
    return Windowed(out, period - 1)


def wma(values, period: int) -> Windowed:
    """Linearly weighted average, weight ``j`` on the ``j``-th oldest element."""
    weights = np.arange(1, period + 1, dtype=float)
    return Windowed(windows(values, period) @ weights / weights.sum(), period - 1)


def rolling_max(values, period: int) -> Windowed:
    return Windowed(windows(values, period).max(axis=1), period - 1)


def rolling_min(values, period: int) -> Windowed:
    return Windowed(windows(values, period).min(axis=1), period - 1)


def rolling_sum(values, period: int) -> Windowed:
    return Windowed(windows(values, period).sum(axis=1), period - 1)


def rolling_std(values, period: int) -> Windowed:
    """Population standard deviation (ddof=0) of each trailing window."""
    return Windowed(windows(values, period).std(axis=1), period - 1)


def midpoint(high, low, period: int) -> Windowed:
    """(highest high + lowest low) / 2 over each trailing window."""
    highest = rolling_max(high, period)
    lowest = rolling_min(low, period)
    return Windowed((highest.values + lowest.values) / 2.0, highest.start)


def true_range(high, low, close) -> np.ndarray:
    """True range per bar; the first bar has no prior close and uses high - low."""
    high = _as_array(high)
    low = _as_array(low)
    close = _as_array(close)

    tr = high - low
    if len(tr) > 1:
        prev_close = close[:-1]
        tr[1:] = np.maximum.reduce([
            tr[1:],
            np.abs(high[1:] - prev_close),
            np.abs(low[1:] - prev_close),
        ])
    return tr


def typical_price(high, low, close) -> np.ndarray:
    """(high + low + close) / 3 per bar."""
    return (_as_array(high) + _as_array(low) + _as_array(close)) / 3.0


def median_price(high, low) -> np.ndarray:
    """(high + low) / 2 per bar."""
    return (_as_array(high) + _as_array(low)) / 2.0

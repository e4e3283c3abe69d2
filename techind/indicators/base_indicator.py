"""Base class and data model shared by all technical indicators."""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field, is_dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from techind.utils.logger import get_logger
from .params import IndicatorParams, resolve_params
from .smoothing import Windowed

logger = get_logger(__name__)

BAR_COLUMNS = ["time", "open", "high", "low", "close", "volume"]


@dataclass(frozen=True)
class Bar:
    """One OHLCV bar. ``time`` is integer seconds since the Unix epoch."""
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


@dataclass(frozen=True)
class IndicatorPoint:
    time: int
    value: float


IndicatorOutput = list[IndicatorPoint]

BarsInput = Union[pd.DataFrame, Sequence[Bar], Sequence[Mapping[str, Any]], None]


class PriceSource(str, Enum):
    """Which price (or price blend) of each bar feeds an indicator."""
    CLOSE = "close"
    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    HL2 = "hl2"
    HLC3 = "hlc3"
    OHLC4 = "ohlc4"

    @property
    def columns(self) -> list[str]:
        return {
            PriceSource.HL2: ["high", "low"],
            PriceSource.HLC3: ["high", "low", "close"],
            PriceSource.OHLC4: ["open", "high", "low", "close"],
        }.get(self, [self.value])


def source_columns(source: str) -> list[str]:
    """Columns a price source reads; unknown sources fall back to close."""
    try:
        return PriceSource(source).columns
    except ValueError:
        return ["close"]


def extract_prices(df: pd.DataFrame, source: str = "close") -> np.ndarray:
    """Per-bar price series for ``source`` as a float array."""
    columns = PriceSource(source).columns
    prices = df[columns].to_numpy(dtype=float)
    return prices.mean(axis=1) if len(columns) > 1 else prices[:, 0]


def to_frame(bars: BarsInput) -> pd.DataFrame:
    """Normalise bars (DataFrame, Bar objects or dicts) into a DataFrame.

    A DataFrame is returned as-is so callers keep their own index and dtypes.
    """
    if bars is None:
        return pd.DataFrame(columns=BAR_COLUMNS)
    if isinstance(bars, pd.DataFrame):
        return bars

    rows = [asdict(bar) if is_dataclass(bar) else dict(bar) for bar in bars]
    if not rows:
        return pd.DataFrame(columns=BAR_COLUMNS)
    return pd.DataFrame(rows)


def bar_times(df: pd.DataFrame) -> np.ndarray:
    """Bar times as int64 epoch seconds; datetime columns are converted."""
    times = df["time"]
    if pd.api.types.is_datetime64_any_dtype(times):
        if times.dt.tz is not None:
            times = times.dt.tz_convert("UTC").dt.tz_localize(None)
        return times.to_numpy(dtype="datetime64[s]").astype(np.int64)
    return times.to_numpy(dtype=np.int64)


class DiagnosticLevel(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal note about a calculation.

    Codes: ``invalid_parameter`` (error, result is empty),
    ``non_standard_parameter``, ``insufficient_data`` and ``unordered_time``.
    """
    level: DiagnosticLevel
    code: str
    message: str

    @classmethod
    def error(cls, code: str, message: str) -> "Diagnostic":
        return cls(DiagnosticLevel.ERROR, code, message)

    @classmethod
    def warning(cls, code: str, message: str) -> "Diagnostic":
        return cls(DiagnosticLevel.WARNING, code, message)


@dataclass
class IndicatorResult:
    """Container for indicator calculation results.

    Attributes:
        name: Indicator identifier (e.g., 'SMA_20', 'MACD_12_26_9')
        outputs: Named output series, each holding only defined points
        params: Parameters used for calculation
        diagnostics: Warnings and errors raised while calculating
        labels: Per-point categorical series aligned with an output
            (e.g. Parabolic SAR trend, Awesome Oscillator bar direction)
    """
    name: str
    outputs: dict[str, IndicatorOutput] = field(default_factory=dict)
    params: dict = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    labels: dict[str, list[str]] = field(default_factory=dict)

    @property
    def values(self) -> IndicatorOutput:
        """The primary (first) output."""
        return next(iter(self.outputs.values()), [])

    def __getitem__(self, output: str) -> IndicatorOutput:
        return self.outputs[output]

    @property
    def is_empty(self) -> bool:
        return all(len(points) == 0 for points in self.outputs.values())

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.level == DiagnosticLevel.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.level == DiagnosticLevel.WARNING]

    def has_diagnostic(self, code: str) -> bool:
        return any(d.code == code for d in self.diagnostics)

    def to_frame(self) -> pd.DataFrame:
        """All outputs as columns of one DataFrame indexed by time."""
        columns = {
            output: pd.Series(
                [p.value for p in points],
                index=pd.Index([p.time for p in points], dtype="int64"),
                dtype=float,
            )
            for output, points in self.outputs.items()
        }
        frame = pd.DataFrame(columns)
        frame.index.name = "time"
        return frame.sort_index()


def to_points(times: np.ndarray, series: Windowed) -> IndicatorOutput:
    """Pair each defined value with the time of the bar it aligns to."""
    stamps = times[series.start:series.end]
    return [IndicatorPoint(int(t), float(v)) for t, v in zip(stamps, series.values)]


class BaseIndicator(ABC):
    """Abstract base class for all technical indicators.

    Subclasses must implement:
        - required_columns: Property returning list of required DataFrame columns
        - min_length: Property returning the fewest bars that yield any output
        - calculate: Method performing the actual calculation

    and set ``params_type`` (the parameter family) and ``short_name``.

    Usage:
        indicator = RSIIndicator(period=14)
        result = indicator(bars)  # Validates and calculates
    """

    params_type: type = IndicatorParams
    short_name: str = ""
    outputs: tuple[str, ...] = ("value",)

    def __init__(self, params: Optional[Any] = None, **overrides):
        """Initialize the indicator.

        Args:
            params: A params object of ``params_type`` or a mapping of fields
            **overrides: Individual parameter fields (e.g. period=14)
        """
        self.params = resolve_params(self.params_type, params, overrides)

    @property
    def name(self) -> str:
        """Return indicator name, e.g. 'RSI_14' or 'MACD_12_26_9'."""
        parts = [self.short_name, *(str(v) for v in self.params.label_values())]
        return "_".join(parts)

    @property
    def output_names(self) -> tuple[str, ...]:
        return self.outputs

    @property
    @abstractmethod
    def required_columns(self) -> list[str]:
        """Return list of required DataFrame columns."""
        pass

    @property
    @abstractmethod
    def min_length(self) -> int:
        """Return the fewest bars for which at least one value is defined."""
        pass

    @abstractmethod
    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate indicator values.

        Called only with valid params and at least ``min_length`` bars.

        Args:
            df: OHLCV DataFrame with required columns

        Returns:
            IndicatorResult with calculated values
        """
        pass

    def validate_data(self, df: pd.DataFrame) -> None:
        """Validate input DataFrame has the time column and required columns.

        Args:
            df: Input DataFrame to validate

        Raises:
            ValueError: If required columns are missing
        """
        missing = {"time", *self.required_columns} - set(df.columns)
        if missing:
            raise ValueError(f"Missing required columns: {sorted(missing)}")

    def empty_result(self, diagnostics: Optional[list[Diagnostic]] = None) -> IndicatorResult:
        return IndicatorResult(
            name=self.name,
            outputs={output: [] for output in self.output_names},
            params=self.params.to_dict(),
            diagnostics=list(diagnostics or []),
        )

    def build_result(
        self,
        df: pd.DataFrame,
        labels: Optional[dict[str, list[str]]] = None,
        **outputs: Union[Windowed, IndicatorOutput],
    ) -> IndicatorResult:
        """Assemble a result from windowed series (or ready-made point lists)."""
        times = bar_times(df)
        return IndicatorResult(
            name=self.name,
            outputs={
                output: to_points(times, series) if isinstance(series, Windowed) else series
                for output, series in outputs.items()
            },
            params=self.params.to_dict(),
            labels=labels or {},
        )

    def __call__(self, bars: BarsInput) -> IndicatorResult:
        """Validate data and parameters, then calculate.

        Empty input, invalid parameters and too few bars all yield an empty
        result; the latter two are reported through ``diagnostics``.

        Raises:
            ValueError: If the bars are missing required columns
        """
        df = to_frame(bars)
        if df.empty:
            return self.empty_result()
        self.validate_data(df)

        problems = self.params.validate()
        if problems:
            for problem in problems:
                logger.warning(f"{self.short_name}: invalid parameter, {problem}")
            return self.empty_result(
                [Diagnostic.error("invalid_parameter", p) for p in problems]
            )

        diagnostics = []
        for note in self.params.warnings():
            logger.warning(f"{self.short_name}: {note}")
            diagnostics.append(Diagnostic.warning("non_standard_parameter", note))

        if not pd.Index(bar_times(df)).is_monotonic_increasing:
            diagnostics.append(Diagnostic.warning(
                "unordered_time", "bar times are not in ascending order"
            ))

        if len(df) < self.min_length:
            diagnostics.append(Diagnostic.warning(
                "insufficient_data",
                f"{self.name} needs at least {self.min_length} bars, got {len(df)}",
            ))
            return self.empty_result(diagnostics)

        result = self.calculate(df)
        result.diagnostics = diagnostics + result.diagnostics
        return result

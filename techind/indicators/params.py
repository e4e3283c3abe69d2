"""Parameter value objects, one frozen dataclass per indicator family.

Each class is one tag of the parameter union: the registry dispatches on the
class, and every field carries its documented default. ``validate()`` lists
problems that make a calculation impossible (the indicator then returns an
empty result), ``warnings()`` lists accepted but non-standard settings.
"""

from dataclasses import asdict, dataclass, fields, replace
from numbers import Integral, Real
from typing import Any, Mapping, Optional

PRICE_SOURCES = ("close", "open", "high", "low", "hl2", "hlc3", "ohlc4")


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool) and value > 0


def _check_period(name: str, value: Any) -> list[str]:
    if _is_positive_int(value):
        return []
    return [f"{name} must be a positive integer, got {value!r}"]


def _check_source(source: Any) -> list[str]:
    if source in PRICE_SOURCES:
        return []
    return [f"source must be one of {', '.join(PRICE_SOURCES)}, got {source!r}"]


@dataclass(frozen=True)
class IndicatorParams:
    """Base for all parameter families."""

    def validate(self) -> list[str]:
        return []

    def warnings(self) -> list[str]:
        return []

    def to_dict(self) -> dict:
        return asdict(self)

    def label_values(self) -> tuple:
        """Numeric parameter values used in indicator and column names."""
        values = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or value is None:
                continue
            if isinstance(value, Real):
                values.append(value)
        return tuple(values)


# ── Single-period families ────────────────────────────────


@dataclass(frozen=True)
class PeriodParams(IndicatorParams):
    period: int = 14

    def validate(self) -> list[str]:
        return _check_period("period", self.period)


@dataclass(frozen=True)
class RSIParams(PeriodParams):
    period: int = 14


@dataclass(frozen=True)
class ATRParams(PeriodParams):
    period: int = 14


@dataclass(frozen=True)
class ADXParams(PeriodParams):
    period: int = 14


@dataclass(frozen=True)
class CCIParams(PeriodParams):
    period: int = 20


@dataclass(frozen=True)
class WilliamsRParams(PeriodParams):
    period: int = 14


@dataclass(frozen=True)
class ROCParams(PeriodParams):
    period: int = 12


@dataclass(frozen=True)
class MomentumParams(PeriodParams):
    period: int = 10


@dataclass(frozen=True)
class CMFParams(PeriodParams):
    period: int = 20


@dataclass(frozen=True)
class MFIParams(PeriodParams):
    period: int = 14


@dataclass(frozen=True)
class AroonParams(PeriodParams):
    period: int = 25


# ── Price-source families ─────────────────────────────────


@dataclass(frozen=True)
class MovingAverageParams(IndicatorParams):
    """SMA, EMA, WMA, DEMA and TEMA."""
    period: int = 20
    source: str = "close"

    def validate(self) -> list[str]:
        return _check_period("period", self.period) + _check_source(self.source)


@dataclass(frozen=True)
class BollingerParams(IndicatorParams):
    period: int = 20
    std_dev_multiplier: float = 2.0
    source: str = "close"

    def validate(self) -> list[str]:
        problems = _check_period("period", self.period) + _check_source(self.source)
        if not isinstance(self.std_dev_multiplier, Real) or self.std_dev_multiplier < 0:
            problems.append(
                f"std_dev_multiplier must be non-negative, got {self.std_dev_multiplier!r}"
            )
        return problems


@dataclass(frozen=True)
class EnvelopeParams(IndicatorParams):
    period: int = 20
    percentage: float = 2.5
    source: str = "close"

    def validate(self) -> list[str]:
        problems = _check_period("period", self.period) + _check_source(self.source)
        if not isinstance(self.percentage, Real) or self.percentage < 0:
            problems.append(f"percentage must be non-negative, got {self.percentage!r}")
        return problems


# ── Multi-period families ─────────────────────────────────


@dataclass(frozen=True)
class MACDParams(IndicatorParams):
    fast_period: int = 12
    slow_period: int = 26
    signal_period: int = 9

    def validate(self) -> list[str]:
        return (
            _check_period("fast_period", self.fast_period)
            + _check_period("slow_period", self.slow_period)
            + _check_period("signal_period", self.signal_period)
        )

    def warnings(self) -> list[str]:
        if self.fast_period >= self.slow_period:
            return [
                f"fast_period ({self.fast_period}) should be less than "
                f"slow_period ({self.slow_period})"
            ]
        return []


@dataclass(frozen=True)
class AwesomeOscillatorParams(IndicatorParams):
    fast_period: int = 5
    slow_period: int = 34

    def validate(self) -> list[str]:
        return (
            _check_period("fast_period", self.fast_period)
            + _check_period("slow_period", self.slow_period)
        )

    def warnings(self) -> list[str]:
        if self.fast_period >= self.slow_period:
            return [
                f"fast_period ({self.fast_period}) should be less than "
                f"slow_period ({self.slow_period})"
            ]
        return []


@dataclass(frozen=True)
class StochasticParams(IndicatorParams):
    """%K lookback, %D smoothing, and the optional %K smoothing (1 = fast)."""
    k_period: int = 14
    d_period: int = 3
    smooth: int = 3

    def validate(self) -> list[str]:
        return (
            _check_period("k_period", self.k_period)
            + _check_period("d_period", self.d_period)
            + _check_period("smooth", self.smooth)
        )


@dataclass(frozen=True)
class StochasticRSIParams(IndicatorParams):
    rsi_period: int = 14
    k_period: int = 14
    d_period: int = 3
    smooth: int = 3

    def validate(self) -> list[str]:
        return (
            _check_period("rsi_period", self.rsi_period)
            + _check_period("k_period", self.k_period)
            + _check_period("d_period", self.d_period)
            + _check_period("smooth", self.smooth)
        )


@dataclass(frozen=True)
class IchimokuParams(IndicatorParams):
    tenkan_period: int = 9
    kijun_period: int = 26
    senkou_period: int = 52

    def validate(self) -> list[str]:
        return (
            _check_period("tenkan_period", self.tenkan_period)
            + _check_period("kijun_period", self.kijun_period)
            + _check_period("senkou_period", self.senkou_period)
        )


@dataclass(frozen=True)
class ParabolicSARParams(IndicatorParams):
    step: float = 0.02
    max_step: float = 0.2

    def validate(self) -> list[str]:
        problems = []
        for name in ("step", "max_step"):
            value = getattr(self, name)
            if not isinstance(value, Real) or isinstance(value, bool) or value <= 0:
                problems.append(f"{name} must be positive, got {value!r}")
        if not problems and self.step > self.max_step:
            problems.append(
                f"step ({self.step}) must not exceed max_step ({self.max_step})"
            )
        return problems


# ── Volume families ───────────────────────────────────────


@dataclass(frozen=True)
class OBVParams(IndicatorParams):
    """OBV itself has no parameters; ``signal_period`` adds an SMA signal line."""
    signal_period: Optional[int] = None

    def validate(self) -> list[str]:
        if self.signal_period is None:
            return []
        return _check_period("signal_period", self.signal_period)


@dataclass(frozen=True)
class VWAPParams(IndicatorParams):
    reset_on_session: bool = True
    bands: bool = False
    band_multiplier: float = 2.0

    def validate(self) -> list[str]:
        if not isinstance(self.band_multiplier, Real) or self.band_multiplier < 0:
            return [f"band_multiplier must be non-negative, got {self.band_multiplier!r}"]
        return []


def resolve_params(
    params_type: type,
    params: Optional[Any] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> IndicatorParams:
    """Build a params object from an instance, a mapping of overrides, or None.

    Raises:
        TypeError: params of another family, or unknown field names
    """
    overrides = dict(overrides or {})
    if params is None:
        return params_type(**overrides)
    if isinstance(params, params_type):
        return replace(params, **overrides) if overrides else params
    if isinstance(params, Mapping):
        return params_type(**{**params, **overrides})
    raise TypeError(
        f"expected {params_type.__name__} or a mapping, got {type(params).__name__}"
    )

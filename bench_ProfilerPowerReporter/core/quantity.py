# bench_ProfilerPowerReporter/core/quantity.py
from __future__ import annotations
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum
from fractions import Fraction
from typing import Iterable, Sequence, Union

# significant digits used whenever an exact value has to be rendered as Decimal
PRECISION: int = 50
_GUARD_DIGITS: int = 10

Number = Union[int, str, Decimal, Fraction]


class PowerAmountUnit(str, Enum):
    PICOWATT_HOUR = "pWh"
    MICROWATT_HOUR = "μWh"
    MILLIWATT_HOUR = "mWh"
    WATT_HOUR = "Wh"
    JOULE = "J"

    @property
    def factor(self) -> Fraction:
        """Size of one unit expressed in watt-hours."""
        return _TO_WATT_HOUR[self]

    @property
    def symbol(self) -> str:
        return self.value


_TO_WATT_HOUR: dict[PowerAmountUnit, Fraction] = {
    PowerAmountUnit.PICOWATT_HOUR:  Fraction(1, 10**12),
    PowerAmountUnit.MICROWATT_HOUR: Fraction(1, 10**6),
    PowerAmountUnit.MILLIWATT_HOUR: Fraction(1, 10**3),
    PowerAmountUnit.WATT_HOUR:      Fraction(1),
    PowerAmountUnit.JOULE:          Fraction(1, 3600),
}


# ---------- exact number helpers ----------
def to_fraction(value: Number | float) -> Fraction:
    if isinstance(value, Fraction):
        return value
    if isinstance(value, float):
        # floats only reach here from hand-written callers; go through repr to keep 0.1 == 1/10
        return Fraction(repr(value))
    if isinstance(value, (int, Decimal)):
        return Fraction(value)
    return Fraction(str(value).strip())


def to_decimal(value: Fraction, precision: int = PRECISION) -> Decimal:
    """Render an exact rational as a Decimal (exact when the expansion terminates)."""
    with localcontext() as ctx:
        ctx.prec = precision
        return Decimal(value.numerator) / Decimal(value.denominator)


def convert(magnitude: Number, from_unit: PowerAmountUnit, to_unit: PowerAmountUnit) -> Fraction:
    """Exact conversion of a bare magnitude between two energy units."""
    m = to_fraction(magnitude)
    if from_unit == to_unit:
        return m
    return m * from_unit.factor / to_unit.factor


def _sqrt(value: Fraction) -> Fraction:
    if value < 0:
        raise ValueError("square root of a negative variance")
    with localcontext() as ctx:
        ctx.prec = PRECISION + _GUARD_DIGITS
        root = (Decimal(value.numerator) / Decimal(value.denominator)).sqrt()
        ctx.prec = PRECISION
        return Fraction(+root)


# ---------- value types ----------
@dataclass(frozen=True)
class PowerAmount:
    """An energy amount tagged with its unit. Arithmetic is exact (rational)."""

    magnitude: Fraction
    unit: PowerAmountUnit = PowerAmountUnit.PICOWATT_HOUR

    def __post_init__(self):
        object.__setattr__(self, "magnitude", to_fraction(self.magnitude))
        object.__setattr__(self, "unit", PowerAmountUnit(self.unit))

    @classmethod
    def zero(cls, unit: PowerAmountUnit = PowerAmountUnit.PICOWATT_HOUR) -> PowerAmount:
        return cls(Fraction(0), unit)

    @property
    def amount(self) -> Decimal:
        return to_decimal(self.magnitude)

    def get_amount(self, unit: PowerAmountUnit | None = None) -> Decimal:
        if unit is None:
            return self.amount
        return to_decimal(convert(self.magnitude, self.unit, unit))

    def convert(self, unit: PowerAmountUnit) -> PowerAmount:
        unit = PowerAmountUnit(unit)
        if unit == self.unit:
            return self
        return PowerAmount(convert(self.magnitude, self.unit, unit), unit)

    def __add__(self, other: PowerAmount) -> PowerAmount:
        if not isinstance(other, PowerAmount):
            return NotImplemented
        return PowerAmount(self.magnitude + other.convert(self.unit).magnitude, self.unit)

    def scaled(self, factor: Number) -> PowerAmount:
        return PowerAmount(self.magnitude * to_fraction(factor), self.unit)

    def to_string(self, decimals: int | None = None) -> str:
        amount = self.amount
        if decimals is not None:
            amount = amount.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
        return f"{amount} {self.unit.symbol}"

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class PowerSample:
    time: Decimal
    power: Fraction

    def __post_init__(self):
        object.__setattr__(self, "time", Decimal(self.time) if not isinstance(self.time, Decimal) else self.time)
        object.__setattr__(self, "power", to_fraction(self.power))

    @property
    def power_amount(self) -> Decimal:
        return to_decimal(self.power)


@dataclass(frozen=True)
class PowerAmountSeries:
    """Time-ordered power samples sharing one unit. Order is never changed."""

    unit: PowerAmountUnit = PowerAmountUnit.PICOWATT_HOUR
    samples: tuple[PowerSample, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "unit", PowerAmountUnit(self.unit))
        object.__setattr__(self, "samples", tuple(self.samples))

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    def convert(self, unit: PowerAmountUnit) -> PowerAmountSeries:
        unit = PowerAmountUnit(unit)
        if unit == self.unit:
            return self
        return PowerAmountSeries(
            unit,
            tuple(PowerSample(s.time, convert(s.power, self.unit, unit)) for s in self.samples),
        )

    def total(self) -> PowerAmount:
        return PowerAmount(sum((s.power for s in self.samples), Fraction(0)), self.unit)


# ---------- statistics ----------
def mean(amounts: Sequence[PowerAmount]) -> PowerAmount | None:
    """Arithmetic mean in the unit of the first element; None for no input."""
    if not amounts:
        return None
    total = PowerAmount.zero(amounts[0].unit)
    for a in amounts:
        total = total + a
    return PowerAmount(total.magnitude / len(amounts), total.unit)


def population_standard_deviation(amounts: Sequence[PowerAmount]) -> PowerAmount | None:
    """Standard deviation dividing by N (every iteration is the population)."""
    if not amounts:
        return None
    unit = amounts[0].unit
    values = [a.convert(unit).magnitude for a in amounts]
    mu = sum(values, Fraction(0)) / len(values)
    variance = sum(((v - mu) ** 2 for v in values), Fraction(0)) / len(values)
    return PowerAmount(_sqrt(variance), unit)


def decimal_mean(values: Iterable[Decimal]) -> Decimal | None:
    exact = [to_fraction(v) for v in values]
    if not exact:
        return None
    return to_decimal(sum(exact, Fraction(0)) / len(exact))


def decimal_population_standard_deviation(values: Iterable[Decimal]) -> Decimal | None:
    exact = [to_fraction(v) for v in values]
    if not exact:
        return None
    mu = sum(exact, Fraction(0)) / len(exact)
    variance = sum(((v - mu) ** 2 for v in exact), Fraction(0)) / len(exact)
    return to_decimal(_sqrt(variance))

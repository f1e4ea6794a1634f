"""
Deterministic scaled-integer arithmetic.

Public values are integers scaled by SCALE (1e18). exp/ln run at WIDE_SCALE (1e27)
and floor back to SCALE, which keeps their relative error far below the 1e-6
target for every argument the cost engine produces.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR, localcontext
from typing import Union

from .errors import DomainError, FixedPointOverflowError

SCALE = 10**18
WIDE_SCALE = 10**27
_WIDEN = WIDE_SCALE // SCALE

MAX_SERIES_TERMS = 96
MAX_EXP_ARGUMENT = 130
MAX_RELATIVE_ERROR = Decimal('1e-6')

# exp(-63) is below one WIDE_SCALE ulp
_EXP_ZERO_CUTOFF = 63 * WIDE_SCALE

# ln(2) floored at WIDE_SCALE
LN2_WIDE = 693147180559945309417232121


def exp_wide(x: int) -> int:
    """exp at WIDE_SCALE: halve the argument into [0, 1/2], sum the Taylor series, square back."""
    if x == 0:
        return WIDE_SCALE
    if x > MAX_EXP_ARGUMENT * WIDE_SCALE:
        raise FixedPointOverflowError(f"exp argument {x / WIDE_SCALE} exceeds {MAX_EXP_ARGUMENT}")
    negative = x < 0
    r = -x if negative else x
    if negative and r > _EXP_ZERO_CUTOFF:
        return 0

    halvings = 0
    while r > WIDE_SCALE // 2:
        r //= 2
        halvings += 1

    total = WIDE_SCALE
    term = WIDE_SCALE
    for n in range(1, MAX_SERIES_TERMS + 1):
        term = term * r // (n * WIDE_SCALE)
        if term == 0:
            break
        total += term

    for _ in range(halvings):
        total = total * total // WIDE_SCALE

    if negative:
        return WIDE_SCALE * WIDE_SCALE // total
    return total


def ln_wide(x: int) -> int:
    """ln at WIDE_SCALE: reduce by powers of two into [0.5, 2], then the atanh series."""
    if x <= 0:
        raise DomainError(f"ln undefined for non-positive argument {x / WIDE_SCALE}")

    k = 0
    m = x
    while m > 2 * WIDE_SCALE:
        m //= 2
        k += 1
    while m < WIDE_SCALE // 2:
        m *= 2
        k -= 1

    # ln(m) = 2 * atanh(s), s = (m - 1) / (m + 1), |s| <= 1/3
    s = (m - WIDE_SCALE) * WIDE_SCALE // (m + WIDE_SCALE)
    s_abs = abs(s)
    s_sq = s_abs * s_abs // WIDE_SCALE
    term = s_abs
    series = 0
    for n in range(MAX_SERIES_TERMS):
        series += term // (2 * n + 1)
        term = term * s_sq // WIDE_SCALE
        if term == 0:
            break
    if s < 0:
        series = -series
    return 2 * series + k * LN2_WIDE


def ceil_div(numerator: int, denominator: int) -> int:
    if denominator == 0:
        raise DomainError("Division by zero.")
    return -((-numerator) // denominator)


@dataclass(frozen=True, order=True)
class FixedPoint:
    """A signed integer scaled by SCALE. Supplies, costs and prices are never negative."""

    raw: int

    def __post_init__(self):
        if isinstance(self.raw, bool) or not isinstance(self.raw, int):
            raise TypeError(f"FixedPoint raw value must be int, got {type(self.raw).__name__}")

    @classmethod
    def zero(cls) -> 'FixedPoint':
        return cls(0)

    @classmethod
    def one(cls) -> 'FixedPoint':
        return cls(SCALE)

    @classmethod
    def from_int(cls, value: int) -> 'FixedPoint':
        return cls(int(value) * SCALE)

    @classmethod
    def from_decimal(cls, value: Union[Decimal, str, int]) -> 'FixedPoint':
        """Floor a Decimal (or decimal string) onto the SCALE grid."""
        with localcontext() as ctx:
            ctx.prec = 80
            scaled = (Decimal(value) * SCALE).to_integral_value(rounding=ROUND_FLOOR)
        return cls(int(scaled))

    @classmethod
    def from_ratio(cls, numerator: int, denominator: int) -> 'FixedPoint':
        if denominator == 0:
            raise DomainError("Division by zero.")
        return cls(numerator * SCALE // denominator)

    @classmethod
    def from_units(cls, units: int, decimals: int) -> 'FixedPoint':
        """Token base units as a whole-token value, e.g. 1500000 with 6 decimals -> 1.5."""
        return cls(units * SCALE // 10**decimals)

    def to_units(self, decimals: int) -> int:
        return self.raw * 10**decimals // SCALE

    def to_decimal(self) -> Decimal:
        return Decimal(f"{self.raw}e-18")

    def floor(self) -> int:
        return self.raw // SCALE

    def ceil(self) -> int:
        return ceil_div(self.raw, SCALE)

    def is_zero(self) -> bool:
        return self.raw == 0

    def is_negative(self) -> bool:
        return self.raw < 0

    def __add__(self, other: 'FixedPoint') -> 'FixedPoint':
        return FixedPoint(self.raw + other.raw)

    def __sub__(self, other: 'FixedPoint') -> 'FixedPoint':
        return FixedPoint(self.raw - other.raw)

    def __neg__(self) -> 'FixedPoint':
        return FixedPoint(-self.raw)

    def __mul__(self, other: 'FixedPoint') -> 'FixedPoint':
        return FixedPoint(self.raw * other.raw // SCALE)

    def __truediv__(self, other: 'FixedPoint') -> 'FixedPoint':
        if other.raw == 0:
            raise DomainError("Division by zero.")
        return FixedPoint(self.raw * SCALE // other.raw)

    def __str__(self) -> str:
        return str(self.to_decimal())

    def __repr__(self) -> str:
        return f"FixedPoint('{self.to_decimal()}')"


def exp(x: FixedPoint) -> FixedPoint:
    return FixedPoint(exp_wide(x.raw * _WIDEN) // _WIDEN)


def ln(x: FixedPoint) -> FixedPoint:
    if x.raw <= 0:
        raise DomainError(f"ln undefined for non-positive argument {x}")
    return FixedPoint(ln_wide(x.raw * _WIDEN) // _WIDEN)

from typing import List, Sequence, Tuple

from .errors import (
    InsufficientSupplyError,
    InvalidLiquidityError,
    OutcomeIndexError,
    UnderflowError,
    ValidationError,
)
from .fixed_point import SCALE, WIDE_SCALE, FixedPoint, exp_wide, ln_wide


def _validate_inputs(quantities: Sequence[FixedPoint], b: FixedPoint) -> None:
    if b.raw <= 0:
        raise InvalidLiquidityError(f"Liquidity parameter must be positive, got {b}")
    if not quantities:
        raise ValidationError("Quantities must not be empty.")
    for q in quantities:
        if q.is_negative():
            raise ValidationError(f"Invalid quantity: {q}. Must be non-negative.")


def _check_index(quantities: Sequence[FixedPoint], index: int) -> None:
    if not 0 <= index < len(quantities):
        raise OutcomeIndexError(f"Outcome index {index} out of range for {len(quantities)} outcomes")


def _shifted_exponentials(quantities: Sequence[FixedPoint], b: FixedPoint) -> Tuple[FixedPoint, List[int]]:
    """Returns m = max(q) and exp((q_i - m) / b) at WIDE_SCALE. Every exponent is <= 0."""
    m = max(quantities)
    return m, [exp_wide((q.raw - m.raw) * WIDE_SCALE // b.raw) for q in quantities]


def cost(quantities: Sequence[FixedPoint], b: FixedPoint) -> FixedPoint:
    """
    LMSR cost C(q) = b * ln(sum_i exp(q_i / b)), evaluated as
    m + b * ln(sum_i exp((q_i - m) / b)) with m = max(q) so no exponent is positive.
    """
    _validate_inputs(quantities, b)
    if len(quantities) == 1:
        return quantities[0]
    m, exps = _shifted_exponentials(quantities, b)
    # The max term contributes exactly WIDE_SCALE, so the log is never negative
    log_sum = ln_wide(sum(exps))
    return FixedPoint(m.raw + b.raw * log_sum // WIDE_SCALE)


def price(quantities: Sequence[FixedPoint], b: FixedPoint, index: int) -> FixedPoint:
    """Marginal price of outcome `index`: softmax(q / b)[index]."""
    _validate_inputs(quantities, b)
    _check_index(quantities, index)
    _, exps = _shifted_exponentials(quantities, b)
    return FixedPoint(exps[index] * SCALE // sum(exps))


def prices(quantities: Sequence[FixedPoint], b: FixedPoint) -> List[FixedPoint]:
    _validate_inputs(quantities, b)
    _, exps = _shifted_exponentials(quantities, b)
    total = sum(exps)
    return [FixedPoint(e * SCALE // total) for e in exps]


def _adjusted(quantities: Sequence[FixedPoint], index: int, delta: FixedPoint) -> List[FixedPoint]:
    adjusted = list(quantities)
    adjusted[index] = adjusted[index] + delta
    return adjusted


def net_cost(quantities: Sequence[FixedPoint], b: FixedPoint, index: int, amount: FixedPoint) -> FixedPoint:
    """
    Price impact of minting `amount` of outcome `index`:
    cost(q with q[index] += amount) - cost(q).
    A negative difference is an arithmetic fault and raises UnderflowError.
    """
    _validate_inputs(quantities, b)
    _check_index(quantities, index)
    if amount.is_negative():
        raise ValidationError(f"Invalid amount: {amount}. Must be non-negative.")

    before = cost(quantities, b)
    after = cost(_adjusted(quantities, index, amount), b)
    delta = after - before
    if delta.is_negative():
        raise UnderflowError(f"Net cost underflow: cost went from {before} to {after}")
    return delta


def net_revenue(quantities: Sequence[FixedPoint], b: FixedPoint, index: int, amount: FixedPoint) -> FixedPoint:
    """
    Collateral released by burning `amount` of outcome `index`:
    cost(q) - cost(q with q[index] -= amount).
    """
    _validate_inputs(quantities, b)
    _check_index(quantities, index)
    if amount.is_negative():
        raise ValidationError(f"Invalid amount: {amount}. Must be non-negative.")
    if quantities[index] < amount:
        raise InsufficientSupplyError(
            f"Insufficient supply for outcome {index}: have {quantities[index]}, need {amount}."
        )

    before = cost(quantities, b)
    after = cost(_adjusted(quantities, index, -amount), b)
    delta = before - after
    if delta.is_negative():
        raise UnderflowError(f"Net revenue underflow: cost went from {before} to {after}")
    return delta

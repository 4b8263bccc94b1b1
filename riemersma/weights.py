"""Weight curve for the error history.

The oldest remembered error gets weight 1 and the youngest gets *ratio*;
slots in between follow a geometric ramp, rounded at every step.
"""

from __future__ import annotations

import math


class DomainError(ValueError):
    """Raised for a history length or ratio outside its domain."""


def round_half_away(value: float) -> float:
    """Round to the nearest integer, halves away from zero.

    Python's :func:`round` rounds halves to even, which drifts from the
    reference diffusion arithmetic on values like ``4096.5``.
    """
    t = float(math.trunc(value))
    # value - t is exact, unlike value + 0.5
    if abs(value - t) >= 0.5:
        t += math.copysign(1.0, value)
    return t


def validate(capacity: int, ratio: float) -> None:
    if capacity < 1:
        msg = f"History length must be at least 1, got {capacity}"
        raise DomainError(msg)
    if not ratio > 0 or not math.isfinite(ratio):
        msg = f"Ratio must be positive and finite, got {ratio}"
        raise DomainError(msg)


def build_weights(capacity: int, ratio: float) -> tuple[float, ...]:
    """Precompute *capacity* weights ramping from 1.0 towards *ratio*.

    Args:
        capacity: Number of remembered errors (>= 1).
        ratio:    Weight ratio between youngest and oldest error (> 0).

    Returns:
        Tuple of *capacity* integral floats, first element ``1.0``.
    """
    validate(capacity, ratio)
    if capacity == 1:
        return (1.0,)

    m = math.exp(math.log(ratio) / (capacity - 1))
    weights = []
    v = 1.0
    for _ in range(capacity):
        weights.append(round_half_away(v))
        v *= m
    return tuple(weights)

"""Money rounding shared by every calculation.

Persisted settlements were produced with ``Math.round(n * 100) / 100`` on
binary floats. ``round2`` reproduces that exactly (half rounds up, evaluated on
the float product, not on a decimal re-parse), so recomputing an old record
gives the same cents. Python's built-in ``round`` rounds half to even and must
not be used for money.
"""
import math

from shibr.finance.errors import InvalidInputError


def round2(value: float) -> float:
    scaled = value * 100
    if not math.isfinite(scaled):
        raise InvalidInputError("amount", value, "not finite in cents")
    whole = math.floor(scaled)
    if scaled - whole >= 0.5:
        whole += 1
    return whole / 100

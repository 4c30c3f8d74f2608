"""Domain checks shared by the solver, the lift inverter and the grid."""

import math
from numbers import Integral

from ..errors import InvalidInputError
from ..schema import Alternative


def as_float(name: str, value) -> float:
    """Coerce to a finite float or raise InvalidInputError."""
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(out):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return out


def check_open_unit(name: str, value) -> float:
    """Require a real number strictly inside (0, 1)."""
    out = as_float(name, value)
    if not 0.0 < out < 1.0:
        raise InvalidInputError(f"{name} must be in (0, 1), got {value!r}")
    return out


def check_positive(name: str, value) -> float:
    out = as_float(name, value)
    if out <= 0:
        raise InvalidInputError(f"{name} must be > 0, got {value!r}")
    return out


def check_audience_size(value) -> int:
    """Audience size must be a positive integer (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidInputError(f"audience_size must be a positive integer, got {value!r}")
    if value <= 0:
        raise InvalidInputError(f"audience_size must be a positive integer, got {value!r}")
    try:
        float(value)
    except OverflowError:
        raise InvalidInputError(
            f"audience_size is too large to represent as a float ({int(value).bit_length()} bits)"
        ) from None
    return int(value)


def check_n_jobs(value) -> int:
    """joblib worker count: a non-zero integer (negative counts from the CPU total)."""
    if isinstance(value, bool) or not isinstance(value, Integral) or value == 0:
        raise InvalidInputError(f"n_jobs must be a non-zero integer, got {value!r}")
    return int(value)


def parse_alternative(value) -> Alternative:
    try:
        return Alternative(value)
    except ValueError:
        choices = ", ".join(a.value for a in Alternative)
        raise InvalidInputError(
            f"alternative must be one of {choices}, got {value!r}"
        ) from None

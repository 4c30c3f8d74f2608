"""
Cohen's h and its inverse.

Converts a detectable effect size back into the test-arm response rate it
implies and the relative lift over the baseline rate.
"""

import logging
import math
import warnings

import numpy as np

from ..errors import DivisionByZeroError, InvalidInputError, OutOfRangeWarning
from ..schema import LiftResult
from .validation import as_float, check_open_unit

logger = logging.getLogger(__name__)


def cohens_h(p1: float, p2: float) -> float:
    """Cohen's h = 2*asin(sqrt(p2)) - 2*asin(sqrt(p1))."""
    p1 = as_float("p1", p1)
    p2 = as_float("p2", p2)
    for name, p in (("p1", p1), ("p2", p2)):
        if not 0.0 <= p <= 1.0:
            raise InvalidInputError(f"{name} must be in [0, 1], got {p!r}")
    return 2 * math.asin(math.sqrt(p2)) - 2 * math.asin(math.sqrt(p1))


def invert_lift(h: float, baseline_rate: float, warn: bool = True) -> LiftResult:
    """
    Response rate and lift needed to produce effect size h over a baseline.

    p2 = sin((h + 2*asin(sqrt(p1))) / 2) ** 2, lift = (p2 - p1) / p1.

    Args:
        h: Effect size on the Cohen's h scale
        baseline_rate: Baseline response probability p1, in (0, 1)
        warn: Emit OutOfRangeWarning when the result is clamped

    Returns:
        LiftResult (clamped=True if no rate in [0, 1] has this h)

    Raises:
        DivisionByZeroError: baseline_rate is zero
        InvalidInputError: baseline_rate outside (0, 1) or h not finite
    """
    h = as_float("h", h)
    p1 = as_float("baseline_rate", baseline_rate)
    if p1 == 0:
        raise DivisionByZeroError("baseline_rate is 0; relative lift is undefined")
    p1 = check_open_unit("baseline_rate", p1)

    angle = h + 2 * math.asin(math.sqrt(p1))
    clamped = False
    if angle < 0 or angle > math.pi:
        clamped = True
        angle = min(max(angle, 0.0), math.pi)

    p2 = math.sin(angle / 2) ** 2
    if p2 < 0 or p2 > 1:
        clamped = True
    p2 = float(np.clip(p2, 0.0, 1.0))

    if clamped:
        msg = (
            f"Effect size h={h:.6g} is out of range for baseline {p1:g}; "
            f"test rate clamped to {p2:g}"
        )
        logger.debug(msg)
        if warn:
            warnings.warn(msg, OutOfRangeWarning, stacklevel=2)

    return LiftResult(test_rate=p2, lift_needed=(p2 - p1) / p1, clamped=clamped)

"""
Power analysis and minimum detectable effect for unbalanced two-proportion tests.

Power is computed on the arcsine scale (Cohen's h) from the normal
approximation; the minimum detectable h is found by root search on the
power function.
"""

import logging
from typing import Tuple

import numpy as np
from scipy import optimize, stats

from ..errors import InvalidInputError, NumericalFailureError
from ..schema import Alternative, ArmSizes, EffectSizeResult
from .validation import (
    as_float,
    check_audience_size,
    check_open_unit,
    check_positive,
    parse_alternative,
)

logger = logging.getLogger(__name__)

DEFAULT_H_BOUNDS = (1e-6, 10.0)
DEFAULT_XTOL = 1e-12
DEFAULT_MAXITER = 100


def arm_sizes(audience_size: int, test_proportion: float) -> ArmSizes:
    """
    Split an audience into test and control arms.

    Args:
        audience_size: Total customers eligible for the test
        test_proportion: Fraction assigned to the test arm, in (0, 1)

    Returns:
        ArmSizes with real-valued (unrounded) test_n and control_n
    """
    n = check_audience_size(audience_size)
    frac = check_open_unit("test_proportion", test_proportion)
    return ArmSizes(test_n=n * frac, control_n=n * (1 - frac))


def _effective_n(test_n: float, control_n: float) -> float:
    """sqrt(n1 * n2 / (n1 + n2)), the scale factor applied to h."""
    return float(np.sqrt(test_n * control_n / (test_n + control_n)))


def _power_at(h: float, k: float, alpha: float, alternative: Alternative) -> float:
    shift = h * k
    if alternative == Alternative.GREATER:
        return float(stats.norm.sf(stats.norm.isf(alpha) - shift))
    if alternative == Alternative.LESS:
        return float(stats.norm.cdf(stats.norm.ppf(alpha) - shift))
    crit = stats.norm.isf(alpha / 2)
    return float(stats.norm.sf(crit - shift) + stats.norm.cdf(-crit - shift))


def power_two_proportions(
    h: float,
    test_n: float,
    control_n: float,
    significance_level: float = 0.20,
    alternative: str = "greater",
) -> float:
    """
    Achieved power of a two-proportion test with unequal arm sizes.

    Args:
        h: Effect size on the Cohen's h scale
        test_n: Test arm sample size
        control_n: Control arm sample size
        significance_level: Type I error rate (alpha)
        alternative: 'greater', 'less' or 'two-sided'

    Returns:
        Statistical power (0-1)
    """
    h = as_float("h", h)
    test_n = check_positive("test_n", test_n)
    control_n = check_positive("control_n", control_n)
    alpha = check_open_unit("significance_level", significance_level)
    alt = parse_alternative(alternative)
    return _power_at(h, _effective_n(test_n, control_n), alpha, alt)


def check_bounds(bounds: Tuple[float, float]) -> Tuple[float, float]:
    try:
        lo, hi = bounds
    except (TypeError, ValueError):
        raise InvalidInputError(f"bounds must be a (low, high) pair, got {bounds!r}") from None
    lo = check_positive("bounds[0]", lo)
    hi = as_float("bounds[1]", hi)
    if hi <= lo:
        raise InvalidInputError(f"bounds must satisfy 0 < low < high, got {bounds!r}")
    return lo, hi


def solve_effect_size(
    test_n: float,
    control_n: float,
    significance_level: float = 0.20,
    power: float = 0.80,
    alternative: str = "greater",
    bounds: Tuple[float, float] = DEFAULT_H_BOUNDS,
    xtol: float = DEFAULT_XTOL,
    maxiter: int = DEFAULT_MAXITER,
) -> EffectSizeResult:
    """
    Minimum detectable effect size (Cohen's h) for given arm sizes.

    Solves Power(h) = power with Brent's method. The search runs over
    [low, high] for 'greater' and 'two-sided' and over [-high, -low] for
    'less', so the sign of h follows the direction of the test.

    Args:
        test_n: Test arm sample size (> 0, may be non-integer)
        control_n: Control arm sample size (> 0, may be non-integer)
        significance_level: Type I error rate (alpha)
        power: Target power (1 - beta)
        alternative: 'greater', 'less' or 'two-sided'
        bounds: Search range for |h|
        xtol: Absolute convergence tolerance on h
        maxiter: Iteration cap for the root search

    Returns:
        EffectSizeResult with h and the arm sizes used

    Raises:
        InvalidInputError: a parameter is outside its domain
        NumericalFailureError: the root is not bracketed or did not converge
    """
    test_n = check_positive("test_n", test_n)
    control_n = check_positive("control_n", control_n)
    alpha = check_open_unit("significance_level", significance_level)
    target = check_open_unit("power", power)
    alt = parse_alternative(alternative)
    lo, hi = check_bounds(bounds)

    k = _effective_n(test_n, control_n)

    def objective(h: float) -> float:
        return _power_at(h, k, alpha, alt) - target

    a, b = (-hi, -lo) if alt == Alternative.LESS else (lo, hi)
    f_a, f_b = objective(a), objective(b)
    if f_a == 0:
        return EffectSizeResult(h=a, test_n=test_n, control_n=control_n)
    if f_b == 0:
        return EffectSizeResult(h=b, test_n=test_n, control_n=control_n)
    if np.sign(f_a) == np.sign(f_b):
        raise NumericalFailureError(
            f"No effect size in [{a:g}, {b:g}] reaches power {target:g} "
            f"at alpha={alpha:g} (test_n={test_n:g}, control_n={control_n:g}, "
            f"alternative={alt.value})"
        )

    h, info = optimize.brentq(
        objective, a, b, xtol=xtol, maxiter=maxiter, full_output=True, disp=False
    )
    if not info.converged:
        raise NumericalFailureError(
            f"Effect size search did not converge after {info.iterations} iterations "
            f"({info.flag})"
        )

    logger.debug(
        f"Solved h={h:.6g} for test_n={test_n:g}, control_n={control_n:g}, "
        f"alpha={alpha:g}, power={target:g} in {info.iterations} iterations"
    )
    return EffectSizeResult(
        h=float(h), test_n=test_n, control_n=control_n, iterations=int(info.iterations)
    )


def required_effect_size(
    audience_size: int,
    test_proportion: float,
    significance_level: float = 0.20,
    power: float = 0.80,
    alternative: str = "greater",
) -> EffectSizeResult:
    """Minimum detectable h for an audience and split."""
    arms = arm_sizes(audience_size, test_proportion)
    return solve_effect_size(
        arms.test_n, arms.control_n, significance_level, power, alternative
    )

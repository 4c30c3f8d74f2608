"""Tests for the effect size solver."""
import pytest
from scipy import stats

from src.lift_planner.errors import InvalidInputError, NumericalFailureError
from src.lift_planner.stats.power import (
    arm_sizes,
    power_two_proportions,
    required_effect_size,
    solve_effect_size,
)


def test_arm_sizes_split():
    """Arms sum back to the audience."""
    arms = arm_sizes(75000, 0.2)
    assert arms.test_n == pytest.approx(15000)
    assert arms.control_n == pytest.approx(60000)
    assert arms.total_n == pytest.approx(75000)


def test_arm_sizes_keeps_fractional_counts():
    """Arm sizes are not rounded."""
    arms = arm_sizes(1001, 0.5)
    assert arms.test_n == pytest.approx(500.5)


@pytest.mark.parametrize("audience, prop", [(0, 0.5), (-10, 0.5), (100.5, 0.5), (True, 0.5), (1000, 0.0), (1000, 1.0)])
def test_arm_sizes_invalid(audience, prop):
    with pytest.raises(InvalidInputError):
        arm_sizes(audience, prop)


def test_solve_matches_closed_form_one_sided():
    """One-sided h = (z_{1-alpha} + z_power) / sqrt(n1*n2/(n1+n2))."""
    res = solve_effect_size(5000, 5000, significance_level=0.2, power=0.8)
    expected = (stats.norm.isf(0.2) + stats.norm.ppf(0.8)) / 50.0
    assert res.h == pytest.approx(expected, abs=1e-9)
    assert res.test_n == 5000
    assert res.control_n == 5000


def test_solved_h_reaches_target_power():
    res = solve_effect_size(3000, 12000, significance_level=0.1, power=0.9, alternative="two-sided")
    achieved = power_two_proportions(res.h, 3000, 12000, 0.1, "two-sided")
    assert achieved == pytest.approx(0.9, abs=1e-8)


def test_two_sided_needs_larger_effect():
    greater = solve_effect_size(5000, 5000, 0.2, 0.8, "greater")
    two_sided = solve_effect_size(5000, 5000, 0.2, 0.8, "two-sided")
    assert two_sided.h > greater.h > 0


def test_less_is_negated_greater():
    """'less' searches negative h and mirrors 'greater'."""
    greater = solve_effect_size(4000, 6000, 0.2, 0.8, "greater")
    less = solve_effect_size(4000, 6000, 0.2, 0.8, "less")
    assert less.h < 0
    assert less.h == pytest.approx(-greater.h, abs=1e-8)


@pytest.mark.parametrize("alternative", ["greater", "less", "two-sided"])
def test_arm_symmetry(alternative):
    """Swapping arms leaves h unchanged."""
    a = solve_effect_size(2000, 8000, 0.2, 0.8, alternative)
    b = solve_effect_size(8000, 2000, 0.2, 0.8, alternative)
    assert a.h == pytest.approx(b.h, abs=1e-10)


@pytest.mark.parametrize("alternative", ["greater", "two-sided"])
def test_h_non_decreasing_in_power(alternative):
    hs = [solve_effect_size(3000, 7000, 0.2, p, alternative).h for p in (0.5, 0.6, 0.7, 0.8, 0.9, 0.95)]
    assert all(b >= a for a, b in zip(hs, hs[1:]))


@pytest.mark.parametrize("alternative", ["greater", "two-sided"])
def test_h_non_increasing_in_alpha(alternative):
    hs = [solve_effect_size(3000, 7000, a, 0.8, alternative).h for a in (0.01, 0.05, 0.1, 0.2, 0.3)]
    assert all(b <= a for a, b in zip(hs, hs[1:]))


def test_alternative_aliases():
    a = solve_effect_size(1000, 1000, alternative="two.sided")
    b = solve_effect_size(1000, 1000, alternative="two-sided")
    assert a.h == b.h


@pytest.mark.parametrize("kwargs", [
    {"test_n": 0, "control_n": 100},
    {"test_n": 100, "control_n": -5},
    {"test_n": float("nan"), "control_n": 100},
    {"test_n": 100, "control_n": 100, "significance_level": 0.0},
    {"test_n": 100, "control_n": 100, "significance_level": 1.2},
    {"test_n": 100, "control_n": 100, "power": 1.0},
    {"test_n": 100, "control_n": 100, "alternative": "sideways"},
    {"test_n": 100, "control_n": 100, "bounds": (1.0, 0.5)},
])
def test_solve_invalid_input(kwargs):
    with pytest.raises(InvalidInputError):
        solve_effect_size(**kwargs)


def test_power_below_alpha_not_bracketed():
    """A one-sided test has power >= alpha for every h > 0, so no root exists."""
    with pytest.raises(NumericalFailureError):
        solve_effect_size(1000, 1000, significance_level=0.2, power=0.1)


def test_narrow_bounds_not_bracketed_then_widened():
    with pytest.raises(NumericalFailureError):
        solve_effect_size(50, 50, bounds=(1e-6, 1e-3))
    res = solve_effect_size(50, 50, bounds=(1e-6, 10.0))
    assert res.h > 1e-3


def test_iteration_cap():
    with pytest.raises(NumericalFailureError):
        solve_effect_size(5000, 5000, maxiter=1)


def test_iterations_recorded():
    res = solve_effect_size(5000, 5000)
    assert 0 < res.iterations <= 100


def test_required_effect_size_from_audience():
    res = required_effect_size(10000, 0.5)
    assert res.test_n == pytest.approx(5000)
    assert res.h == pytest.approx(solve_effect_size(5000, 5000).h)


def test_arm_sizes_too_large_for_float():
    with pytest.raises(InvalidInputError):
        arm_sizes(10**400, 0.5)

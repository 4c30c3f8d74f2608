"""Tests for Cohen's h inversion."""
import math
import warnings

import pytest

from src.lift_planner.errors import DivisionByZeroError, InvalidInputError, OutOfRangeWarning
from src.lift_planner.stats.lift import cohens_h, invert_lift


def test_cohens_h_known():
    assert cohens_h(0.5, 0.5) == 0
    assert cohens_h(0.0, 1.0) == pytest.approx(math.pi)


def test_zero_effect_keeps_baseline():
    res = invert_lift(0.0, 0.12)
    assert res.test_rate == pytest.approx(0.12)
    assert res.lift_needed == pytest.approx(0.0, abs=1e-12)
    assert not res.clamped


@pytest.mark.parametrize("h", [-0.3, -0.05, 0.01, 0.1, 0.5])
@pytest.mark.parametrize("p1", [0.05, 0.12, 0.5, 0.9])
def test_round_trip(h, p1):
    """Feeding the inverted rate back through Cohen's h recovers h."""
    res = invert_lift(h, p1)
    assert not res.clamped
    assert cohens_h(p1, res.test_rate) == pytest.approx(h, abs=1e-6)
    assert res.lift_needed == pytest.approx((res.test_rate - p1) / p1)


def test_positive_h_gives_positive_lift():
    res = invert_lift(0.05, 0.1)
    assert res.test_rate > 0.1
    assert res.lift_needed > 0


@pytest.mark.parametrize("h", [0.0, 0.1, -0.1, 5.0])
def test_zero_baseline_is_division_by_zero(h):
    with pytest.raises(DivisionByZeroError):
        invert_lift(h, 0.0)


def test_division_by_zero_is_invalid_input():
    with pytest.raises(InvalidInputError):
        invert_lift(0.1, 0)
    with pytest.raises(ZeroDivisionError):
        invert_lift(0.1, 0)


@pytest.mark.parametrize("baseline", [1.0, -0.1, 1.5, float("nan")])
def test_baseline_out_of_range(baseline):
    with pytest.raises(InvalidInputError) as exc:
        invert_lift(0.1, baseline)
    assert not isinstance(exc.value, DivisionByZeroError)


def test_non_finite_h():
    with pytest.raises(InvalidInputError):
        invert_lift(float("inf"), 0.1)


def test_clamped_high():
    """h beyond pi - 2*asin(sqrt(p1)) has no valid rate; clamp to 1."""
    with pytest.warns(OutOfRangeWarning):
        res = invert_lift(3.0, 0.5)
    assert res.clamped
    assert res.test_rate == pytest.approx(1.0)
    assert res.lift_needed == pytest.approx(1.0)


def test_clamped_low():
    with pytest.warns(OutOfRangeWarning):
        res = invert_lift(-2.0, 0.1)
    assert res.clamped
    assert res.test_rate == pytest.approx(0.0, abs=1e-12)
    assert res.lift_needed == pytest.approx(-1.0)


def test_clamp_without_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        res = invert_lift(3.0, 0.5, warn=False)
    assert res.clamped

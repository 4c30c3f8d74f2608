"""
Design grid evaluation.

Sweeps every (audience size, test proportion, baseline rate) combination,
solving the minimum detectable effect and the lift it implies. One
DesignEvaluation is produced per combination, in product order: audience
size outer, test proportion middle, baseline rate inner.
"""

import itertools
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from joblib import Parallel, delayed

from .config import DEFAULT_ALTERNATIVE, DEFAULT_POWER, DEFAULT_SIGNIFICANCE_LEVEL, DesignConfig
from .errors import DesignError
from .schema import DesignEvaluation, DesignParameters, RowStatus
from .stats.lift import invert_lift
from .stats.power import (
    DEFAULT_H_BOUNDS,
    DEFAULT_MAXITER,
    DEFAULT_XTOL,
    arm_sizes,
    solve_effect_size,
)
from .stats.validation import check_n_jobs, check_open_unit, parse_alternative

logger = logging.getLogger(__name__)


def _unique(name: str, values: Sequence) -> Tuple:
    """Drop repeated values, keeping first occurrence order."""
    values = tuple(values)
    deduped = tuple(dict.fromkeys(values))
    if len(deduped) != len(values):
        logger.warning(f"Dropped {len(values) - len(deduped)} duplicate value(s) from {name}")
    return deduped


@dataclass(frozen=True)
class DesignGrid:
    """Cartesian product of candidate audience sizes, splits and baselines."""
    audience_sizes: Tuple[int, ...]
    test_proportions: Tuple[float, ...]
    baseline_rates: Tuple[float, ...]

    def __post_init__(self):
        object.__setattr__(self, "audience_sizes", _unique("audience_sizes", self.audience_sizes))
        object.__setattr__(self, "test_proportions", _unique("test_proportions", self.test_proportions))
        object.__setattr__(self, "baseline_rates", _unique("baseline_rates", self.baseline_rates))

    def __len__(self) -> int:
        return len(self.audience_sizes) * len(self.test_proportions) * len(self.baseline_rates)

    def combinations(self) -> Iterator[Tuple[int, float, float]]:
        return itertools.product(self.audience_sizes, self.test_proportions, self.baseline_rates)

    def parameters(
        self,
        significance_level: float = DEFAULT_SIGNIFICANCE_LEVEL,
        power: float = DEFAULT_POWER,
        alternative: str = DEFAULT_ALTERNATIVE,
    ) -> Iterator[DesignParameters]:
        alt = parse_alternative(alternative)
        for audience_size, test_proportion, baseline_rate in self.combinations():
            yield DesignParameters(
                audience_size=audience_size,
                test_proportion=test_proportion,
                baseline_rate=baseline_rate,
                significance_level=significance_level,
                power=power,
                alternative=alt,
            )

    @classmethod
    def from_config(cls, config: DesignConfig) -> "DesignGrid":
        return cls(
            tuple(config.audience_sizes),
            tuple(config.test_proportions),
            tuple(config.baseline_rates),
        )


def evaluate_design(
    params: DesignParameters,
    index: int = 0,
    fail_fast: bool = False,
    bounds: Tuple[float, float] = DEFAULT_H_BOUNDS,
    xtol: float = DEFAULT_XTOL,
    maxiter: int = DEFAULT_MAXITER,
) -> DesignEvaluation:
    """
    Evaluate a single design.

    Args:
        params: Design parameters for this grid cell
        index: Position of the cell in product order
        fail_fast: Re-raise errors instead of recording a failed row
        bounds: Search range for |h|
        xtol: Root search tolerance
        maxiter: Root search iteration cap

    Returns:
        DesignEvaluation with status ok, degraded (rate clamped) or failed
    """
    arms = None
    try:
        arms = arm_sizes(params.audience_size, params.test_proportion)
        effect = solve_effect_size(
            arms.test_n,
            arms.control_n,
            significance_level=params.significance_level,
            power=params.power,
            alternative=params.alternative,
            bounds=bounds,
            xtol=xtol,
            maxiter=maxiter,
        )
        lift = invert_lift(effect.h, params.baseline_rate, warn=False)
    except DesignError as exc:
        if fail_fast:
            raise
        logger.warning(f"Design {index} failed: {type(exc).__name__}: {exc}")
        return DesignEvaluation(
            parameters=params,
            index=index,
            status=RowStatus.FAILED,
            test_n=arms.test_n if arms else None,
            control_n=arms.control_n if arms else None,
            total_n=arms.total_n if arms else None,
            error_type=type(exc).__name__,
            error=str(exc),
        )

    status = RowStatus.OK
    error_type = None
    error = None
    if lift.clamped:
        status = RowStatus.DEGRADED
        error_type = "OutOfRangeWarning"
        error = f"test rate clamped to {lift.test_rate:g} for h={effect.h:.6g}"

    return DesignEvaluation(
        parameters=params,
        index=index,
        status=status,
        effect_size=effect.h,
        test_n=effect.test_n,
        control_n=effect.control_n,
        total_n=effect.test_n + effect.control_n,
        test_rate=lift.test_rate,
        lift_needed=lift.lift_needed,
        error_type=error_type,
        error=error,
    )


def evaluate(
    audience_sizes: Sequence[int],
    test_proportions: Sequence[float],
    baseline_rates: Sequence[float],
    significance_level: float = DEFAULT_SIGNIFICANCE_LEVEL,
    power: float = DEFAULT_POWER,
    alternative: str = DEFAULT_ALTERNATIVE,
    fail_fast: bool = False,
    n_jobs: int = 1,
    backend: Optional[str] = None,
    bounds: Tuple[float, float] = DEFAULT_H_BOUNDS,
    xtol: float = DEFAULT_XTOL,
    maxiter: int = DEFAULT_MAXITER,
) -> List[DesignEvaluation]:
    """
    Evaluate every combination of audience size, test proportion and baseline.

    A failing combination is recorded as a failed row and evaluation carries
    on, unless fail_fast is set. Scalar settings (alpha, power, alternative,
    n_jobs) apply to the whole grid and are validated up front.

    Repeated values within an axis are dropped (first occurrence kept, a
    warning logged), so the result holds one row per distinct combination:
    len(set(audience_sizes)) * len(set(test_proportions)) *
    len(set(baseline_rates)) rows, which can be fewer than the product of
    the input lengths.

    Args:
        audience_sizes: Candidate total audience sizes
        test_proportions: Candidate fractions assigned to the test arm
        baseline_rates: Candidate baseline response rates
        significance_level: Type I error rate (alpha)
        power: Target power
        alternative: 'greater', 'less' or 'two-sided'
        fail_fast: Raise on the first failing combination
        n_jobs: joblib worker count, non-zero; 1 evaluates sequentially
        backend: joblib backend for parallel runs (default loky)
        bounds: Search range for |h|
        xtol: Root search tolerance
        maxiter: Root search iteration cap

    Returns:
        List of DesignEvaluation in product order
    """
    significance_level = check_open_unit("significance_level", significance_level)
    power = check_open_unit("power", power)
    n_jobs = check_n_jobs(n_jobs)
    grid = DesignGrid(tuple(audience_sizes), tuple(test_proportions), tuple(baseline_rates))
    params = list(grid.parameters(significance_level, power, alternative))

    if n_jobs == 1:
        results = [
            evaluate_design(p, i, fail_fast, bounds, xtol, maxiter)
            for i, p in enumerate(params)
        ]
    else:
        results = Parallel(n_jobs=n_jobs, backend=backend)(
            delayed(evaluate_design)(p, i, fail_fast, bounds, xtol, maxiter)
            for i, p in enumerate(params)
        )
        results = sorted(results, key=lambda r: r.index)

    counts = Counter(r.status.value for r in results)
    logger.info(
        f"Evaluated {len(results)} designs: ok={counts.get('ok', 0)}, "
        f"degraded={counts.get('degraded', 0)}, failed={counts.get('failed', 0)}"
    )
    return results


def evaluate_grid(grid: DesignGrid, config: Optional[DesignConfig] = None) -> List[DesignEvaluation]:
    """Evaluate a DesignGrid with the settings held in a DesignConfig."""
    config = config or DesignConfig()
    return evaluate(
        grid.audience_sizes,
        grid.test_proportions,
        grid.baseline_rates,
        significance_level=config.significance_level,
        power=config.power,
        alternative=config.alternative,
        fail_fast=config.fail_fast,
        n_jobs=config.n_jobs,
        bounds=config.h_bounds,
        xtol=config.xtol,
        maxiter=config.maxiter,
    )

"""
Configuration for test design evaluation.

Defaults use power 0.80 and alpha 0.20 rather than the conventional
0.90/0.05: the intervention (an email) costs next to nothing, so more false
positives are tolerated. Override per run through DesignConfig or a JSON file.
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from .errors import InvalidInputError
from .schema import Alternative
from .stats.power import DEFAULT_H_BOUNDS, DEFAULT_MAXITER, DEFAULT_XTOL, check_bounds
from .stats.validation import check_n_jobs, check_open_unit, parse_alternative

logger = logging.getLogger(__name__)

DEFAULT_SIGNIFICANCE_LEVEL = 0.20
DEFAULT_POWER = 0.80
DEFAULT_ALTERNATIVE = "greater"
DEFAULT_ARTIFACTS_DIR = "artifacts/designs"

DEFAULT_AUDIENCE_SIZES = [10000, 25000, 50000, 75000, 100000]
DEFAULT_TEST_PROPORTIONS = [0.1, 0.2, 0.3, 0.4, 0.5]
DEFAULT_BASELINE_RATES = [0.05, 0.10, 0.15]


@dataclass
class DesignConfig:
    """Scalar settings and grid axes for one evaluation run."""
    significance_level: float = DEFAULT_SIGNIFICANCE_LEVEL
    power: float = DEFAULT_POWER
    alternative: Alternative = Alternative.GREATER
    fail_fast: bool = False
    n_jobs: int = 1
    h_bounds: Tuple[float, float] = DEFAULT_H_BOUNDS
    xtol: float = DEFAULT_XTOL
    maxiter: int = DEFAULT_MAXITER
    audience_sizes: List[int] = field(default_factory=lambda: list(DEFAULT_AUDIENCE_SIZES))
    test_proportions: List[float] = field(default_factory=lambda: list(DEFAULT_TEST_PROPORTIONS))
    baseline_rates: List[float] = field(default_factory=lambda: list(DEFAULT_BASELINE_RATES))

    def __post_init__(self):
        self.significance_level = check_open_unit("significance_level", self.significance_level)
        self.power = check_open_unit("power", self.power)
        self.alternative = parse_alternative(self.alternative)
        self.h_bounds = check_bounds(self.h_bounds)
        if self.xtol <= 0:
            raise InvalidInputError(f"xtol must be > 0, got {self.xtol!r}")
        if self.maxiter < 1:
            raise InvalidInputError(f"maxiter must be >= 1, got {self.maxiter!r}")
        self.n_jobs = check_n_jobs(self.n_jobs)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["alternative"] = self.alternative.value
        d["h_bounds"] = list(self.h_bounds)
        return d


def load_config(path: Union[str, Path]) -> DesignConfig:
    """
    Build a DesignConfig from a JSON file of overrides.

    Keys not present in the file keep their defaults; unknown keys are rejected.
    """
    with open(path) as f:
        overrides = json.load(f)
    if not isinstance(overrides, dict):
        raise InvalidInputError(f"Config file {path} must contain a JSON object")

    known = {f.name for f in fields(DesignConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise InvalidInputError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    if "h_bounds" in overrides:
        overrides["h_bounds"] = tuple(overrides["h_bounds"])
    config = DesignConfig(**overrides)
    logger.info(f"Loaded design config from {path}")
    return config

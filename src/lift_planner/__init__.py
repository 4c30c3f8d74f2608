"""Minimum detectable lift planning for two-proportion A/B test designs."""

from .schema import (
    Alternative,
    ArmSizes,
    DesignEvaluation,
    DesignParameters,
    EffectSizeResult,
    LiftResult,
    RowStatus,
)
from .errors import (
    DesignError,
    DivisionByZeroError,
    InvalidInputError,
    NumericalFailureError,
    OutOfRangeWarning,
)
from .config import DesignConfig, load_config
from .stats import arm_sizes, cohens_h, invert_lift, power_two_proportions, solve_effect_size
from .grid import DesignGrid, evaluate, evaluate_design, evaluate_grid
from .report import lift_table, render_design_summary, to_frame

__all__ = [
    "Alternative",
    "ArmSizes",
    "DesignEvaluation",
    "DesignParameters",
    "EffectSizeResult",
    "LiftResult",
    "RowStatus",
    "DesignError",
    "DivisionByZeroError",
    "InvalidInputError",
    "NumericalFailureError",
    "OutOfRangeWarning",
    "DesignConfig",
    "load_config",
    "arm_sizes",
    "cohens_h",
    "invert_lift",
    "power_two_proportions",
    "solve_effect_size",
    "DesignGrid",
    "evaluate",
    "evaluate_design",
    "evaluate_grid",
    "lift_table",
    "render_design_summary",
    "to_frame",
]

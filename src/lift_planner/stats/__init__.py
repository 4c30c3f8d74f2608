"""Effect size and lift statistics for two-proportion test design."""

from .power import arm_sizes, power_two_proportions, solve_effect_size, required_effect_size
from .lift import cohens_h, invert_lift

__all__ = [
    "arm_sizes",
    "power_two_proportions",
    "solve_effect_size",
    "required_effect_size",
    "cohens_h",
    "invert_lift",
]

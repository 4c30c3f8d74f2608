"""
Data models for test design evaluation.

Dataclass schemas for design parameters, derived arm sizes, solver results
and the per-combination evaluation rows produced by the grid evaluator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Alternative(str, Enum):
    """Direction of the hypothesis test."""
    GREATER = "greater"
    LESS = "less"
    TWO_SIDED = "two-sided"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().lower().replace(".", "-").replace("_", "-")
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class RowStatus(str, Enum):
    """Outcome of evaluating one grid cell."""
    OK = "ok"
    DEGRADED = "degraded"  # test rate clamped to [0, 1]
    FAILED = "failed"


@dataclass(frozen=True)
class DesignParameters:
    """One candidate test design."""
    audience_size: int
    test_proportion: float
    baseline_rate: float
    significance_level: float = 0.20
    power: float = 0.80
    alternative: Alternative = Alternative.GREATER

    @property
    def key(self) -> Tuple[int, float, float]:
        return (self.audience_size, self.test_proportion, self.baseline_rate)


@dataclass(frozen=True)
class ArmSizes:
    """Per-arm sample sizes derived from audience size and split."""
    test_n: float
    control_n: float

    @property
    def total_n(self) -> float:
        return self.test_n + self.control_n


@dataclass(frozen=True)
class EffectSizeResult:
    """Minimum detectable Cohen's h for a pair of arm sizes."""
    h: float
    test_n: float
    control_n: float
    iterations: int = 0


@dataclass(frozen=True)
class LiftResult:
    """Response rate and relative lift implied by an effect size."""
    test_rate: float
    lift_needed: float
    clamped: bool = False


@dataclass(frozen=True)
class DesignEvaluation:
    """Evaluation of a single grid combination (successful, degraded or failed)."""
    parameters: DesignParameters
    index: int
    status: RowStatus = RowStatus.OK
    effect_size: Optional[float] = None
    test_n: Optional[float] = None
    control_n: Optional[float] = None
    total_n: Optional[float] = None
    test_rate: Optional[float] = None
    lift_needed: Optional[float] = None
    error_type: Optional[str] = None
    error: Optional[str] = None

    @property
    def key(self) -> Tuple[int, float, float]:
        return self.parameters.key

    @property
    def ok(self) -> bool:
        return self.status != RowStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        p = self.parameters
        return {
            "index": self.index,
            "audience_size": p.audience_size,
            "test_proportion": p.test_proportion,
            "baseline_rate": p.baseline_rate,
            "significance_level": p.significance_level,
            "power": p.power,
            "alternative": p.alternative.value,
            "effect_size": self.effect_size,
            "test_n": self.test_n,
            "control_n": self.control_n,
            "total_n": self.total_n,
            "test_rate": self.test_rate,
            "lift_needed": self.lift_needed,
            "status": self.status.value,
            "error_type": self.error_type,
            "error": self.error,
        }

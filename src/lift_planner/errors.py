"""Error kinds raised by the design solver and grid evaluator."""


class DesignError(ValueError):
    """Base class for per-design failures."""


class InvalidInputError(DesignError):
    """A design parameter is outside its valid domain."""


class NumericalFailureError(DesignError):
    """Root search for the effect size failed to bracket or converge."""


class DivisionByZeroError(InvalidInputError, ZeroDivisionError):
    """Baseline rate of zero makes relative lift undefined."""


class OutOfRangeWarning(UserWarning):
    """Inverted response rate fell outside [0, 1] and was clamped."""

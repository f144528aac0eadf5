"""Exception hierarchy for the GRF resolution engine.

Every failure is raised at the point of detection. Nothing is retried or
silently skipped: a missing or invalid curve aborts the whole operation so
that an inconsistent dimensional reduction can never produce a scalar.
"""

from __future__ import annotations


class GRFError(Exception):
    """Base class for all ufcgrf errors."""


class ShapeMismatchError(GRFError, ValueError):
    """x and y arrays of a curve differ in length."""


class InsufficientDataError(GRFError, ValueError):
    """Fewer data points (or curves) than the operation requires."""


class NoNumericParameterError(GRFError, ValueError):
    """No curve name of a family parses as a numeric parameter."""


class NoPositiveDataError(GRFError, ValueError):
    """A curve has no (x > 0, y > 0) pair, so log-log work is impossible."""


class AmbiguousCurveSetError(GRFError, ValueError):
    """A curve set expected to hold exactly one curve holds several."""


class ExtrapolationLimitError(GRFError, ValueError):
    """The blend weight left the configured extrapolation bound."""

    def __init__(self, weight: float, limit: float):
        super().__init__(
            f"Blend weight {weight:.4g} outside [{-limit:.4g}, {1.0 + limit:.4g}]",
        )
        self.weight = weight
        self.limit = limit


class EmptyPipelineStepError(GRFError, RuntimeError):
    """A pipeline operation was invoked on a step with no data."""


class PipelineStateError(GRFError, RuntimeError):
    """A pipeline operation was invoked out of order."""


class StepIndexError(GRFError, IndexError):
    """A pipeline step outside the recorded history was requested."""


class FetchFailureError(GRFError):
    """The injected curve fetch function failed for one curve name."""

    def __init__(self, message: str, curve_name: str | None = None):
        super().__init__(message)
        self.curve_name = curve_name

"""Error taxonomy shared by the statistics engine and the model toolkit.

Every error derives from :class:`AnalysisError`. The value-like errors also
derive from :class:`ValueError`, so callers catching ``ValueError`` (as the
analyzers have always raised for misuse) keep working.
"""

from sklearn.exceptions import NotFittedError as _SklearnNotFittedError


__all__ = [
    "AnalysisError",
    "DimensionMismatchError",
    "InsufficientDataError",
    "InvalidParameterError",
    "NotFittedError",
    "NumericalFailureError",
]


class AnalysisError(Exception):
    """Base class for all errors raised by ``analytics_tlbx``."""


class InsufficientDataError(AnalysisError, ValueError):
    """Too few valid rows for a statistic or a model."""


class DimensionMismatchError(AnalysisError, ValueError):
    """Matrix/vector shapes or name lists do not line up."""


class InvalidParameterError(AnalysisError, ValueError):
    """A parameter is outside its supported domain (k < 2, unknown reducer, ...)."""


class NumericalFailureError(AnalysisError, ArithmeticError):
    """A closed-form solve failed, e.g. singular normal equations."""


class NotFittedError(AnalysisError, _SklearnNotFittedError):
    """``predict``/``result`` was called on an untrained predictor."""

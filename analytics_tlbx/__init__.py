"""Analytics toolbox: statistics, data quality and minimal models for the analytics dashboard."""

import logging

from .errors import (
    AnalysisError,
    DimensionMismatchError,
    InsufficientDataError,
    InvalidParameterError,
    NotFittedError,
    NumericalFailureError,
)


logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AnalysisError",
    "DimensionMismatchError",
    "InsufficientDataError",
    "InvalidParameterError",
    "NotFittedError",
    "NumericalFailureError",
]

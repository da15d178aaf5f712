"""Base predictor contract shared by all models in the toolkit."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Self

import numpy as np
from numpy.typing import ArrayLike

from analytics_tlbx.errors import (
    DimensionMismatchError,
    InsufficientDataError,
    InvalidParameterError,
    NotFittedError,
)


def check_X(X: ArrayLike, n_features: int | None = None) -> np.ndarray:
    """Validate a feature matrix and return it as a 2-D float array.

    Raises:
        InvalidParameterError: If ``X`` is not numeric or contains NaN/inf.
        DimensionMismatchError: If ``X`` is not 2-D or has the wrong column count.
    """
    try:
        arr = np.asarray(X, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError("X must be a rectangular matrix of numbers.") from exc
    if arr.ndim != 2:
        raise DimensionMismatchError(f"X must be 2-D (rows x features), got {arr.ndim}-D.")
    if not np.isfinite(arr).all():
        raise InvalidParameterError("X contains missing or non-finite values; drop or impute them first.")
    if n_features is not None and arr.shape[1] != n_features:
        raise DimensionMismatchError(f"X has {arr.shape[1]} features, but the model was fitted with {n_features}.")
    return arr


def check_X_y(X: ArrayLike, y: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    """Validate a feature matrix and its target vector (same row count, at least one row)."""
    arr_x = check_X(X)
    try:
        arr_y = np.asarray(y, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError("y must be a vector of numbers.") from exc
    if arr_y.ndim != 1:
        raise DimensionMismatchError(f"y must be 1-D, got {arr_y.ndim}-D.")
    if arr_y.shape[0] != arr_x.shape[0]:
        raise DimensionMismatchError(f"X has {arr_x.shape[0]} rows but y has {arr_y.shape[0]}.")
    if not np.isfinite(arr_y).all():
        raise InvalidParameterError("y contains missing or non-finite values.")
    if arr_x.shape[0] == 0:
        raise InsufficientDataError("Cannot fit on an empty dataset.")
    return arr_x, arr_y


class Predictor(ABC):
    """Abstract base class for the toolkit's models.

    All predictors must:
    1. Take only hyper-parameters in their constructor (stored under the same attribute names)
    2. Implement fit() to learn parameters and return self for chaining
    3. Implement predict() without side effects; calling it before fit() raises NotFittedError
    4. Implement result() to return a frozen dataclass with the learned parameters

    Fitting twice overwrites the previous parameters. Fitting one instance from
    several threads at once is not supported; build one instance per caller.
    """

    is_regressor: ClassVar[bool] = True
    """False for clustering models whose predictions are labels, not target estimates."""

    _n_features: int | None = None

    @abstractmethod
    def fit(self, X: ArrayLike, y: ArrayLike | None = None) -> Self:
        """Fit the predictor to the data.

        Returns:
            Self for method chaining.
        """
        ...

    @abstractmethod
    def predict(self, X: ArrayLike) -> np.ndarray:
        """Predict one value (or cluster label) per row of ``X``."""
        ...

    @abstractmethod
    def result(self) -> Any:
        """Return the learned parameters as a frozen dataclass instance.

        Raises:
            NotFittedError: If fit() has not been called yet.
        """
        ...

    @property
    def is_fitted(self) -> bool:
        return self._n_features is not None

    def _check_fitted(self) -> int:
        if self._n_features is None:
            raise NotFittedError(f"{type(self).__name__} is not fitted yet. Call fit() first.")
        return self._n_features

    def get_params(self) -> dict[str, Any]:
        """Return the constructor hyper-parameters of this instance."""
        names = [
            p.name
            for p in inspect.signature(type(self).__init__).parameters.values()
            if p.name != "self" and p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
        ]
        return {name: getattr(self, name) for name in names}

    def clone(self) -> Self:
        """Return a new, untrained instance with the same hyper-parameters."""
        return type(self)(**self.get_params())

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.get_params().items())
        return f"{type(self).__name__}({params})"

r"""Ordinary least squares regression solved through the normal equations.

With the design matrix :math:`A = [\mathbf{1} \mid X]` the parameters are
:math:`\hat\beta = (A^\top A + \alpha D)^{-1} A^\top y`, where :math:`D` is the
identity with a zero in the intercept position. With :math:`\alpha = 0` this is
plain OLS and requires :math:`A` to have full column rank.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Self

import numpy as np
from numpy.typing import ArrayLike

from analytics_tlbx.errors import InvalidParameterError, NotFittedError, NumericalFailureError

from .base_predictor import Predictor, check_X, check_X_y


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinearRegressionResult:
    """Learned parameters of a linear regression.

    Attributes:
        intercept: Constant term.
        coefficients: One slope per feature, in column order.
        alpha: Ridge penalty used during fitting (0 for plain OLS).
    """

    intercept: float
    coefficients: np.ndarray
    alpha: float


class LinearRegression(Predictor):
    """Linear regression with an implicit intercept, fitted in closed form.

    Example:
        >>> X = [[0, 0], [1, 0], [0, 1], [1, 1]]
        >>> y = [1, 3, 4, 6]  # y = 2*x1 + 3*x2 + 1
        >>> model = LinearRegression().fit(X, y)
        >>> model.intercept_, model.coef_
        (1.0..., array([2., 3.]))
    """

    def __init__(self, alpha: float = 0.0) -> None:
        """Initialize the regression.

        Args:
            alpha: Ridge penalty on the slopes. ``0`` (default) fits plain OLS and
                reports rank-deficient designs as :class:`NumericalFailureError`.
        """
        if alpha < 0:
            raise InvalidParameterError(f"alpha must be >= 0, got {alpha}.")
        self.alpha = alpha
        self.intercept_: float | None = None
        self.coef_: np.ndarray | None = None

    def fit(self, X: ArrayLike, y: ArrayLike | None = None) -> Self:
        """Solve the normal equations for intercept and slopes.

        Raises:
            NumericalFailureError: If ``alpha == 0`` and the design matrix is rank-deficient
                (collinear features, constant features or fewer rows than parameters).
        """
        if y is None:
            raise InvalidParameterError("LinearRegression.fit requires a target vector y.")
        X, y = check_X_y(X, y)
        design = np.column_stack([np.ones(X.shape[0]), X])
        gram = design.T @ design

        if self.alpha > 0:
            penalty = self.alpha * np.eye(design.shape[1])
            penalty[0, 0] = 0.0
            gram = gram + penalty
        elif np.linalg.matrix_rank(design) < design.shape[1]:
            raise NumericalFailureError(
                "Design matrix is rank-deficient, the normal equations are singular. "
                "Remove collinear or constant features, add rows, or set alpha > 0.",
            )

        try:
            beta = np.linalg.solve(gram, design.T @ y)
        except np.linalg.LinAlgError as exc:
            raise NumericalFailureError("Normal equations are not invertible.") from exc
        if not np.isfinite(beta).all():
            raise NumericalFailureError("Normal-equation solve produced non-finite parameters.")

        self.intercept_ = float(beta[0])
        self.coef_ = beta[1:]
        self._n_features = X.shape[1]
        logger.debug("Fitted %r on %d rows: intercept=%.4g", self, X.shape[0], self.intercept_)
        return self

    def predict(self, X: ArrayLike) -> np.ndarray:
        """Return ``intercept + X @ coefficients`` row-wise."""
        X = check_X(X, self._check_fitted())
        return self.intercept_ + X @ self.coef_

    def result(self) -> LinearRegressionResult:
        if not self.is_fitted or self.coef_ is None or self.intercept_ is None:
            raise NotFittedError("Must call fit() before result()")
        return LinearRegressionResult(intercept=self.intercept_, coefficients=self.coef_.copy(), alpha=self.alpha)

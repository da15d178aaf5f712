"""Tests for the closed-form linear regression."""

import numpy as np
import pytest

from analytics_tlbx.errors import (
    DimensionMismatchError,
    InsufficientDataError,
    InvalidParameterError,
    NotFittedError,
    NumericalFailureError,
)
from analytics_tlbx.models import LinearRegression, LinearRegressionResult, evaluate_regression


class TestLinearRegression:
    """Test LinearRegression fit/predict/result."""

    @pytest.fixture
    def exact_data(self) -> tuple[np.ndarray, np.ndarray]:
        """y = 2*x1 + 3*x2 + 1 without noise."""
        X = np.array([[0, 0], [1, 0], [0, 1], [1, 1], [2, 1], [3, 5]], dtype=float)
        y = 2 * X[:, 0] + 3 * X[:, 1] + 1
        return X, y

    def test_recovers_exact_linear_relation(self, exact_data: tuple[np.ndarray, np.ndarray]) -> None:
        """Test that noise-free data gives the generating parameters and R² = 1."""
        X, y = exact_data
        model = LinearRegression().fit(X, y)

        assert model.intercept_ == pytest.approx(1.0)
        np.testing.assert_allclose(model.coef_, [2.0, 3.0], atol=1e-9)
        assert evaluate_regression(y, model.predict(X)).r2 == pytest.approx(1.0)

    def test_fit_returns_self(self, exact_data: tuple[np.ndarray, np.ndarray]) -> None:
        X, y = exact_data
        model = LinearRegression()
        assert model.fit(X, y) is model
        assert model.is_fitted

    def test_result(self, exact_data: tuple[np.ndarray, np.ndarray]) -> None:
        """Test the frozen result and that it does not alias the model state."""
        X, y = exact_data
        result = LinearRegression().fit(X, y).result()

        assert isinstance(result, LinearRegressionResult)
        assert result.alpha == 0.0
        result.coefficients[0] = 100.0
        with pytest.raises(AttributeError):
            result.intercept = 0.0  # type: ignore[misc]

    def test_predict_before_fit(self) -> None:
        """Test that predict/result before fit raise NotFittedError (also a ValueError)."""
        model = LinearRegression()
        with pytest.raises(NotFittedError):
            model.predict([[1.0, 2.0]])
        with pytest.raises(ValueError, match="fit"):
            model.result()

    def test_collinear_design(self) -> None:
        """Test that a rank-deficient design fails for OLS and succeeds with a ridge penalty."""
        X = np.array([[1, 2], [2, 4], [3, 6], [4, 8]], dtype=float)
        y = np.array([1.0, 2.0, 3.0, 4.0])

        with pytest.raises(NumericalFailureError):
            LinearRegression().fit(X, y)

        model = LinearRegression(alpha=1.0).fit(X, y)
        assert np.isfinite(model.predict(X)).all()

    def test_too_few_rows(self) -> None:
        """Test that fewer rows than parameters is reported as a numerical failure."""
        with pytest.raises(NumericalFailureError):
            LinearRegression().fit([[1.0, 2.0]], [3.0])

    def test_input_validation(self, exact_data: tuple[np.ndarray, np.ndarray]) -> None:
        X, y = exact_data
        with pytest.raises(DimensionMismatchError):
            LinearRegression().fit(X, y[:-1])
        with pytest.raises(DimensionMismatchError):
            LinearRegression().fit(X[:, 0], y)
        with pytest.raises(InsufficientDataError):
            LinearRegression().fit(np.empty((0, 2)), np.empty(0))
        with pytest.raises(InvalidParameterError):
            LinearRegression().fit([[1.0, np.nan], [2.0, 1.0], [3.0, 0.0]], [1.0, 2.0, 3.0])
        with pytest.raises(InvalidParameterError):
            LinearRegression().fit(X)
        with pytest.raises(InvalidParameterError):
            LinearRegression(alpha=-1.0)

    def test_predict_wrong_column_count(self, exact_data: tuple[np.ndarray, np.ndarray]) -> None:
        X, y = exact_data
        model = LinearRegression().fit(X, y)
        with pytest.raises(DimensionMismatchError):
            model.predict([[1.0, 2.0, 3.0]])

    def test_refit_overwrites(self, exact_data: tuple[np.ndarray, np.ndarray]) -> None:
        """Test that a second fit replaces the learned parameters."""
        X, y = exact_data
        model = LinearRegression().fit(X, y)
        model.fit(X, -y)

        assert model.intercept_ == pytest.approx(-1.0)
        np.testing.assert_allclose(model.coef_, [-2.0, -3.0], atol=1e-9)

    def test_clone_is_unfitted(self, exact_data: tuple[np.ndarray, np.ndarray]) -> None:
        X, y = exact_data
        model = LinearRegression(alpha=0.5).fit(X, y)
        copy = model.clone()

        assert copy.get_params() == {"alpha": 0.5}
        assert not copy.is_fitted
        assert repr(copy) == "LinearRegression(alpha=0.5)"

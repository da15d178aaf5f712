"""Tests for regression metrics, cross-validation and permutation importance."""

import numpy as np
import pytest

from analytics_tlbx.errors import (
    DimensionMismatchError,
    InsufficientDataError,
    InvalidParameterError,
    NotFittedError,
)
from analytics_tlbx.models import (
    DecisionTreeRegressor,
    KMeans,
    LinearRegression,
    ModelKind,
    calculate_feature_importance,
    cross_validate,
    evaluate_regression,
)


@pytest.fixture
def linear_data() -> tuple[np.ndarray, np.ndarray]:
    """100 rows where y depends strongly on x0 and not at all on x1."""
    rng = np.random.default_rng(42)
    X = rng.uniform(0, 10, size=(100, 2))
    y = 4.0 * X[:, 0] + 2.0 + rng.normal(0, 0.5, 100)
    return X, y


class TestEvaluateRegression:
    """Test evaluate_regression()."""

    def test_known_values(self) -> None:
        metrics = evaluate_regression([1, 2, 3], [1, 2, 4])

        assert metrics.r2 == pytest.approx(0.5)
        assert metrics.rmse == pytest.approx(np.sqrt(1 / 3))
        assert metrics.mae == pytest.approx(1 / 3)
        assert metrics.n_obs == 3

    def test_perfect_fit(self) -> None:
        metrics = evaluate_regression([1.0, 5.0, 9.0], [1.0, 5.0, 9.0])
        assert (metrics.r2, metrics.rmse, metrics.mae) == (1.0, 0.0, 0.0)

    def test_constant_actual_values(self) -> None:
        """Test the zero-variance convention for R²."""
        assert evaluate_regression([3.0, 3.0, 3.0], [3.0, 3.0, 3.0]).r2 == 1.0
        assert evaluate_regression([3.0, 3.0, 3.0], [3.0, 4.0, 3.0]).r2 == 0.0

    def test_r2_can_be_negative(self) -> None:
        assert evaluate_regression([1.0, 2.0, 3.0], [3.0, 2.0, 1.0]).r2 < 0

    def test_invalid_input(self) -> None:
        with pytest.raises(DimensionMismatchError, match="Length mismatch"):
            evaluate_regression([1.0, 2.0], [1.0])
        with pytest.raises(InsufficientDataError):
            evaluate_regression([], [])
        with pytest.raises(DimensionMismatchError, match="1-D"):
            evaluate_regression([[1, 2], [3, 4]], [1, 2, 3, 4])
        with pytest.raises(DimensionMismatchError):
            evaluate_regression([[1.0], [2.0]], [[1.0], [2.0]])


class TestCrossValidate:
    """Test cross_validate()."""

    def test_contiguous_folds(self, linear_data: tuple[np.ndarray, np.ndarray]) -> None:
        """Test k disjoint contiguous folds whose union is every row."""
        X, y = linear_data
        result = cross_validate(LinearRegression, X, y, k=5)

        assert len(result.fold_scores) == 5
        for i, fold in enumerate(result.fold_indices):
            np.testing.assert_array_equal(fold, np.arange(20 * i, 20 * (i + 1)))
        all_rows = np.concatenate(result.fold_indices)
        assert sorted(all_rows.tolist()) == list(range(100))

        assert result.mean == pytest.approx(np.mean(result.fold_scores))
        assert result.std == pytest.approx(np.std(result.fold_scores))
        assert result.mean > 0.95

    def test_uneven_folds(self, linear_data: tuple[np.ndarray, np.ndarray]) -> None:
        X, y = linear_data
        result = cross_validate(LinearRegression, X, y, k=3)
        assert [len(f) for f in result.fold_indices] == [34, 33, 33]

    def test_seeded_shuffle(self, linear_data: tuple[np.ndarray, np.ndarray]) -> None:
        X, y = linear_data
        first = cross_validate(LinearRegression, X, y, k=4, shuffle=True, random_state=0)
        second = cross_validate(LinearRegression, X, y, k=4, shuffle=True, random_state=0)

        assert first.fold_scores == second.fold_scores
        assert not np.array_equal(first.fold_indices[0], np.arange(25))
        assert sorted(np.concatenate(first.fold_indices).tolist()) == list(range(100))

    @pytest.mark.parametrize("k", [0, 1, 101, 2.5])
    def test_invalid_k(self, linear_data: tuple[np.ndarray, np.ndarray], k: float) -> None:
        X, y = linear_data
        with pytest.raises(InvalidParameterError):
            cross_validate(LinearRegression, X, y, k=k)  # type: ignore[arg-type]

    def test_factory_forms(self, linear_data: tuple[np.ndarray, np.ndarray]) -> None:
        """Test callables, kinds, kind names and predictor instances give the same scores."""
        X, y = linear_data
        expected = cross_validate(lambda: DecisionTreeRegressor(max_depth=3), X, y, k=5).fold_scores

        fitted = DecisionTreeRegressor(max_depth=3).fit(X, y)
        assert cross_validate(fitted, X, y, k=5).fold_scores == expected
        assert cross_validate(DecisionTreeRegressor(max_depth=3), X, y, k=5).fold_scores == expected

        by_kind = cross_validate(ModelKind.LINEAR, X, y, k=5).fold_scores
        assert cross_validate("linear", X, y, k=5).fold_scores == by_kind

    def test_rejects_clustering(self, linear_data: tuple[np.ndarray, np.ndarray]) -> None:
        X, y = linear_data
        with pytest.raises(InvalidParameterError):
            cross_validate(KMeans(n_clusters=2), X, y, k=5)
        with pytest.raises(InvalidParameterError):
            cross_validate("forest", X, y, k=5)


class TestFeatureImportance:
    """Test calculate_feature_importance()."""

    def test_ranks_informative_feature_first(self, linear_data: tuple[np.ndarray, np.ndarray]) -> None:
        X, y = linear_data
        model = LinearRegression().fit(X, y)
        importances = calculate_feature_importance(model, X, y, ["signal", "noise"])

        assert [fi.feature for fi in importances] == ["signal", "noise"]
        assert importances[0].importance > 1.0
        assert all(fi.importance >= 0 for fi in importances)

    def test_seeded(self, linear_data: tuple[np.ndarray, np.ndarray]) -> None:
        X, y = linear_data
        model = DecisionTreeRegressor().fit(X, y)
        first = calculate_feature_importance(model, X, y, ["a", "b"], random_state=3, n_repeats=3)
        second = calculate_feature_importance(model, X, y, ["a", "b"], random_state=3, n_repeats=3)
        assert first == second

    def test_does_not_refit(self, linear_data: tuple[np.ndarray, np.ndarray]) -> None:
        X, y = linear_data
        model = LinearRegression().fit(X, y)
        coef = model.coef_.copy()
        calculate_feature_importance(model, X, y, ["a", "b"])
        np.testing.assert_array_equal(model.coef_, coef)

    def test_invalid_input(self, linear_data: tuple[np.ndarray, np.ndarray]) -> None:
        X, y = linear_data
        model = LinearRegression().fit(X, y)

        with pytest.raises(DimensionMismatchError, match="Dimension mismatch"):
            calculate_feature_importance(model, X, y, ["only_one"])
        with pytest.raises(NotFittedError):
            calculate_feature_importance(LinearRegression(), X, y, ["a", "b"])
        with pytest.raises(InvalidParameterError):
            calculate_feature_importance(KMeans(n_clusters=2).fit(X), X, y, ["a", "b"])

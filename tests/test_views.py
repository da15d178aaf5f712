"""Tests for FeatureMatrix construction."""

import numpy as np
import pytest

from analytics_tlbx.data.views import FeatureMatrix, build_feature_matrix
from analytics_tlbx.errors import InsufficientDataError, InvalidParameterError


class TestBuildFeatureMatrix:
    """Test build_feature_matrix()."""

    @pytest.fixture
    def records(self) -> list[dict]:
        return [
            {"x1": 1.0, "x2": 10.0, "y": 100.0},
            {"x1": None, "x2": 20.0, "y": 200.0},
            {"x1": 3.0, "x2": 30.0, "y": None},
            {"x1": 5.0, "x2": "n/a", "y": 400.0},
            {"x1": 7.0, "x2": 50.0, "y": 500.0},
        ]

    def test_drop_strategy(self, records: list[dict]) -> None:
        """Test that rows with any missing value are dropped, keeping source order."""
        fm = build_feature_matrix(records, ["x1", "x2"], "y")

        assert isinstance(fm, FeatureMatrix)
        assert fm.X.tolist() == [[1.0, 10.0], [7.0, 50.0]]
        assert fm.y.tolist() == [100.0, 500.0]
        assert fm.row_index.tolist() == [0, 4]
        assert fm.n_dropped == 3
        assert fm.n_rows == 2
        assert fm.n_features == 2

    def test_median_strategy(self, records: list[dict]) -> None:
        """Test median imputation of features; rows without a target are still dropped."""
        fm = build_feature_matrix(records, ["x1", "x2"], "y", missing_strategy="median")

        assert fm.row_index.tolist() == [0, 1, 3, 4]
        assert fm.X[1, 0] == pytest.approx(5.0)
        assert fm.X[2, 1] == pytest.approx(20.0)
        assert np.isfinite(fm.X).all()

    def test_without_target(self, records: list[dict]) -> None:
        """Test feature-only projection (e.g. for clustering)."""
        fm = build_feature_matrix(records, ["x2"])

        assert fm.y is None
        assert fm.X.shape == (4, 1)

    def test_invalid_arguments(self, records: list[dict]) -> None:
        """Test empty feature list and unknown strategy."""
        with pytest.raises(InvalidParameterError):
            build_feature_matrix(records, [], "y")
        with pytest.raises(InvalidParameterError, match=r"missing_strategy"):
            build_feature_matrix(records, ["x1"], "y", missing_strategy="mean")

    def test_median_needs_defined_values(self) -> None:
        """Test that a feature with no values at all cannot be imputed."""
        records = [{"a": None, "b": 1.0, "y": 1.0}, {"a": None, "b": 2.0, "y": 2.0}]
        with pytest.raises(InsufficientDataError):
            build_feature_matrix(records, ["a", "b"], "y", missing_strategy="median")

    def test_frozen(self, records: list[dict]) -> None:
        """Test that FeatureMatrix is immutable."""
        fm = build_feature_matrix(records, ["x1"], "y")
        with pytest.raises(AttributeError):
            fm.target_name = "other"  # type: ignore[misc]

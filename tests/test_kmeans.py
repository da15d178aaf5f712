"""Tests for k-means clustering."""

import numpy as np
import pytest

from analytics_tlbx.errors import InsufficientDataError, InvalidParameterError, NotFittedError
from analytics_tlbx.models import KMeans


class TestKMeans:
    """Test KMeans fit/predict/result."""

    CENTERS = np.array([[0.0, 0.0], [50.0, 50.0], [100.0, 0.0]])

    @pytest.fixture
    def blobs(self) -> tuple[np.ndarray, np.ndarray]:
        """Three well-separated blobs of 30 points each, with their true blob index."""
        rng = np.random.default_rng(0)
        X = np.vstack([center + rng.normal(0, 1.0, size=(30, 2)) for center in self.CENTERS])
        truth = np.repeat(np.arange(3), 30)
        return X, truth

    def test_recovers_blobs(self, blobs: tuple[np.ndarray, np.ndarray]) -> None:
        """Test that clusters match the blobs up to a permutation of labels."""
        X, truth = blobs
        model = KMeans(n_clusters=3, random_state=1).fit(X)
        labels = model.result().labels

        for blob in range(3):
            assert len(set(labels[truth == blob])) == 1
        assert len(set(labels)) == 3

        centroids = model.result().centroids[[labels[truth == b][0] for b in range(3)]]
        np.testing.assert_allclose(centroids, self.CENTERS, atol=1.0)
        assert model.result().converged

    def test_predict_does_not_move_centroids(self, blobs: tuple[np.ndarray, np.ndarray]) -> None:
        X, _ = blobs
        model = KMeans(n_clusters=3).fit(X)
        before = model.cluster_centers_.copy()

        predicted = model.predict([[1.0, 1.0], [99.0, 1.0]])

        np.testing.assert_array_equal(model.cluster_centers_, before)
        assert predicted[0] == model.predict([[0.0, 0.0]])[0]
        assert predicted[0] != predicted[1]

    def test_seed_is_deterministic(self, blobs: tuple[np.ndarray, np.ndarray]) -> None:
        X, _ = blobs
        first = KMeans(n_clusters=3, random_state=5).fit(X).result()
        second = KMeans(n_clusters=3, random_state=5).fit(X).result()

        np.testing.assert_array_equal(first.centroids, second.centroids)
        np.testing.assert_array_equal(first.labels, second.labels)
        assert first.inertia == second.inertia

    def test_random_init_uses_input_rows(self, blobs: tuple[np.ndarray, np.ndarray]) -> None:
        """Test that uniform initialisation is seeded and ends on a valid clustering."""
        X, _ = blobs
        first = KMeans(n_clusters=3, init="random", random_state=3).fit(X).result()
        second = KMeans(n_clusters=3, init="random", random_state=3).fit(X).result()

        np.testing.assert_array_equal(first.labels, second.labels)
        assert set(first.labels) <= {0, 1, 2}
        assert first.centroids.shape == (3, 2)

    def test_too_few_distinct_rows(self) -> None:
        """Test that duplicated rows do not count towards the required k distinct rows."""
        X = np.array([[1.0, 1.0], [1.0, 1.0], [2.0, 2.0], [2.0, 2.0]])
        with pytest.raises(InsufficientDataError):
            KMeans(n_clusters=3).fit(X)

    def test_k_equals_distinct_rows(self) -> None:
        X = np.array([[1.0, 1.0], [1.0, 1.0], [2.0, 2.0], [5.0, 5.0]])
        result = KMeans(n_clusters=3).fit(X).result()

        assert result.inertia == pytest.approx(0.0)
        assert result.labels[0] == result.labels[1]

    def test_max_iter_limits_iterations(self, blobs: tuple[np.ndarray, np.ndarray]) -> None:
        X, _ = blobs
        result = KMeans(n_clusters=3, max_iter=1).fit(X).result()

        assert result.n_iter == 1
        assert not result.converged

    def test_invalid_parameters(self) -> None:
        with pytest.raises(InvalidParameterError):
            KMeans(n_clusters=0)
        with pytest.raises(InvalidParameterError):
            KMeans(init="farthest")  # type: ignore[arg-type]

    def test_not_fitted(self) -> None:
        with pytest.raises(NotFittedError):
            KMeans().predict([[0.0, 0.0]])
        assert not KMeans.is_regressor

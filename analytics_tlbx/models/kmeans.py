"""K-means clustering with seeded initialisation (Lloyd's algorithm)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Self

import numpy as np
from numpy.typing import ArrayLike

from analytics_tlbx.errors import InsufficientDataError, InvalidParameterError, NotFittedError
from analytics_tlbx.utils.config import DEFAULT_ANALYSIS_CFG

from .base_predictor import Predictor, check_X


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KMeansResult:
    """Learned clustering.

    Attributes:
        centroids: Array of shape ``(n_clusters, n_features)``.
        labels: Cluster index of every training row.
        inertia: Sum of squared distances of the training rows to their centroid.
        n_iter: Number of assignment steps run.
        converged: False when ``max_iter`` was reached before assignments settled.
    """

    centroids: np.ndarray
    labels: np.ndarray
    inertia: float
    n_iter: int
    converged: bool


def assign_clusters(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid (Euclidean) for every row; ties go to the lowest index."""
    dist = ((X[:, None, :] - centroids[None, :, :]) ** 2).sum(axis=2)
    return dist.argmin(axis=1)


class KMeans(Predictor):
    """K-means clustering for a fixed number of clusters.

    Initial centroids are distinct rows of the training data, drawn with
    ``numpy.random.default_rng(random_state)``: uniformly (``init="random"``) or
    with k-means++ D² weighting (``init="k-means++"``, default). Iteration stops
    once assignments no longer change or after ``max_iter`` steps. A cluster that
    loses all its rows keeps its previous centroid.

    ``fit`` ignores ``y``; ``predict`` returns cluster indices.
    """

    is_regressor = False

    def __init__(
        self,
        n_clusters: int = 3,
        max_iter: int = DEFAULT_ANALYSIS_CFG.kmeans_max_iter,
        init: Literal["k-means++", "random"] = "k-means++",
        random_state: int | None = DEFAULT_ANALYSIS_CFG.random_state,
    ) -> None:
        if n_clusters < 1:
            raise InvalidParameterError(f"n_clusters must be >= 1, got {n_clusters}.")
        if max_iter < 1:
            raise InvalidParameterError(f"max_iter must be >= 1, got {max_iter}.")
        if init not in ("k-means++", "random"):
            raise InvalidParameterError(f"Invalid init='{init}'. Use 'k-means++' or 'random'.")
        self.n_clusters = n_clusters
        self.max_iter = max_iter
        self.init = init
        self.random_state = random_state
        self.cluster_centers_: np.ndarray | None = None
        self.labels_: np.ndarray | None = None
        self.inertia_: float | None = None
        self.n_iter_: int = 0
        self.converged_: bool = False

    def _init_centroids(self, distinct: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        if self.init == "random":
            return distinct[rng.choice(distinct.shape[0], size=self.n_clusters, replace=False)].copy()

        chosen = [int(rng.integers(distinct.shape[0]))]
        for _ in range(1, self.n_clusters):
            d2 = ((distinct[:, None, :] - distinct[chosen][None, :, :]) ** 2).sum(axis=2).min(axis=1)
            chosen.append(int(rng.choice(distinct.shape[0], p=d2 / d2.sum())))
        return distinct[chosen].copy()

    def fit(self, X: ArrayLike, y: ArrayLike | None = None) -> Self:
        """Cluster the rows of ``X``.

        Raises:
            InsufficientDataError: If ``X`` has fewer distinct rows than ``n_clusters``.
        """
        X = check_X(X)
        distinct = np.unique(X, axis=0)
        if distinct.shape[0] < self.n_clusters:
            raise InsufficientDataError(
                f"Need at least {self.n_clusters} distinct rows for {self.n_clusters} clusters, "
                f"got {distinct.shape[0]}.",
            )

        rng = np.random.default_rng(self.random_state)
        centroids = self._init_centroids(distinct, rng)
        labels: np.ndarray | None = None
        converged = False
        n_iter = 0
        for n_iter in range(1, self.max_iter + 1):
            new_labels = assign_clusters(X, centroids)
            if labels is not None and np.array_equal(new_labels, labels):
                converged = True
                break
            labels = new_labels
            for c in range(self.n_clusters):
                members = X[labels == c]
                if members.shape[0]:
                    centroids[c] = members.mean(axis=0)

        labels = assign_clusters(X, centroids)
        self.cluster_centers_ = centroids
        self.labels_ = labels
        self.inertia_ = float(((X - centroids[labels]) ** 2).sum())
        self.n_iter_ = n_iter
        self.converged_ = converged
        self._n_features = X.shape[1]
        logger.debug("KMeans(k=%d) stopped after %d iterations (converged=%s)", self.n_clusters, n_iter, converged)
        return self

    def predict(self, X: ArrayLike) -> np.ndarray:
        """Assign each row to the nearest learned centroid; centroids are not updated."""
        X = check_X(X, self._check_fitted())
        return assign_clusters(X, self.cluster_centers_)

    def result(self) -> KMeansResult:
        if not self.is_fitted or self.cluster_centers_ is None or self.labels_ is None:
            raise NotFittedError("Must call fit() before result()")
        return KMeansResult(
            centroids=self.cluster_centers_.copy(),
            labels=self.labels_.copy(),
            inertia=self.inertia_,
            n_iter=self.n_iter_,
            converged=self.converged_,
        )

"""Regression tree grown by greedy sum-of-squared-errors splitting."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Self

import numpy as np
from numpy.typing import ArrayLike

from analytics_tlbx.errors import InvalidParameterError, NotFittedError
from analytics_tlbx.utils.config import DEFAULT_ANALYSIS_CFG

from .base_predictor import Predictor, check_X, check_X_y


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeNode:
    """One node of a fitted regression tree.

    Attributes:
        value: Mean target of the training rows that reached the node (the leaf prediction).
        n_samples: Number of training rows that reached the node.
        impurity: Sum of squared errors of those rows around ``value``.
        feature: Column index tested by a split node; ``None`` for leaves.
        threshold: Rows with ``x[feature] <= threshold`` go left, the rest go right.
    """

    value: float
    n_samples: int
    impurity: float
    feature: int | None = None
    threshold: float | None = None
    left: TreeNode | None = None
    right: TreeNode | None = None

    @property
    def is_leaf(self) -> bool:
        return self.feature is None

    @property
    def depth(self) -> int:
        if self.is_leaf:
            return 0
        return 1 + max(self.left.depth, self.right.depth)

    @property
    def n_leaves(self) -> int:
        if self.is_leaf:
            return 1
        return self.left.n_leaves + self.right.n_leaves


@dataclass(frozen=True)
class DecisionTreeResult:
    root: TreeNode
    depth: int
    n_leaves: int
    n_features: int


def best_split(X: np.ndarray, y: np.ndarray) -> tuple[int, float, float] | None:
    r"""Find the ``(feature, threshold, sse)`` split with the lowest summed SSE of both children.

    Candidate thresholds are the midpoints between consecutive distinct sorted
    values of each feature. SSE of a partition is computed from running sums as
    :math:`\sum y^2 - (\sum y)^2 / n`. Ties keep the first feature/threshold found.
    Returns ``None`` when every feature is constant.
    """
    n = y.shape[0]
    best: tuple[int, float, float] | None = None
    for j in range(X.shape[1]):
        order = np.argsort(X[:, j], kind="stable")
        xs, ys = X[order, j], y[order]
        cut = np.flatnonzero(xs[:-1] < xs[1:])
        if cut.size == 0:
            continue

        csum, csq = np.cumsum(ys), np.cumsum(ys * ys)
        n_left = cut + 1.0
        n_right = n - n_left
        sum_left, sq_left = csum[cut], csq[cut]
        sse = (sq_left - sum_left**2 / n_left) + ((csq[-1] - sq_left) - (csum[-1] - sum_left) ** 2 / n_right)

        k = int(np.argmin(sse))
        if best is None or sse[k] < best[2]:
            best = (j, float((xs[cut[k]] + xs[cut[k] + 1]) / 2.0), float(sse[k]))
    return best


class DecisionTreeRegressor(Predictor):
    """Binary regression tree.

    A node stops splitting when it holds fewer than ``min_samples_split`` rows,
    sits at ``max_depth``, or its targets are all equal (impurity 0). Leaves
    predict the mean target of their training rows.
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_ANALYSIS_CFG.tree_max_depth,
        min_samples_split: int = DEFAULT_ANALYSIS_CFG.tree_min_samples_split,
    ) -> None:
        if max_depth < 0:
            raise InvalidParameterError(f"max_depth must be >= 0, got {max_depth}.")
        if min_samples_split < 2:
            raise InvalidParameterError(f"min_samples_split must be >= 2, got {min_samples_split}.")
        self.max_depth = max_depth
        self.min_samples_split = min_samples_split
        self.root_: TreeNode | None = None

    def _grow(self, X: np.ndarray, y: np.ndarray, depth: int) -> TreeNode:
        mean = float(y.mean())
        leaf = TreeNode(value=mean, n_samples=int(y.shape[0]), impurity=float(((y - mean) ** 2).sum()))
        if depth >= self.max_depth or y.shape[0] < self.min_samples_split or np.ptp(y) == 0:
            return leaf

        split = best_split(X, y)
        if split is None:
            return leaf
        feature, threshold, _ = split
        go_left = X[:, feature] <= threshold
        if go_left.all() or not go_left.any():
            return leaf

        return TreeNode(
            value=leaf.value,
            n_samples=leaf.n_samples,
            impurity=leaf.impurity,
            feature=feature,
            threshold=threshold,
            left=self._grow(X[go_left], y[go_left], depth + 1),
            right=self._grow(X[~go_left], y[~go_left], depth + 1),
        )

    def fit(self, X: ArrayLike, y: ArrayLike | None = None) -> Self:
        if y is None:
            raise InvalidParameterError("DecisionTreeRegressor.fit requires a target vector y.")
        X, y = check_X_y(X, y)
        self.root_ = self._grow(X, y, depth=0)
        self._n_features = X.shape[1]
        logger.debug("Grew tree with depth %d and %d leaves", self.root_.depth, self.root_.n_leaves)
        return self

    def _predict_row(self, row: np.ndarray) -> float:
        node = self.root_
        while not node.is_leaf:
            node = node.left if row[node.feature] <= node.threshold else node.right
        return node.value

    def predict(self, X: ArrayLike) -> np.ndarray:
        X = check_X(X, self._check_fitted())
        return np.array([self._predict_row(row) for row in X], dtype=float)

    def result(self) -> DecisionTreeResult:
        if not self.is_fitted or self.root_ is None:
            raise NotFittedError("Must call fit() before result()")
        return DecisionTreeResult(
            root=self.root_,
            depth=self.root_.depth,
            n_leaves=self.root_.n_leaves,
            n_features=self._n_features,
        )

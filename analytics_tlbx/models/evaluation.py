r"""Evaluation helpers that work with any fitted regression predictor.

- :func:`evaluate_regression` computes :math:`R^2`, RMSE and MAE.
- :func:`cross_validate` scores fresh models on K held-out folds.
- :func:`calculate_feature_importance` measures the :math:`R^2` drop after
  permuting one feature column at a time.
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score
from sklearn.model_selection import KFold

from analytics_tlbx.errors import DimensionMismatchError, InsufficientDataError, InvalidParameterError
from analytics_tlbx.utils.config import DEFAULT_ANALYSIS_CFG

from .base_predictor import Predictor, check_X_y
from .factory import ModelKind, make_model


logger = logging.getLogger(__name__)

ModelFactory = Callable[[], Predictor] | ModelKind | str | Predictor


@dataclass(frozen=True)
class RegressionMetrics:
    r"""Fit metrics of predicted against actual values.

    - :math:`R^2 = 1 - \frac{SS_{res}}{SS_{tot}}`; when :math:`SS_{tot} = 0`
      (constant actual values) it is 1.0 for a perfect fit and 0.0 otherwise.
    - :math:`\text{RMSE} = \sqrt{\frac{1}{n}\sum_i (y_i - \hat{y}_i)^2}`
    - :math:`\text{MAE} = \frac{1}{n}\sum_i |y_i - \hat{y}_i|`
    """

    r2: float
    rmse: float
    mae: float
    n_obs: int


@dataclass(frozen=True)
class CrossValidationResult:
    """Per-fold :math:`R^2` scores with their mean and population standard deviation.

    Attributes:
        fold_scores: Held-out R² of each fold, in fold order.
        mean: Mean of ``fold_scores``.
        std: Population standard deviation of ``fold_scores``.
        fold_indices: Row indices of each held-out fold; disjoint, their union is every row.
    """

    fold_scores: list[float]
    mean: float
    std: float
    fold_indices: list[np.ndarray]


@dataclass(frozen=True)
class FeatureImportance:
    feature: str
    importance: float


def evaluate_regression(actual: ArrayLike, predicted: ArrayLike) -> RegressionMetrics:
    """Compute R², RMSE and MAE.

    Raises:
        DimensionMismatchError: If ``actual`` or ``predicted`` is not 1-D, or they differ in length.
        InsufficientDataError: If both are empty.
    """
    y_true = np.asarray(actual, dtype=float)
    y_pred = np.asarray(predicted, dtype=float)
    if y_true.ndim != 1 or y_pred.ndim != 1:
        raise DimensionMismatchError(
            f"actual and predicted must be 1-D, got shapes {y_true.shape} and {y_pred.shape}.",
        )
    if y_true.shape != y_pred.shape:
        raise DimensionMismatchError(
            f"Length mismatch: {y_true.shape[0]} actual values vs {y_pred.shape[0]} predictions.",
        )
    if y_true.size == 0:
        raise InsufficientDataError("Cannot evaluate an empty prediction set.")

    ss_tot = float(((y_true - y_true.mean()) ** 2).sum())
    if ss_tot == 0.0:
        r2 = 1.0 if np.array_equal(y_true, y_pred) else 0.0
    else:
        r2 = float(r2_score(y_true, y_pred))

    return RegressionMetrics(
        r2=r2,
        # Some sklearn versions lack `squared` kwarg; compute RMSE manually for compatibility.
        rmse=float(np.sqrt(mean_squared_error(y_true, y_pred))),
        mae=float(mean_absolute_error(y_true, y_pred)),
        n_obs=int(y_true.size),
    )


def _as_factory(model_factory: ModelFactory) -> Callable[[], Predictor]:
    if isinstance(model_factory, Predictor):
        return model_factory.clone
    if isinstance(model_factory, str):
        kind = ModelKind.parse(model_factory)
        return lambda: make_model(kind)
    if callable(model_factory):
        return model_factory
    raise InvalidParameterError(f"Cannot build models from {model_factory!r}.")


def cross_validate(
    model_factory: ModelFactory,
    X: ArrayLike,
    y: ArrayLike,
    k: int = DEFAULT_ANALYSIS_CFG.cv_folds,
    *,
    shuffle: bool = False,
    random_state: int | None = None,
) -> CrossValidationResult:
    """K-fold cross-validation using :class:`sklearn.model_selection.KFold`.

    Folds are contiguous blocks of rows unless ``shuffle=True``, in which case
    rows are permuted with ``random_state`` first. For each fold a fresh model is
    trained on the other ``k - 1`` folds and scored (R²) on the held-out fold.

    Args:
        model_factory: Zero-argument callable returning an untrained predictor, a
            :class:`ModelKind` (or its name), or a predictor instance whose
            hyper-parameters are cloned.
        X: Feature matrix.
        y: Target vector.
        k: Number of folds, ``2 <= k <= n_rows``.
        shuffle: Shuffle rows before splitting.
        random_state: Seed used when ``shuffle`` is True.

    Raises:
        InvalidParameterError: If ``k`` is out of range or the model is a clustering model.
    """
    X, y = check_X_y(X, y)
    n_rows = X.shape[0]
    if not isinstance(k, numbers.Integral) or k < 2 or k > n_rows:
        raise InvalidParameterError(f"k must be an integer with 2 <= k <= {n_rows} (number of rows), got {k}.")
    factory = _as_factory(model_factory)

    splitter = KFold(n_splits=int(k), shuffle=shuffle, random_state=random_state if shuffle else None)
    scores: list[float] = []
    folds: list[np.ndarray] = []
    for train_idx, test_idx in splitter.split(X):
        model = factory()
        if not model.is_regressor:
            raise InvalidParameterError(f"Cross-validation needs a regression model, got {type(model).__name__}.")
        model.fit(X[train_idx], y[train_idx])
        scores.append(evaluate_regression(y[test_idx], model.predict(X[test_idx])).r2)
        folds.append(test_idx)

    arr = np.asarray(scores)
    logger.debug("Cross-validated %d folds: mean R2=%.4f", k, arr.mean())
    return CrossValidationResult(
        fold_scores=scores,
        mean=float(arr.mean()),
        std=float(arr.std(ddof=0)),
        fold_indices=folds,
    )


def calculate_feature_importance(
    model: Predictor,
    X: ArrayLike,
    y: ArrayLike,
    feature_names: Sequence[str],
    *,
    random_state: int | None = DEFAULT_ANALYSIS_CFG.random_state,
    n_repeats: int = 1,
) -> list[FeatureImportance]:
    """Permutation importance of every feature of a fitted regression model.

    For each column the values are shuffled across rows (seeded), the model
    re-predicts, and the importance is ``baseline R² - shuffled R²`` averaged over
    ``n_repeats`` and clamped at 0. The model is never refitted.

    Returns:
        Features ordered by descending importance (ties keep column order).

    Raises:
        DimensionMismatchError: If ``len(feature_names)`` differs from the column count of ``X``.
        NotFittedError: If ``model`` has not been fitted.
    """
    X, y = check_X_y(X, y)
    names = list(feature_names)
    if len(names) != X.shape[1]:
        raise DimensionMismatchError(
            f"Dimension mismatch: {len(names)} feature names for {X.shape[1]} columns.",
        )
    if not model.is_regressor:
        raise InvalidParameterError(f"Feature importance needs a regression model, got {type(model).__name__}.")
    if n_repeats < 1:
        raise InvalidParameterError(f"n_repeats must be >= 1, got {n_repeats}.")

    baseline = evaluate_regression(y, model.predict(X)).r2
    rng = np.random.default_rng(random_state)
    importances: list[FeatureImportance] = []
    for j, name in enumerate(names):
        drops = []
        for _ in range(n_repeats):
            X_perm = X.copy()
            X_perm[:, j] = rng.permutation(X[:, j])
            drops.append(baseline - evaluate_regression(y, model.predict(X_perm)).r2)
        importances.append(FeatureImportance(feature=name, importance=max(0.0, float(np.mean(drops)))))

    return sorted(importances, key=lambda fi: fi.importance, reverse=True)


__all__ = [
    "CrossValidationResult",
    "FeatureImportance",
    "RegressionMetrics",
    "calculate_feature_importance",
    "cross_validate",
    "evaluate_regression",
]

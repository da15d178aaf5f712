"""Train, evaluate and cache models the way the dashboard's "train model" action does."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike

from analytics_tlbx.utils.config import DEFAULT_ANALYSIS_CFG

from .base_predictor import Predictor, check_X
from .evaluation import (
    CrossValidationResult,
    FeatureImportance,
    RegressionMetrics,
    calculate_feature_importance,
    cross_validate,
    evaluate_regression,
)
from .factory import ModelKind, make_model


logger = logging.getLogger(__name__)


@dataclass
class ModelEntry:
    """Typed registry entry bundling a fitted model with its evaluation.

    For clustering models ``predictions`` holds the cluster labels and the
    regression-only fields (``metrics``, ``cross_validation``) stay ``None``.
    """

    name: str
    kind: ModelKind
    model: Predictor
    feature_names: list[str]
    predictions: np.ndarray
    metrics: RegressionMetrics | None = None
    cross_validation: CrossValidationResult | None = None
    feature_importance: list[FeatureImportance] = field(default_factory=list)

    @property
    def top_feature(self) -> str | None:
        return self.feature_importance[0].feature if self.feature_importance else None


@dataclass
class ModelRegistry:
    """Registry to cache fitted models and compare their evaluations."""

    random_state: int | None = DEFAULT_ANALYSIS_CFG.random_state
    models: dict[str, ModelEntry] = field(default_factory=dict)

    def add(self, entry: ModelEntry, *, overwrite: bool = False) -> None:
        """Add an entry to the registry (optionally overwriting by name)."""
        if entry.name in self.models and not overwrite:
            raise KeyError(f"Model '{entry.name}' already exists in registry.")
        self.models[entry.name] = entry

    def get(self, name: str) -> ModelEntry:
        """Retrieve a model entry by name."""
        if name not in self.models:
            raise KeyError(f"Unknown model '{name}'.")
        return self.models[name]

    def _next_name(self, kind: ModelKind) -> str:
        n = len(self.models) + 1
        while f"{kind.value}_{n}" in self.models:
            n += 1
        return f"{kind.value}_{n}"

    def _build(self, kind: ModelKind, params: dict[str, Any]) -> Predictor:
        accepted = inspect.signature(kind.model_class).parameters
        if "random_state" in accepted and "random_state" not in params:
            params = {**params, "random_state": self.random_state}
        return make_model(kind, **params)

    def fit(
        self,
        X: ArrayLike,
        y: ArrayLike | None = None,
        *,
        kind: ModelKind | str = ModelKind.LINEAR,
        name: str | None = None,
        feature_names: Sequence[str] | None = None,
        cv_folds: int | None = DEFAULT_ANALYSIS_CFG.cv_folds,
        refit: bool = False,
        **params: Any,
    ) -> ModelEntry:
        """Fit a model, evaluate it and cache the entry by name.

        Regression models are scored in-sample (:func:`evaluate_regression`),
        cross-validated with ``cv_folds`` contiguous folds (skipped when ``None``
        or when there are fewer rows than folds) and ranked by permutation
        feature importance.

        Args:
            X: Feature matrix.
            y: Target vector (ignored for clustering).
            kind: Model kind to train.
            name: Name in the registry. An existing name returns the cached entry unless
                ``refit`` is set; when omitted, a free ``"<kind>_<n>"`` name is generated.
            feature_names: Column names of ``X`` (defaults to ``x0..xN``).
            cv_folds: Number of CV folds, ``None`` to skip cross-validation.
            refit: If True, refit even if a model with ``name`` exists.
            **params: Hyper-parameters forwarded to the model constructor.
        """
        kind = ModelKind.parse(kind)
        if name is None:
            name = self._next_name(kind)
        elif name in self.models and not refit:
            return self.models[name]

        n_features = check_X(X).shape[1]
        names = list(feature_names) if feature_names is not None else [f"x{i}" for i in range(n_features)]
        model = self._build(kind, params).fit(X, y)
        predictions = model.predict(X)
        entry = ModelEntry(name=name, kind=kind, model=model, feature_names=names, predictions=predictions)

        if model.is_regressor:
            entry.metrics = evaluate_regression(y, predictions)
            if cv_folds and 2 <= cv_folds <= len(predictions):
                entry.cross_validation = cross_validate(model, X, y, k=cv_folds)
            entry.feature_importance = calculate_feature_importance(
                model,
                X,
                y,
                names,
                random_state=self.random_state,
            )

        logger.debug("Registered model '%s' (%s)", name, kind)
        self.add(entry, overwrite=True)
        return entry

    def compare(self, *, sort_by: str = "r2") -> pd.DataFrame:
        """Return a comparison table for all cached models (best first)."""
        rows = []
        for entry in self.models.values():
            row: dict[str, Any] = {"model": entry.name, "kind": entry.kind.value, "top_feature": entry.top_feature}
            if entry.metrics is not None:
                row.update({"r2": entry.metrics.r2, "rmse": entry.metrics.rmse, "mae": entry.metrics.mae})
            if entry.cross_validation is not None:
                row.update({"cv_mean_r2": entry.cross_validation.mean, "cv_std_r2": entry.cross_validation.std})
            rows.append(row)
        df = pd.DataFrame(rows, columns=None if rows else ["model"]).set_index("model")
        if sort_by in df.columns:
            return df.sort_values(sort_by, ascending=sort_by not in ("r2", "cv_mean_r2"), na_position="last")
        return df

    def __iter__(self) -> Iterator[ModelEntry]:
        return iter(self.models.values())

    def __len__(self) -> int:
        return len(self.models)


__all__ = ["ModelEntry", "ModelRegistry"]

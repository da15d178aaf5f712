"""Numeric views over record collections for the model toolkit."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Literal

import numpy as np
from sklearn.impute import SimpleImputer

from analytics_tlbx.errors import InsufficientDataError, InvalidParameterError

from .records import Record, materialize, numeric_value


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureMatrix:
    """Immutable numeric projection of a record collection.

    Attributes:
        X: Feature matrix of shape ``(n_rows, n_features)``; every cell is a finite float.
        y: Target vector of length ``n_rows`` or ``None`` when no target was requested.
        feature_names: Field names in column order.
        target_name: Field name of ``y``.
        row_index: Position in the source collection of every kept row (ascending).
        n_dropped: Number of source records excluded because of missing values.
    """

    X: np.ndarray
    y: np.ndarray | None
    feature_names: list[str]
    target_name: str | None = None
    row_index: np.ndarray | None = None
    n_dropped: int = 0

    @property
    def n_rows(self) -> int:
        return int(self.X.shape[0])

    @property
    def n_features(self) -> int:
        return int(self.X.shape[1])


def build_feature_matrix(
    records: Iterable[Record],
    features: Sequence[str],
    target: str | None = None,
    *,
    missing_strategy: Literal["drop", "median"] = "drop",
) -> FeatureMatrix:
    """Project ``features`` (and optionally ``target``) of ``records`` into numeric arrays.

    Row order follows the source collection. Rows without a numeric target are
    always dropped. Rows with a missing feature value are either dropped
    (``"drop"``) or median-imputed column-wise (``"median"``) using
    :class:`sklearn.impute.SimpleImputer`.

    Args:
        records: Source record collection.
        features: Feature field names, in the desired column order.
        target: Optional target field name.
        missing_strategy: ``"drop"`` or ``"median"``.

    Returns:
        FeatureMatrix with finite values only.

    Raises:
        InvalidParameterError: For an empty feature list or unknown strategy.
        InsufficientDataError: When ``"median"`` is asked to impute a feature with no defined value.
    """
    features = list(features)
    if not features:
        raise InvalidParameterError("At least one feature field is required.")
    if missing_strategy not in ("drop", "median"):
        raise InvalidParameterError(
            f"Invalid missing_strategy='{missing_strategy}'. Use 'drop' or 'median'.",
        )

    records = materialize(records)
    X = np.array(
        [[np.nan if (v := numeric_value(rec.get(f))) is None else v for f in features] for rec in records],
        dtype=float,
    ).reshape(len(records), len(features))
    y = None
    keep = np.ones(len(records), dtype=bool)
    if target is not None:
        y = np.array(
            [np.nan if (v := numeric_value(rec.get(target))) is None else v for rec in records],
            dtype=float,
        )
        keep &= ~np.isnan(y)

    if missing_strategy == "drop":
        keep &= ~np.isnan(X).any(axis=1)
        X = X[keep]
    else:
        X = X[keep]
        if X.shape[0] and np.isnan(X).any():
            empty = [f for f, col in zip(features, X.T, strict=True) if np.isnan(col).all()]
            if empty:
                raise InsufficientDataError(f"Cannot impute features without any defined value: {empty}")
            X = SimpleImputer(strategy="median").fit_transform(X)

    n_dropped = int((~keep).sum())
    if n_dropped:
        logger.debug("Dropped %d of %d records with missing values", n_dropped, len(records))

    return FeatureMatrix(
        X=X,
        y=y[keep] if y is not None else None,
        feature_names=features,
        target_name=target,
        row_index=np.flatnonzero(keep),
        n_dropped=n_dropped,
    )


__all__ = ["FeatureMatrix", "build_feature_matrix"]

"""Outlier detection via the interquartile range rule."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd

from analytics_tlbx.data.records import Record, materialize, numeric_value, numeric_values
from analytics_tlbx.utils.config import DEFAULT_ANALYSIS_CFG


def iqr_fences(values: np.ndarray, threshold: float = DEFAULT_ANALYSIS_CFG.iqr_threshold) -> tuple[float, float] | None:
    r"""Return Tukey fences :math:`(Q_1 - k\cdot IQR,\, Q_3 + k\cdot IQR)` or ``None`` for no values.

    Quartiles use linear interpolation between order statistics (numpy's default).
    """
    if values.size == 0:
        return None
    q1, q3 = np.quantile(values, [0.25, 0.75])
    iqr = q3 - q1
    return float(q1 - threshold * iqr), float(q3 + threshold * iqr)


def detect_outliers(
    records: Iterable[Record],
    field: str,
    threshold: float = DEFAULT_ANALYSIS_CFG.iqr_threshold,
) -> list[Record]:
    """Return the records whose ``field`` value lies outside the IQR fences.

    Records with a missing ``field`` are never flagged. A constant field has
    ``IQR == 0`` and therefore no outliers. The returned records are the input
    objects themselves, in input order.
    """
    records = materialize(records)
    fences = iqr_fences(numeric_values(records, field), threshold)
    if fences is None:
        return []
    lower, upper = fences
    return [
        rec
        for rec in records
        if (v := numeric_value(rec.get(field))) is not None and (v < lower or v > upper)
    ]


@dataclass(frozen=True)
class OutlierDetectionResult:
    """Container for outlier detection results.

    Attributes:
        outlier_mask: DataFrame of boolean values indicating outliers per field (one row per record).
        n_outliers_per_column: Series with count of outliers per field.
        n_outliers_per_row: Series with count of outliers per record.
        fences: DataFrame indexed by field with columns ``lower`` and ``upper``.
    """

    outlier_mask: pd.DataFrame
    n_outliers_per_column: pd.Series
    n_outliers_per_row: pd.Series
    fences: pd.DataFrame

    @property
    def total_outliers(self) -> int:
        return int(self.n_outliers_per_column.sum())

    @property
    def outlier_percentage(self) -> float:
        cells = self.outlier_mask.size
        return 100.0 * self.total_outliers / cells if cells else 0.0


class IQROutlierDetector:
    r"""Detect outliers in several numeric fields at once via the interquartile range rule.

    Points outside :math:`[Q_1 - k\cdot IQR,\, Q_3 + k\cdot IQR]` are considered outliers, :math:`IQR = Q_3 - Q_1`.

    Theory and Assumptions:
        - Does not assume any specific data distribution (non-parametric)
        - Robust to skewed data with heavy tails
        - Best suited for *univariate* screening
        See [Wikipedia :: Interquartile range](https://en.wikipedia.org/wiki/Interquartile_range) for additional background.

    Attributes:
        threshold: Multiplier ``k`` applied to the IQR when computing the fences.
            Default is 1.5 according to Tukey's rule.
    """

    def __init__(
        self,
        records: Iterable[Record],
        fields: Sequence[str],
        threshold: float = DEFAULT_ANALYSIS_CFG.iqr_threshold,
    ) -> None:
        self._records = materialize(records)
        self._fields = list(fields)
        self.threshold = threshold
        self._fitted = False
        self._outlier_mask: pd.DataFrame | None = None
        self._fences: pd.DataFrame | None = None

    def fit(self) -> Self:
        """Compute fences and the outlier mask for every field."""
        mask: dict[str, list[bool]] = {}
        fences: dict[str, tuple[float, float]] = {}
        for field in self._fields:
            bounds = iqr_fences(numeric_values(self._records, field), self.threshold)
            fences[field] = bounds if bounds is not None else (np.nan, np.nan)
            lower, upper = fences[field]
            mask[field] = [
                (v := numeric_value(rec.get(field))) is not None and bounds is not None and (v < lower or v > upper)
                for rec in self._records
            ]

        self._outlier_mask = pd.DataFrame(mask, columns=self._fields, dtype=bool)
        self._fences = pd.DataFrame.from_dict(fences, orient="index", columns=["lower", "upper"])
        self._fitted = True
        return self

    def result(self) -> OutlierDetectionResult:
        """Return outlier detection results.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        if not self._fitted or self._outlier_mask is None or self._fences is None:
            raise ValueError("Must call fit() before result()")

        return OutlierDetectionResult(
            outlier_mask=self._outlier_mask,
            n_outliers_per_column=self._outlier_mask.sum(),
            n_outliers_per_row=self._outlier_mask.sum(axis=1),
            fences=self._fences,
        )


__all__ = [
    "IQROutlierDetector",
    "OutlierDetectionResult",
    "detect_outliers",
    "iqr_fences",
]

"""Correlation analysis for numeric record fields."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd

from analytics_tlbx.data.records import Record, materialize, numeric_value


def _paired_values(records: Iterable[Record], field_a: str, field_b: str) -> tuple[np.ndarray, np.ndarray]:
    pairs = [(numeric_value(rec.get(field_a)), numeric_value(rec.get(field_b))) for rec in records]
    pairs = [(a, b) for a, b in pairs if a is not None and b is not None]
    if not pairs:
        return np.empty(0), np.empty(0)
    a, b = np.asarray(pairs, dtype=float).T
    return a, b


def correlation(records: Iterable[Record], field_a: str, field_b: str) -> float | None:
    r"""Pearson correlation of two numeric fields over their pairwise-complete records.

    :math:`r = \frac{\sum_i (a_i - \bar{a})(b_i - \bar{b})}{n\,\sigma_a \sigma_b}`, using
    only records where both fields are defined. See [Wikipedia :: Pearson Correlation](https://en.wikipedia.org/wiki/Pearson_correlation_coefficient).

    Returns:
        A value in ``[-1, 1]``; ``None`` when fewer than two complete pairs exist or
        either field is constant on them. ``correlation(r, a, b) == correlation(r, b, a)``
        and ``correlation(r, f, f) == 1.0`` for a non-constant field.
    """
    a, b = _paired_values(records, field_a, field_b)
    if a.size < 2 or np.ptp(a) == 0 or np.ptp(b) == 0:
        return None
    if field_a == field_b:
        return 1.0

    da = a - a.mean()
    db = b - b.mean()
    r = float((da * db).mean() / (np.sqrt((da * da).mean()) * np.sqrt((db * db).mean())))
    return float(np.clip(r, -1.0, 1.0))


def correlation_matrix(records: Iterable[Record], fields: Sequence[str]) -> pd.DataFrame:
    """Square correlation matrix of ``fields`` (undefined entries are NaN)."""
    records = materialize(records)
    fields = list(fields)
    matrix = pd.DataFrame(np.nan, index=fields, columns=fields, dtype=float)
    for i, fa in enumerate(fields):
        for fb in fields[i:]:
            r = correlation(records, fa, fb)
            if r is not None:
                matrix.loc[fa, fb] = matrix.loc[fb, fa] = r
    return matrix


@dataclass(frozen=True)
class CorrelationResult:
    """Correlation analysis outputs grouped for rendering and reporting.

    Attributes:
        matrix: Pairwise Pearson correlation matrix (rows/cols = analysed fields).
        feature_pairs: DataFrame with columns `feature_a`, `feature_b`, `correlation`,
            `abs_correlation`, `pair`; sorted by strongest absolute correlations.
        target_correlations: Optional DataFrame with columns `feature`, `correlation`
            for field-vs-target correlations (sorted descending).
    """

    matrix: pd.DataFrame
    feature_pairs: pd.DataFrame
    target_correlations: pd.DataFrame | None = None


class CorrelationAnalyzer:
    """Analyzer for computing correlations between numeric fields.

    Example:
        >>> fields = ["revenue", "customers", "satisfaction", "marketShare"]
        >>> res = CorrelationAnalyzer(records, fields, target_field="revenue").fit().result()
        >>> res.matrix.loc["revenue", "customers"]
    """

    def __init__(self, records: Iterable[Record], fields: Sequence[str], target_field: str | None = None):
        self._records = materialize(records)
        self._fields = list(fields)
        self._target_field = target_field
        self._corr_mat: pd.DataFrame | None = None

    def get_correlation_matrix(self) -> pd.DataFrame:
        if self._corr_mat is None:
            self._corr_mat = correlation_matrix(self._records, self._fields)
        return self._corr_mat

    def get_top_correlated_pairs(self, n: int = 20) -> pd.DataFrame:
        """Return the strongest absolute correlations between distinct field pairs.

        The symmetric matrix is vectorized by masking the upper triangle (excluding
        the diagonal) with :func:`np.triu`; undefined pairs are dropped.
        """
        corr_matrix = self.get_correlation_matrix()
        mask = np.triu(np.ones(corr_matrix.shape, dtype=bool), k=1)

        return (
            corr_matrix.where(mask)
            .melt(ignore_index=False, var_name="feature_b", value_name="correlation")
            .dropna()
            .reset_index()
            .rename(columns={"index": "feature_a"})
            .assign(
                abs_correlation=lambda d: d.correlation.abs(),
                pair=lambda d: d.feature_a + " vs " + d.feature_b,
            )
            .sort_values("abs_correlation", ascending=False, kind="stable")
            .head(n)
            .reset_index(drop=True)
        )

    def get_target_correlations(self) -> pd.DataFrame:
        """Return correlations between every other field and the configured target."""
        if not self._target_field:
            raise ValueError("Analyzer has no target field configured.")

        corr_matrix = self.get_correlation_matrix()
        if self._target_field not in corr_matrix.index:
            raise ValueError(f"Target field '{self._target_field}' not among the analysed fields")

        return (
            corr_matrix.loc[self._target_field]
            .drop(self._target_field)
            .sort_values(ascending=False)
            .to_frame(name="correlation")
            .assign(feature=lambda d: d.index)
            .reset_index(drop=True)
        )

    def fit(self) -> Self:
        self.get_correlation_matrix()
        return self

    def result(self, *, top_n_pairs: int = 20) -> CorrelationResult:
        matrix = self.get_correlation_matrix()
        target_corr = (
            self.get_target_correlations()
            if self._target_field and self._target_field in matrix.index
            else None
        )
        return CorrelationResult(
            matrix=matrix,
            feature_pairs=self.get_top_correlated_pairs(n=top_n_pairs),
            target_correlations=target_corr,
        )


__all__ = [
    "CorrelationAnalyzer",
    "CorrelationResult",
    "correlation",
    "correlation_matrix",
]

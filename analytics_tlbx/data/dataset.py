"""Dataset wrapper that hands one record collection to the analysis helpers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Literal

import pandas as pd

from analytics_tlbx.utils.config import DEFAULT_ANALYSIS_CFG


if TYPE_CHECKING:
    from analytics_tlbx.analysis.correlation_analyzer import CorrelationAnalyzer
    from analytics_tlbx.analysis.data_quality import DataQualityReport
    from analytics_tlbx.analysis.outlier_detector import IQROutlierDetector

from .base_columns import BaseColumn, FieldKind
from .dashboard_columns import DashboardColumn, get_pretty_name
from .records import Record, infer_field_kinds, to_frame
from .views import FeatureMatrix, build_feature_matrix


class DashboardDataset:
    """Immutable holder of a record collection plus its schema.

    The dataset is always passed explicitly; there is no module-level sample
    data. Records are stored as given (a tuple of the same mapping objects) and
    never modified.

    Example:
        >>> ds = DashboardDataset.from_records(records)
        >>> fm = ds.feature_matrix()
        >>> corr = ds.make_correlation_analyzer().fit().result()
        >>> quality = ds.quality()
    """

    def __init__(self, records: Iterable[Record], Col: type[BaseColumn] = DashboardColumn) -> None:
        self._records: tuple[Record, ...] = tuple(records)
        self.Col = Col
        self._df: pd.DataFrame | None = None

    @classmethod
    def from_records(cls, records: Iterable[Record], Col: type[BaseColumn] = DashboardColumn) -> "DashboardDataset":
        return cls(records, Col=Col)

    @property
    def records(self) -> tuple[Record, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    @property
    def df(self) -> pd.DataFrame:
        """DataFrame over the records (one row per record, missing values as NaN)."""
        if self._df is None:
            self._df = to_frame(self._records)
        return self._df

    @property
    def field_kinds(self) -> dict[str, FieldKind]:
        """Declared kind for schema fields, inferred kind for any other field."""
        inferred = infer_field_kinds(self._records)
        declared = {str(col): col.kind for col in self.Col}
        return {name: declared.get(name, kind) for name, kind in inferred.items()}

    @property
    def numeric_cols(self) -> list[str]:
        return [name for name, kind in self.field_kinds.items() if kind == FieldKind.NUMERIC]

    @property
    def categorical_cols(self) -> list[str]:
        return [name for name, kind in self.field_kinds.items() if kind == FieldKind.CATEGORICAL]

    def feature_columns(self, include_target: bool = False) -> list[str]:
        """Numeric fields usable as model features, optionally including the target."""
        return [col for col in self.numeric_cols if include_target or col != self.Col.TARGET]

    def get_pretty_name(self, column_name: str) -> str:
        return get_pretty_name(column_name, self.Col)

    def describe(self, fields: Sequence[str] | None = None) -> pd.DataFrame:
        """Summary statistics table, one row per numeric field."""
        from analytics_tlbx.analysis.statistics import summarize

        fields = list(fields) if fields is not None else self.numeric_cols
        rows = [vars(summarize(self._records, f)) for f in fields]
        return pd.DataFrame(rows, columns=["field", "count", "sum", "mean", "median", "std", "min", "max"]).set_index(
            "field",
        )

    def feature_matrix(
        self,
        features: Sequence[str] | None = None,
        target: str | None = None,
        missing_strategy: Literal["drop", "median"] = "drop",
    ) -> FeatureMatrix:
        """Build (X, y) for the model toolkit; defaults to all numeric features and the schema target."""
        return build_feature_matrix(
            self._records,
            features if features is not None else self.feature_columns(),
            target if target is not None else str(self.Col.TARGET),
            missing_strategy=missing_strategy,
        )

    def quality(self) -> "DataQualityReport":
        from analytics_tlbx.analysis.data_quality import data_quality

        return data_quality(self._records)

    def make_correlation_analyzer(
        self,
        fields: Iterable[str] | None = None,
        include_target: bool = True,
    ) -> "CorrelationAnalyzer":
        """Instantiate a correlation analyzer over the numeric fields of this dataset."""
        from analytics_tlbx.analysis.correlation_analyzer import CorrelationAnalyzer

        fields = list(fields) if fields is not None else self.feature_columns(include_target=include_target)
        return CorrelationAnalyzer(
            self._records,
            fields,
            target_field=str(self.Col.TARGET) if include_target else None,
        )

    def make_iqr_outlier_detector(
        self,
        fields: Iterable[str] | None = None,
        threshold: float = DEFAULT_ANALYSIS_CFG.iqr_threshold,
    ) -> "IQROutlierDetector":
        """Instantiate an IQR outlier detector configured for this dataset.

        Args:
            fields: Fields to analyze (defaults to all numeric fields)
            threshold: IQR multiplier for fence calculation (Tukey's 1.5 by default)
        """
        from analytics_tlbx.analysis.outlier_detector import IQROutlierDetector

        return IQROutlierDetector(
            self._records,
            list(fields) if fields is not None else self.numeric_cols,
            threshold=threshold,
        )

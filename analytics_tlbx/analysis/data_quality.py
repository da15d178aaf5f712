r"""Data-quality scoring for record collections.

The score combines two penalties with fixed weights (see
:class:`~analytics_tlbx.utils.config.AnalysisConfig`):

:math:`\text{score} = \operatorname{clip}_{[0, 100]}\left(100 - w_M \cdot \text{missing\%} - w_D \cdot \text{duplicate\%}\right)`

with :math:`w_M = w_D = 1`, i.e. every percent of defective data costs one point.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from analytics_tlbx.data.records import Record, is_missing, materialize, tracked_fields
from analytics_tlbx.utils.config import DEFAULT_ANALYSIS_CFG


_MISSING = object()


@dataclass(frozen=True)
class DataQualityReport:
    """Missing-value and duplicate statistics of a record collection.

    Attributes:
        total_rows: Number of records.
        tracked_fields: Fields that were checked, in order.
        missing_cells: Number of (record, field) cells that are absent, ``None`` or NaN.
        missing_percentage: ``missing_cells / (total_rows * len(tracked_fields)) * 100``.
        duplicate_rows: Records equal on every tracked field to an earlier record.
        duplicate_percentage: ``duplicate_rows / total_rows * 100``.
        quality_score: Weighted score in ``[0, 100]``.
        missing_by_field: Missing-cell count per tracked field; a non-zero count for a
            grouping field equals the number of records excluded by ``group_by``.
    """

    total_rows: int
    tracked_fields: list[str]
    missing_cells: int
    missing_percentage: float
    duplicate_rows: int
    duplicate_percentage: float
    quality_score: float
    missing_by_field: dict[str, int] = field(default_factory=dict)


def _cell_key(value: Any) -> Hashable:
    if is_missing(value):
        return _MISSING
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


def data_quality(
    records: Iterable[Record],
    fields: Sequence[str] | None = None,
    *,
    missing_weight: float = DEFAULT_ANALYSIS_CFG.missing_weight,
    duplicate_weight: float = DEFAULT_ANALYSIS_CFG.duplicate_weight,
) -> DataQualityReport:
    """Score the completeness and uniqueness of ``records``.

    Args:
        records: Record collection.
        fields: Fields to track; defaults to the union of all record keys.
        missing_weight: Points lost per percent of missing cells.
        duplicate_weight: Points lost per percent of duplicate records.

    Returns:
        DataQualityReport. An empty collection yields zero percentages and a score of 100.

    Example:
        >>> records = [
        ...     {"revenue": 100, "customers": 10},
        ...     {"revenue": 200, "customers": 20},
        ...     {"revenue": None, "customers": 30},
        ... ]
        >>> round(data_quality(records).missing_percentage, 2)
        16.67
    """
    records = materialize(records)
    fields = list(fields) if fields is not None else tracked_fields(records)
    total_rows = len(records)

    missing_by_field = {f: sum(is_missing(rec.get(f)) for rec in records) for f in fields}
    missing_cells = sum(missing_by_field.values())
    n_cells = total_rows * len(fields)
    missing_pct = 100.0 * missing_cells / n_cells if n_cells else 0.0

    seen: set[tuple[Hashable, ...]] = set()
    duplicate_rows = 0
    for rec in records:
        key = tuple(_cell_key(rec.get(f)) for f in fields)
        if key in seen:
            duplicate_rows += 1
        else:
            seen.add(key)
    duplicate_pct = 100.0 * duplicate_rows / total_rows if total_rows else 0.0

    score = float(np.clip(100.0 - missing_pct * missing_weight - duplicate_pct * duplicate_weight, 0.0, 100.0))

    return DataQualityReport(
        total_rows=total_rows,
        tracked_fields=fields,
        missing_cells=missing_cells,
        missing_percentage=missing_pct,
        duplicate_rows=duplicate_rows,
        duplicate_percentage=duplicate_pct,
        quality_score=score,
        missing_by_field=missing_by_field,
    )


__all__ = ["DataQualityReport", "data_quality"]

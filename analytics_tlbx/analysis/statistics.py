r"""Descriptive statistics, grouped aggregation and time-series bucketing.

All functions are pure: they read the record collection passed in and never
keep or mutate it. Moments use *population* definitions, i.e. the standard
deviation is :math:`\sqrt{\frac{1}{n}\sum_i (x_i - \bar{x})^2}` (divides by
``n``, not ``n - 1``). Records whose value is missing or non-numeric are
skipped field by field.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import numpy as np
import pandas as pd

from analytics_tlbx.data.dashboard_columns import DashboardColumn as Col
from analytics_tlbx.data.records import Record, materialize, numeric_value, numeric_values
from analytics_tlbx.errors import InvalidParameterError
from analytics_tlbx.utils.config import DEFAULT_ANALYSIS_CFG


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatisticsSummary:
    """Summary statistics of one numeric field over a record collection.

    ``mean``, ``median``, ``std``, ``min`` and ``max`` are ``None`` when no record
    carries a numeric value for the field (``count == 0``); ``sum`` is then ``0.0``.
    Whenever ``count > 0``: ``min <= median <= max`` and ``std >= 0``.
    """

    field: str
    count: int
    sum: float
    mean: float | None
    median: float | None
    std: float | None
    min: float | None
    max: float | None

    @property
    def is_empty(self) -> bool:
        return self.count == 0


class Reducer(StrEnum):
    """Aggregation applied to the values within one group."""

    SUM = "sum"
    MEAN = "mean"
    COUNT = "count"
    """Number of records in the group, whether or not the value field is defined."""
    MIN = "min"
    MAX = "max"
    MEDIAN = "median"

    @classmethod
    def parse(cls, reducer: "Reducer | str") -> "Reducer":
        """Resolve a reducer name, failing with :class:`InvalidParameterError`."""
        try:
            return cls(reducer)
        except ValueError:
            supported = ", ".join(r.value for r in cls)
            raise InvalidParameterError(f"Unsupported reducer '{reducer}'. Use one of: {supported}.") from None


@dataclass(frozen=True)
class GroupAggregate:
    """Aggregated value of one partition.

    Attributes:
        name: Group key (value of the grouping field).
        value: Reduced value, ``None`` when the group has no defined value to reduce.
        count: Number of records in the group.
    """

    name: Any
    value: float | None
    count: int


@dataclass(frozen=True)
class TimeBucket:
    """One chart point of a bucketed time series."""

    label: str
    value: float | None
    count: int


def summarize(records: Iterable[Record], field: str) -> StatisticsSummary:
    """Compute count, sum, mean, median, population std, min and max of ``field``.

    Example:
        >>> records = [{"revenue": 100}, {"revenue": 200}, {"revenue": None}]
        >>> summarize(records, "revenue").mean
        150.0
    """
    values = numeric_values(records, field)
    if values.size == 0:
        return StatisticsSummary(field=field, count=0, sum=0.0, mean=None, median=None, std=None, min=None, max=None)

    return StatisticsSummary(
        field=field,
        count=int(values.size),
        sum=float(values.sum()),
        mean=float(values.mean()),
        median=float(np.median(values)),
        std=float(values.std(ddof=0)),
        min=float(values.min()),
        max=float(values.max()),
    )


def _numeric_frame(records: Sequence[Record], key_field: str, value_field: str) -> pd.DataFrame:
    """Frame with the key column kept as object (no int -> float upcast) and the value column as float/NaN."""
    return pd.DataFrame(
        {
            key_field: pd.Series([rec.get(key_field) for rec in records], dtype=object),
            "__value__": pd.Series([numeric_value(rec.get(value_field)) for rec in records], dtype=float),
        },
    )


def _reduce(grouped: "pd.core.groupby.SeriesGroupBy", reducer: Reducer) -> pd.Series:
    if reducer is Reducer.COUNT:
        return grouped.size().astype(float)
    if reducer is Reducer.SUM:
        return grouped.sum(min_count=0)
    return grouped.agg(reducer.value)


def group_by(
    records: Iterable[Record],
    group_field: str,
    value_field: str,
    reducer: Reducer | str = Reducer.SUM,
) -> list[GroupAggregate]:
    """Partition records by ``group_field`` and reduce ``value_field`` within each group.

    Records whose group key is missing are excluded from every group (they are
    not collected into an "unknown" bucket); :func:`data_quality` reports them as
    missing cells. The result is sorted descending by value; ties keep the
    order in which the groups first appear, and undefined values sort last.

    Args:
        records: Record collection.
        group_field: Partition key field.
        value_field: Field to aggregate.
        reducer: One of :class:`Reducer` (``"sum"``, ``"mean"``, ``"count"``, ...).

    Raises:
        InvalidParameterError: For an unsupported reducer name.
    """
    reducer = Reducer.parse(reducer)
    records = materialize(records)
    if not records:
        return []

    frame = _numeric_frame(records, group_field, value_field)
    grouped = frame.groupby(group_field, sort=False, dropna=True)["__value__"]
    sizes = grouped.size()
    reduced = _reduce(grouped, reducer).sort_values(ascending=False, kind="stable", na_position="last")

    return [
        GroupAggregate(
            name=key,
            value=None if pd.isna(value) else float(value),
            count=int(sizes.loc[key]),
        )
        for key, value in reduced.items()
    ]


class TimeSeriesBuckets:
    """Re-iterable, chronologically ordered buckets of a record collection.

    Nothing is computed at construction; every iteration re-reads the records
    and yields fresh :class:`TimeBucket` values, so the view can be consumed any
    number of times and always reflects the collection it wraps.
    """

    def __init__(
        self,
        records: Iterable[Record],
        *,
        date_field: str = Col.DATE,
        value_field: str = Col.REVENUE,
        reducer: Reducer | str = Reducer.SUM,
        freq: str = DEFAULT_ANALYSIS_CFG.time_bucket_freq,
    ) -> None:
        self._records = materialize(records)
        self.date_field = date_field
        self.value_field = value_field
        self.reducer = Reducer.parse(reducer)
        self.freq = freq

    def __iter__(self) -> Iterator[TimeBucket]:
        if not self._records:
            return

        frame = _numeric_frame(self._records, self.date_field, self.value_field)
        # Offsets differ between records; normalise to naive UTC before bucketing.
        dates = pd.to_datetime(frame[self.date_field], errors="coerce", format="mixed", utc=True).dt.tz_convert(None)
        valid = dates.notna()
        if not valid.all():
            logger.debug("Skipping %d records without a parseable '%s'", int((~valid).sum()), self.date_field)
        if not valid.any():
            return

        periods = dates[valid].dt.to_period(self.freq).rename("__period__")
        grouped = frame.loc[valid, "__value__"].groupby(periods, sort=True)
        sizes = grouped.size()
        for period, value in _reduce(grouped, self.reducer).items():
            yield TimeBucket(
                label=str(period),
                value=None if pd.isna(value) else float(value),
                count=int(sizes.loc[period]),
            )

    def to_frame(self) -> pd.DataFrame:
        """Materialize the buckets as a DataFrame with columns ``label``, ``value``, ``count``."""
        return pd.DataFrame(
            [(b.label, b.value, b.count) for b in self],
            columns=["label", "value", "count"],
        )


def bucket_time_series(
    records: Iterable[Record],
    date_field: str = Col.DATE,
    value_field: str = Col.REVENUE,
    reducer: Reducer | str = Reducer.SUM,
    freq: str = DEFAULT_ANALYSIS_CFG.time_bucket_freq,
) -> TimeSeriesBuckets:
    """Bucket records by a date-derived label (calendar day by default) in chronological order.

    Records with a missing or unparseable date are skipped. Timestamps carrying a
    UTC offset are converted to UTC first; naive dates are taken as UTC. ``freq``
    accepts any pandas period alias (``"D"``, ``"W"``, ``"M"``, ...).
    """
    return TimeSeriesBuckets(records, date_field=date_field, value_field=value_field, reducer=reducer, freq=freq)


__all__ = [
    "GroupAggregate",
    "Reducer",
    "StatisticsSummary",
    "TimeBucket",
    "TimeSeriesBuckets",
    "bucket_time_series",
    "group_by",
    "summarize",
]

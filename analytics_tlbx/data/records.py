"""Helpers for reading record collections without mutating them.

A record is any mapping from field name to value. A value is *missing* when the
key is absent, ``None`` or a float NaN. A value is *numeric* when it is a real
number that is neither a bool nor NaN.
"""

from __future__ import annotations

import datetime as dt
import math
import numbers
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import numpy as np
import pandas as pd

from .base_columns import FieldKind


Record = Mapping[str, Any]


def materialize(records: Iterable[Record]) -> Sequence[Record]:
    """Return ``records`` as a sequence, reading a one-shot iterable exactly once."""
    if isinstance(records, Sequence):
        return records
    return list(records)


def is_missing(value: Any) -> bool:
    """Return True for ``None``, float NaN and ``pd.NaT``."""
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, float | np.floating):
        return math.isnan(value)
    return False


def numeric_value(value: Any) -> float | None:
    """Convert ``value`` to float when it is a defined real number, else ``None``."""
    if isinstance(value, bool | np.bool_) or not isinstance(value, numbers.Real):
        return None
    value = float(value)
    return None if math.isnan(value) else value


def numeric_values(records: Iterable[Record], field: str) -> np.ndarray:
    """Collect the defined numeric values of ``field`` in record order."""
    values = [numeric_value(rec.get(field)) for rec in records]
    return np.asarray([v for v in values if v is not None], dtype=float)


def tracked_fields(records: Iterable[Record]) -> list[str]:
    """Union of the keys of all records, in first-seen order."""
    seen: dict[str, None] = {}
    for rec in records:
        seen.update(dict.fromkeys(rec))
    return list(seen)


def infer_field_kinds(records: Iterable[Record]) -> dict[str, FieldKind]:
    """Infer the kind of every field from its defined values.

    A field is temporal when all defined values are dates/timestamps, numeric when
    all are real numbers, and categorical otherwise. Fields that are missing in
    every record are reported as categorical.
    """
    records = materialize(records)
    kinds: dict[str, FieldKind] = {}
    for field in tracked_fields(records):
        defined = [rec.get(field) for rec in records if not is_missing(rec.get(field))]
        if defined and all(isinstance(v, dt.date | np.datetime64) for v in defined):
            kinds[field] = FieldKind.TEMPORAL
        elif defined and all(numeric_value(v) is not None for v in defined):
            kinds[field] = FieldKind.NUMERIC
        else:
            kinds[field] = FieldKind.CATEGORICAL
    return kinds


def to_frame(records: Iterable[Record], fields: Sequence[str] | None = None) -> pd.DataFrame:
    """Build a DataFrame over ``records`` (one row per record, positional index).

    Missing values become NaN. The input records are left untouched.
    """
    records = materialize(records)
    columns = list(fields) if fields is not None else tracked_fields(records)
    return pd.DataFrame.from_records(
        [{col: rec.get(col) for col in columns} for rec in records],
        columns=columns,
    )


__all__ = [
    "Record",
    "infer_field_kinds",
    "is_missing",
    "materialize",
    "numeric_value",
    "numeric_values",
    "to_frame",
    "tracked_fields",
]

"""Base column definitions and metadata structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class FieldKind(StrEnum):
    """How a record field is treated by grouping and aggregation."""

    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    TEMPORAL = "temporal"


@dataclass(frozen=True)
class ColumnMetadata:
    """Metadata for a record field.

    Attributes:
        name: Field name as it appears in the records.
        kind: Numeric fields are aggregation targets, categorical fields are partition keys.
        pretty_name: Human-readable name for narrative text and tables.
        unit: Optional unit suffix (e.g. ``"USD"``, ``"%"``).
    """

    name: str
    kind: FieldKind
    pretty_name: str
    unit: str | None = None


class BaseColumn(StrEnum):
    """Base class for record schema enums.

    All derived column enums must define a TARGET member naming the field that
    models predict by default.

    Subclasses must implement:
    - metadata(): Return ColumnMetadata for each enum member
    """

    TARGET: str

    def metadata(self) -> ColumnMetadata:
        """Get metadata for this column.

        Raises:
            NotImplementedError: If not implemented by subclass.
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement metadata() method")

    @classmethod
    def columns_of_kind(cls, kind: FieldKind) -> list[str]:
        """Return the field names declared with ``kind``, in declaration order."""
        return [str(col) for col in cls if col.metadata().kind == kind]

    @classmethod
    def numeric_columns(cls) -> list[str]:
        return cls.columns_of_kind(FieldKind.NUMERIC)

    @classmethod
    def categorical_columns(cls) -> list[str]:
        return cls.columns_of_kind(FieldKind.CATEGORICAL)

    @classmethod
    def feature_columns(cls, *, exclude_target: bool = True) -> list[str]:
        """Get the numeric feature column names.

        Args:
            exclude_target: If True, drop the target field from the features.
        """
        features = cls.numeric_columns()
        if exclude_target:
            features = [f for f in features if f != cls.TARGET]
        return features

    @property
    def pretty_name(self) -> str:
        """Get the human-readable name."""
        return self.metadata().pretty_name

    @property
    def kind(self) -> FieldKind:
        return self.metadata().kind

"""Data module: record schema, record helpers and numeric views."""

from .base_columns import BaseColumn, ColumnMetadata, FieldKind
from .dashboard_columns import DashboardColumn as DCol
from .dashboard_columns import get_pretty_name
from .dataset import DashboardDataset
from .records import infer_field_kinds, is_missing, numeric_value, to_frame, tracked_fields
from .views import FeatureMatrix, build_feature_matrix


__all__ = [
    "BaseColumn",
    "ColumnMetadata",
    "DCol",
    "DashboardDataset",
    "FeatureMatrix",
    "FieldKind",
    "build_feature_matrix",
    "get_pretty_name",
    "infer_field_kinds",
    "is_missing",
    "numeric_value",
    "to_frame",
    "tracked_fields",
]

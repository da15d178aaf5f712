"""Statistics and data-quality engine over record collections."""

from .correlation_analyzer import CorrelationAnalyzer, CorrelationResult, correlation, correlation_matrix
from .data_quality import DataQualityReport, data_quality
from .insights import Insight, generate_insights
from .outlier_detector import IQROutlierDetector, OutlierDetectionResult, detect_outliers, iqr_fences
from .statistics import (
    GroupAggregate,
    Reducer,
    StatisticsSummary,
    TimeBucket,
    TimeSeriesBuckets,
    bucket_time_series,
    group_by,
    summarize,
)


__all__ = [
    "CorrelationAnalyzer",
    "CorrelationResult",
    "DataQualityReport",
    "GroupAggregate",
    "IQROutlierDetector",
    "Insight",
    "OutlierDetectionResult",
    "Reducer",
    "StatisticsSummary",
    "TimeBucket",
    "TimeSeriesBuckets",
    "bucket_time_series",
    "correlation",
    "correlation_matrix",
    "data_quality",
    "detect_outliers",
    "generate_insights",
    "group_by",
    "iqr_fences",
    "summarize",
]

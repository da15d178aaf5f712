"""Shared analysis configuration (fixed thresholds, weights and model limits)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisConfig:
    """Fixed constants used across the statistics engine and the model toolkit.

    Functions expose each value as a keyword argument whose default is read from
    :data:`DEFAULT_ANALYSIS_CFG`, so a caller can override a single call without
    building a new config.
    """

    iqr_threshold: float = 1.5
    """Tukey fence multiplier ``k`` in ``[Q1 - k*IQR, Q3 + k*IQR]``."""

    missing_weight: float = 1.0
    """Quality-score points lost per percent of missing cells."""

    duplicate_weight: float = 1.0
    """Quality-score points lost per percent of duplicate records."""

    tree_max_depth: int = 5
    tree_min_samples_split: int = 5
    """Nodes with fewer training rows than this become leaves."""

    kmeans_max_iter: int = 100
    cv_folds: int = 5
    random_state: int = 42
    time_bucket_freq: str = "D"
    """pandas period alias used to bucket dates (``"D"`` = calendar day)."""


# Default configuration used across the package
DEFAULT_ANALYSIS_CFG = AnalysisConfig()


__all__ = ["DEFAULT_ANALYSIS_CFG", "AnalysisConfig"]

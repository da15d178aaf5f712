"""Minimal predictive models and their evaluation helpers."""

from .base_predictor import Predictor
from .decision_tree import DecisionTreeRegressor, DecisionTreeResult, TreeNode
from .evaluation import (
    CrossValidationResult,
    FeatureImportance,
    RegressionMetrics,
    calculate_feature_importance,
    cross_validate,
    evaluate_regression,
)
from .factory import ModelKind, make_model
from .kmeans import KMeans, KMeansResult
from .linear_regression import LinearRegression, LinearRegressionResult
from .registry import ModelEntry, ModelRegistry


__all__ = [
    "CrossValidationResult",
    "DecisionTreeRegressor",
    "DecisionTreeResult",
    "FeatureImportance",
    "KMeans",
    "KMeansResult",
    "LinearRegression",
    "LinearRegressionResult",
    "ModelEntry",
    "ModelKind",
    "ModelRegistry",
    "Predictor",
    "RegressionMetrics",
    "TreeNode",
    "calculate_feature_importance",
    "cross_validate",
    "evaluate_regression",
    "make_model",
]

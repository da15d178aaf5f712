"""Model kinds and construction by kind."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from analytics_tlbx.errors import InvalidParameterError

from .base_predictor import Predictor
from .decision_tree import DecisionTreeRegressor
from .kmeans import KMeans
from .linear_regression import LinearRegression


class ModelKind(StrEnum):
    """Supported predictor types."""

    LINEAR = "linear"
    TREE = "tree"
    KMEANS = "kmeans"

    @classmethod
    def parse(cls, kind: "ModelKind | str") -> "ModelKind":
        try:
            return cls(kind)
        except ValueError:
            supported = ", ".join(k.value for k in cls)
            raise InvalidParameterError(f"Unsupported model kind '{kind}'. Use one of: {supported}.") from None

    @property
    def model_class(self) -> type[Predictor]:
        return _MODEL_CLASSES[self]

    @property
    def pretty_name(self) -> str:
        return _PRETTY_NAMES[self]


_MODEL_CLASSES: dict[ModelKind, type[Predictor]] = {
    ModelKind.LINEAR: LinearRegression,
    ModelKind.TREE: DecisionTreeRegressor,
    ModelKind.KMEANS: KMeans,
}

_PRETTY_NAMES: dict[ModelKind, str] = {
    ModelKind.LINEAR: "Linear Regression",
    ModelKind.TREE: "Decision Tree",
    ModelKind.KMEANS: "K-Means",
}


def make_model(kind: ModelKind | str, **params: Any) -> Predictor:
    """Instantiate an untrained predictor of the given kind.

    Example:
        >>> make_model("tree", max_depth=3)
        DecisionTreeRegressor(max_depth=3, min_samples_split=5)

    Raises:
        InvalidParameterError: For an unknown kind.
    """
    return ModelKind.parse(kind).model_class(**params)


__all__ = ["ModelKind", "make_model"]

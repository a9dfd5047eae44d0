"""
Distance metrics for nearest-neighbor search.

Every metric is pure, symmetric, non-negative and zero only for identical
vectors. ``between`` compares two vectors; ``to_many`` compares one query
against every row of a matrix and is what the classifier uses.
"""

from abc import ABC, abstractmethod
from typing import Dict, List
import numpy as np


class DistanceMetric(ABC):
    name: str = ""

    def __call__(self, a, b) -> float:
        return self.between(a, b)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def between(self, a, b) -> float:
        a = np.asarray(a, dtype=float)
        b = np.asarray(b, dtype=float)
        if a.shape != b.shape:
            raise ValueError(f"Vectors must have the same shape, got {a.shape} and {b.shape}")
        return float(self.to_many(a, b.reshape(1, -1))[0])

    @abstractmethod
    def to_many(self, query: np.ndarray, points: np.ndarray) -> np.ndarray:
        """Distances from ``query`` (D,) to each row of ``points`` (N, D)."""
        pass


class EuclideanDistance(DistanceMetric):
    name = "euclidean"

    def to_many(self, query: np.ndarray, points: np.ndarray) -> np.ndarray:
        return np.sqrt(np.sum((points - query) ** 2, axis=1))


class ManhattanDistance(DistanceMetric):
    name = "manhattan"

    def to_many(self, query: np.ndarray, points: np.ndarray) -> np.ndarray:
        return np.sum(np.abs(points - query), axis=1)


class ChebyshevDistance(DistanceMetric):
    name = "chebyshev"

    def to_many(self, query: np.ndarray, points: np.ndarray) -> np.ndarray:
        return np.max(np.abs(points - query), axis=1)


_METRICS: Dict[str, DistanceMetric] = {
    metric.name: metric
    for metric in (EuclideanDistance(), ManhattanDistance(), ChebyshevDistance())
}

euclidean = _METRICS["euclidean"]


def get_distance_metric(name: str) -> DistanceMetric:
    """Look up a registered metric by its configuration name."""
    try:
        return _METRICS[str(name).lower()]
    except KeyError:
        raise ValueError(
            f"Unknown distance metric: {name}. Valid metrics are: {', '.join(available_metrics())}"
        ) from None


def available_metrics() -> List[str]:
    return sorted(_METRICS)

"""
K-nearest-neighbor classifier with plurality vote.

Fitting only stores references to the training rows; all distance work is
done at prediction time with a brute-force scan, O(N*D) per query.
Neighbors at equal distance are ranked by their position in the training
group, and a tied vote is settled by a draw from the generator the caller
passes in, so the classifier itself never touches global random state.
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple
import numpy as np

from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.error_handling.error_handler_factory import ErrorHandlerFactory
from knn_framework.framework.data_classes import DatasetView

from .distance_metrics import DistanceMetric, euclidean


class NearestNeighborClassifier:
    """
    Immutable classifier value. ``fit`` returns a new fitted instance and
    leaves the receiver untouched, so one unfitted prototype can be shared
    across folds.
    """

    def __init__(self,
                 app_logger: BaseAppLogger,
                 error_handler: ErrorHandlerFactory,
                 metric: DistanceMetric = euclidean):
        self.app_logger = app_logger
        self.error_handler = error_handler
        self.metric = metric
        self._features: Optional[np.ndarray] = None
        self._label_codes: Optional[np.ndarray] = None
        self._classes: Tuple[Any, ...] = ()

    def __repr__(self) -> str:
        return (f"NearestNeighborClassifier(metric={self.metric.name}, "
                f"n_training={self.n_training})")

    @property
    def is_fitted(self) -> bool:
        return self._features is not None

    @property
    def n_training(self) -> int:
        return 0 if self._features is None else self._features.shape[0]

    @property
    def classes(self) -> Tuple[Any, ...]:
        return self._classes

    def fit(self, training_view: DatasetView, features: Optional[np.ndarray] = None) -> "NearestNeighborClassifier":
        """
        Return a classifier fitted on ``training_view``.

        Args:
            training_view: The training group.
            features: Optional (already standardized) feature matrix aligned
                with the view's rows. Defaults to the view's raw features.
        """
        matrix = training_view.features if features is None else np.asarray(features, dtype=float)
        if matrix.ndim != 2 or matrix.shape[0] != len(training_view):
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Training features must have one row per training example",
                feature_shape=list(matrix.shape),
                n_training=len(training_view)
            )
        if len(training_view) == 0:
            raise self.error_handler.create_error_handler(
                'empty_input',
                "Cannot fit a nearest-neighbor classifier on an empty training group"
            )

        fitted = NearestNeighborClassifier(self.app_logger, self.error_handler, self.metric)
        fitted._features = matrix
        fitted._label_codes = training_view.label_codes
        fitted._classes = training_view.classes

        self.app_logger.structured_log(
            logging.DEBUG,
            "Nearest-neighbor classifier fitted",
            n_training=fitted.n_training,
            metric=self.metric.name
        )
        return fitted

    def predict(self, query: Sequence[float], k: int, rng: np.random.Generator) -> Any:
        """
        Predict the label of one query vector by plurality vote of its k
        nearest training examples.

        Raises:
            InvalidConfigurationError: If unfitted, k is outside [1, n_training],
                no generator is supplied or the query has the wrong width.
        """
        self._check_prediction_args(k, rng)
        return self._predict_one(self._as_query(query), k, rng)

    def predict_many(self, queries: np.ndarray, k: int, rng: np.random.Generator) -> List[Any]:
        """Predict each row of ``queries`` in order, sharing one generator."""
        self._check_prediction_args(k, rng)
        queries = np.asarray(queries, dtype=float)
        if queries.ndim != 2:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Queries must be a 2D matrix",
                query_shape=list(queries.shape)
            )
        return [self._predict_one(self._as_query(row), k, rng) for row in queries]

    def _predict_one(self, query: np.ndarray, k: int, rng: np.random.Generator) -> Any:
        distances = self.metric.to_many(query, self._features)
        nearest = np.argsort(distances, kind='stable')[:k]
        votes = np.bincount(self._label_codes[nearest], minlength=len(self._classes))
        tied = np.flatnonzero(votes == votes.max())
        winner = tied[0] if tied.size == 1 else rng.choice(tied)
        return self._classes[int(winner)]

    def _as_query(self, query) -> np.ndarray:
        query = np.asarray(query, dtype=float).reshape(-1)
        if query.shape[0] != self._features.shape[1]:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Query dimensionality does not match the training features",
                expected=int(self._features.shape[1]),
                received=int(query.shape[0])
            )
        return query

    def _check_prediction_args(self, k: int, rng: np.random.Generator) -> None:
        if not self.is_fitted:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Classifier must be fitted before predicting"
            )
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or not 1 <= k <= self.n_training:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                f"k must be an integer between 1 and the training size ({self.n_training})",
                k=k,
                n_training=self.n_training
            )
        if not isinstance(rng, np.random.Generator):
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "A seeded numpy Generator is required for vote tie-breaks",
                received_type=type(rng).__name__
            )

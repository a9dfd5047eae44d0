import logging
from typing import Optional
import numpy as np

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.error_handling.error_handler import ErrorHandler
from knn_framework.core.error_handling.error_handler_factory import ErrorHandlerFactory
from knn_framework.framework.data_classes import DatasetView, HoldoutResult, PredictionResult
from knn_framework.framework.randomness import derive_rng
from knn_framework.preprocessing.base_standardizer import BaseStandardizer

from ..classifiers.distance_metrics import get_distance_metric
from ..classifiers.nearest_neighbor_classifier import NearestNeighborClassifier
from ..cross_validation.base_cross_validator import FoldProcedure
from ..evaluation.evaluator import Evaluator
from .base_trainer import BaseTrainer


class KNNTrainer(BaseTrainer):
    def __init__(self,
                 config: BaseConfigManager,
                 app_logger: BaseAppLogger,
                 error_handler: ErrorHandlerFactory,
                 standardizer: Optional[BaseStandardizer] = None,
                 evaluator: Optional[Evaluator] = None):
        """
        Initialize the nearest-neighbor trainer.

        Args:
            config: Configuration manager
            app_logger: Application logger
            error_handler: Error handler factory
            standardizer: Two-phase feature scaler. When None, or when
                ``standardize`` is false in the model testing config, raw
                features are used.
            evaluator: Metrics over predictions. Defaults to a new Evaluator.
        """
        self.config = config
        self.app_logger = app_logger
        self.error_handler = error_handler
        self._model_cfg = config.core.model_testing_config

        self.standardizer = standardizer if getattr(self._model_cfg, 'standardize', True) else None
        self.evaluator = evaluator or Evaluator(app_logger, error_handler)

        metric_name = getattr(self._model_cfg, 'distance_metric', 'euclidean')
        try:
            metric = get_distance_metric(metric_name)
        except ValueError as e:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                str(e),
                distance_metric=metric_name
            )
        self.classifier = NearestNeighborClassifier(app_logger, error_handler, metric=metric)

        self.app_logger.structured_log(
            logging.INFO,
            "KNNTrainer initialized",
            distance_metric=metric.name,
            standardize=self.standardizer is not None
        )

    def train_and_evaluate(self, train_view: DatasetView, eval_view: DatasetView,
                           k: int, rng: np.random.Generator) -> HoldoutResult:
        """
        Standardize with statistics from ``train_view`` only, fit the
        classifier, predict every row of ``eval_view`` and score it.
        """
        try:
            if self.standardizer is not None:
                state = self.standardizer.fit(train_view)
                train_features = self.standardizer.transform(state, train_view)
                eval_features = self.standardizer.transform(state, eval_view)
            else:
                train_features = train_view.features
                eval_features = eval_view.features

            classifier = self.classifier.fit(train_view, train_features)
            predicted = classifier.predict_many(eval_features, k, rng)

            predictions = [
                PredictionResult(predicted=label, true=true, index=index)
                for label, true, index in zip(predicted, eval_view.labels.tolist(), eval_view.indices.tolist())
            ]
            return HoldoutResult(
                k=int(k),
                predictions=predictions,
                accuracy=self.evaluator.accuracy(predictions),
                confusion_matrix=self.evaluator.confusion_matrix(predictions, eval_view.classes)
            )
        except ErrorHandler:
            raise
        except Exception as e:
            raise self.error_handler.create_error_handler(
                'model_testing',
                "Error training and evaluating nearest-neighbor classifier",
                original_error=str(e),
                k=k,
                n_training=len(train_view),
                n_evaluation=len(eval_view)
            )

    def fold_procedure(self, k: int, seed: int) -> FoldProcedure:
        """
        Each fold draws vote tie-breaks from its own generator derived from
        ``(seed, k, fold_id)``.
        """
        def procedure(train_view: DatasetView, validation_view: DatasetView, fold_id: int) -> float:
            return self.train_and_evaluate(train_view, validation_view, k, derive_rng(seed, k, fold_id)).accuracy
        return procedure

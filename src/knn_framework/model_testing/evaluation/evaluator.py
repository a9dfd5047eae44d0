import logging
from typing import Any, Sequence
import numpy as np
from sklearn.metrics import confusion_matrix as sklearn_confusion_matrix

from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.error_handling.error_handler_factory import ErrorHandlerFactory
from knn_framework.framework.data_classes import ConfusionMatrix, PredictionResult


class Evaluator:
    """Accuracy and confusion matrix over labeled predictions. Both ignore prediction order."""

    def __init__(self, app_logger: BaseAppLogger, error_handler: ErrorHandlerFactory):
        self.app_logger = app_logger
        self.error_handler = error_handler

    def accuracy(self, predictions: Sequence[PredictionResult]) -> float:
        """
        Fraction of predictions whose predicted label equals the true label.

        Raises:
            EmptyInputError: If there are no predictions.
            InvalidConfigurationError: If any prediction has no true label.
        """
        self._check_predictions(predictions)
        correct = sum(1 for prediction in predictions if prediction.is_correct)
        return correct / len(predictions)

    def confusion_matrix(self, predictions: Sequence[PredictionResult],
                         classes: Sequence[Any]) -> ConfusionMatrix:
        """
        Count (true, predicted) pairs over the full class set, zero cells included.

        Raises:
            EmptyInputError: If there are no predictions.
            InvalidConfigurationError: If a prediction has no true label or
                uses a label outside ``classes``.
        """
        self._check_predictions(predictions)
        classes = tuple(classes)
        known = set(classes)
        unknown = sorted({str(label)
                          for prediction in predictions
                          for label in (prediction.true, prediction.predicted)
                          if label not in known})
        if unknown:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Predictions contain labels outside the class set",
                unknown_labels=unknown,
                classes=[str(label) for label in classes]
            )

        # integer codes keep sklearn away from mixed-type label sorting
        codes = {label: code for code, label in enumerate(classes)}
        counts = sklearn_confusion_matrix(
            [codes[prediction.true] for prediction in predictions],
            [codes[prediction.predicted] for prediction in predictions],
            labels=np.arange(len(classes))
        )
        matrix = ConfusionMatrix(classes=classes, counts=counts)

        self.app_logger.structured_log(
            logging.DEBUG,
            "Confusion matrix computed",
            total=matrix.total,
            correct=matrix.correct
        )
        return matrix

    def _check_predictions(self, predictions: Sequence[PredictionResult]) -> None:
        if len(predictions) == 0:
            raise self.error_handler.create_error_handler(
                'empty_input',
                "Cannot evaluate an empty set of predictions"
            )
        missing = [position for position, prediction in enumerate(predictions) if prediction.true is None]
        if missing:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Every prediction needs a true label to be evaluated",
                n_missing=len(missing)
            )

"""
Mean/variance standardization with an explicit fit/transform split.

The fitted statistics live in a StandardizerState value instead of on the
standardizer, so a single instance can serve every fold of a cross-validation
run concurrently without one fold's statistics leaking into another.
"""

import logging
import numpy as np
from sklearn.preprocessing import StandardScaler

from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.error_handling.error_handler import ErrorHandler
from knn_framework.core.error_handling.error_handler_factory import ErrorHandlerFactory
from knn_framework.framework.data_classes import DatasetView, StandardizerState

from .base_standardizer import BaseStandardizer


class Standardizer(BaseStandardizer):
    def __init__(self, app_logger: BaseAppLogger, error_handler: ErrorHandlerFactory):
        self.app_logger = app_logger
        self.error_handler = error_handler

    def fit(self, training_view: DatasetView) -> StandardizerState:
        """
        Learn per-feature mean and scale from ``training_view``.

        Constant columns get a scale of 1, as in scikit-learn, so transform
        never divides by zero.

        Raises:
            EmptyInputError: If the training group has no rows.
            PreprocessingError: If the statistics cannot be computed.
        """
        if len(training_view) == 0:
            raise self.error_handler.create_error_handler(
                'empty_input',
                "Cannot fit a standardizer on an empty training group"
            )

        try:
            scaler = StandardScaler().fit(training_view.features)
            state = StandardizerState(
                mean=scaler.mean_,
                scale=scaler.scale_,
                feature_names=training_view.feature_names,
                fitted_indices=training_view.indices.copy()
            )
        except Exception as e:
            raise self.error_handler.create_error_handler(
                'preprocessing',
                "Error fitting standardizer",
                original_error=str(e),
                n_examples=len(training_view)
            )

        self.app_logger.structured_log(
            logging.DEBUG,
            "Standardizer fitted",
            n_samples_seen=state.n_samples_seen,
            n_features=len(state.feature_names)
        )
        return state

    def transform(self, state: StandardizerState, view: DatasetView) -> np.ndarray:
        """
        Scale the view's features with ``state``. Works for any group,
        including the one the state was fitted on.
        """
        try:
            if tuple(view.feature_names) != tuple(state.feature_names):
                raise self.error_handler.create_error_handler(
                    'preprocessing',
                    "Feature schema does not match the fitted standardizer",
                    expected=list(state.feature_names),
                    received=list(view.feature_names)
                )
            return (view.features - state.mean) / state.scale
        except ErrorHandler:
            raise
        except Exception as e:
            raise self.error_handler.create_error_handler(
                'preprocessing',
                "Error applying standardizer",
                original_error=str(e)
            )

"""
One-dimensional grid search over the neighbor count k.

All candidates are scored on a single fold assignment generated once per
call, so differences along the curve come from k alone. A candidate that
cannot be evaluated is logged, recorded on the curve and skipped; a failure
to build the folds aborts the whole sweep.
"""

import logging
from typing import Any, List, Optional, Sequence, Union
import numpy as np

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.error_handling.error_handler import ErrorHandler
from knn_framework.core.error_handling.error_handler_factory import ErrorHandlerFactory
from knn_framework.framework.data_classes import (
    DatasetView,
    LabeledDataset,
    TuningCurve,
    TuningPoint,
    as_view
)

from .base_hyperparams_optimizer import BaseHyperparamsOptimizer
from ..cross_validation.base_cross_validator import BaseCrossValidator
from ..trainers.base_trainer import BaseTrainer


class GridTuner(BaseHyperparamsOptimizer):
    """Grid-search tuner for the neighbor count."""

    def __init__(self,
                 config: BaseConfigManager,
                 cross_validator: BaseCrossValidator,
                 trainer: BaseTrainer,
                 app_logger: BaseAppLogger,
                 error_handler: ErrorHandlerFactory):
        self.config = config
        self.cross_validator = cross_validator
        self.trainer = trainer
        self.app_logger = app_logger
        self.error_handler = error_handler
        self._model_cfg = config.core.model_testing_config

        self.app_logger.structured_log(logging.INFO, "GridTuner initialized")

    @staticmethod
    def log_performance(func):
        """Decorator factory for performance logging"""
        def wrapper(*args, **kwargs):
            # Get the self instance from args since this is now a static method
            instance = args[0]
            return instance.app_logger.log_performance(func)(*args, **kwargs)
        return wrapper

    @log_performance
    def tune(self,
             training_data: Union[LabeledDataset, DatasetView],
             candidate_ks: Sequence[int],
             n_folds: Optional[int] = None,
             seed: Optional[int] = None) -> TuningCurve:
        view = as_view(training_data)
        n_folds = self._model_cfg.n_splits if n_folds is None else n_folds
        seed = self.config.random_state if seed is None else seed

        # Fold generation errors propagate and abort the sweep
        fold_assignment = self.cross_validator.make_folds(view, n_folds, seed)
        max_k = fold_assignment.min_training_size()

        curve = TuningCurve(n_folds=n_folds, seed=seed)
        candidates = self._valid_candidates(curve, candidate_ks, max_k)

        self.app_logger.structured_log(
            logging.INFO,
            "Starting grid search",
            candidate_ks=candidates,
            n_folds=n_folds,
            max_valid_k=max_k
        )

        for k in candidates:
            with self.app_logger.log_context(k=k):
                try:
                    summary = self.cross_validator.cross_validate(
                        view, fold_assignment, self.trainer.fold_procedure(k, seed)
                    )
                except ErrorHandler as e:
                    self._skip_candidate(curve, k, e)
                    continue
                except Exception as e:
                    raise self.error_handler.create_error_handler(
                        'optimization',
                        f"Grid search failed while evaluating k={k}",
                        original_error=str(e),
                        k=k
                    )

            curve.points.append(TuningPoint(k, float(summary.mean_accuracy), float(summary.standard_error)))
            curve.fold_accuracies[k] = summary.fold_accuracies

        self.app_logger.structured_log(
            logging.INFO,
            "Grid search completed",
            evaluated_ks=curve.ks,
            failed_ks=list(curve.failed_candidates),
            best_mean_accuracy=curve.best_mean_accuracy() if len(curve) else None
        )
        return curve

    def select_k(self, curve: TuningCurve, tolerance: Optional[float] = None) -> int:
        """
        Smallest k whose mean accuracy is within ``tolerance`` of the best mean.

        Raises:
            InvalidConfigurationError: If the curve is empty or the tolerance is negative.
        """
        if tolerance is None:
            tolerance = getattr(self._model_cfg, 'selection_tolerance', 0.0)
        if len(curve) == 0:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Cannot select k from an empty tuning curve",
                failed_candidates=curve.failed_candidates
            )
        if tolerance is None or not np.isfinite(tolerance) or tolerance < 0:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Selection tolerance must be a non-negative number",
                tolerance=tolerance
            )

        threshold = curve.best_mean_accuracy() - tolerance
        selected = min(point.k for point in curve if point.mean_accuracy >= threshold)

        self.app_logger.structured_log(
            logging.INFO,
            "Neighbor count selected",
            selected_k=selected,
            best_mean_accuracy=curve.best_mean_accuracy(),
            tolerance=tolerance
        )
        return selected

    def _valid_candidates(self, curve: TuningCurve, candidate_ks: Sequence[Any], max_k: int) -> List[int]:
        """
        Check every raw candidate, record the invalid ones on ``curve`` and
        return the valid ones as ints, first occurrence kept.
        """
        valid = []
        for k in candidate_ks:
            try:
                self._check_candidate(k, max_k)
            except ErrorHandler as e:
                self._skip_candidate(curve, k, e)
                continue
            if int(k) not in valid:
                valid.append(int(k))
        return valid

    def _check_candidate(self, k: Any, max_k: int) -> None:
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or not 1 <= k <= max_k:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                f"Candidate k={k!r} is not an integer in [1, {max_k}], the smallest fold training size",
                log_level=logging.WARNING,
                k=repr(k),
                max_k=max_k
            )

    def _skip_candidate(self, curve: TuningCurve, k: Any, error: ErrorHandler) -> None:
        curve.failed_candidates[repr(k)] = error.message
        self.app_logger.structured_log(
            logging.WARNING,
            "Candidate k skipped",
            k=repr(k),
            reason=error.message
        )

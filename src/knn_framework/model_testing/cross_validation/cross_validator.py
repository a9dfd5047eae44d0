"""
Stratified C-fold cross-validation.

Folds are dealt per class: each class is shuffled with a generator derived
from the seed and its examples are dealt to folds round-robin, the deal
continuing from where the previous class stopped. Per-fold work only ever
receives DatasetViews, and folds may run concurrently on joblib threads;
results are always returned in fold-id order.
"""

import logging
import math
from typing import List, Sequence, Union
import numpy as np
from joblib import Parallel, delayed

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.error_handling.error_handler import ErrorHandler
from knn_framework.core.error_handling.error_handler_factory import ErrorHandlerFactory
from knn_framework.framework.data_classes import (
    CrossValidationSummary,
    DatasetView,
    FoldAssignment,
    LabeledDataset,
    as_view
)
from knn_framework.framework.randomness import derive_rng, is_valid_seed

from .base_cross_validator import BaseCrossValidator, FoldProcedure


class CrossValidator(BaseCrossValidator):
    def __init__(self, config: BaseConfigManager, app_logger: BaseAppLogger, error_handler: ErrorHandlerFactory):
        self.config = config
        self.app_logger = app_logger
        self.error_handler = error_handler
        self.n_jobs = getattr(config.core.model_testing_config, 'n_jobs', 1) or 1

    @staticmethod
    def log_performance(func):
        """Decorator factory for performance logging"""
        def wrapper(*args, **kwargs):
            instance = args[0]
            return instance.app_logger.log_performance(func)(*args, **kwargs)
        return wrapper

    def make_folds(self, dataset: Union[LabeledDataset, DatasetView], n_folds: int, seed: int) -> FoldAssignment:
        """
        Deal every example of ``dataset`` into one of ``n_folds`` folds.

        Raises:
            InvalidConfigurationError: If ``n_folds`` < 2 or the seed is not a
                non-negative integer.
            InsufficientDataError: If there are fewer examples than folds.
        """
        view = as_view(dataset)
        if isinstance(n_folds, bool) or not isinstance(n_folds, (int, np.integer)) or n_folds < 2:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Cross-validation needs an integer number of folds of at least 2",
                n_folds=n_folds
            )
        if not is_valid_seed(seed):
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "A non-negative integer seed is required for reproducible folds",
                seed=repr(seed)
            )
        if len(view) < n_folds:
            raise self.error_handler.create_error_handler(
                'insufficient_data',
                f"Cannot create {n_folds} folds from {len(view)} examples",
                n_folds=n_folds,
                n_examples=len(view)
            )

        rng = derive_rng(seed)
        position = {index: pos for pos, index in enumerate(view.indices.tolist())}
        fold_ids = np.empty(len(view), dtype=np.intp)
        dealt = 0
        for code in range(len(view.classes)):
            members = view.indices[view.label_codes == code]
            for i, index in enumerate(rng.permutation(members).tolist()):
                fold_ids[position[index]] = (dealt + i) % n_folds
            dealt += members.size

        assignment = FoldAssignment(view, fold_ids, n_folds)
        self.app_logger.structured_log(
            logging.INFO,
            "Fold assignment created",
            n_folds=n_folds,
            seed=seed,
            fold_sizes=list(assignment.fold_sizes())
        )
        return assignment

    @log_performance
    def run_folds(self, dataset: Union[LabeledDataset, DatasetView], fold_assignment: FoldAssignment,
                  train_and_evaluate: FoldProcedure) -> List[float]:
        """
        Call ``train_and_evaluate(training_view, validation_view, fold_id)``
        for every fold and return the accuracies in fold-id order.
        """
        view = as_view(dataset)
        if not np.array_equal(np.sort(view.indices), np.sort(fold_assignment.indices)):
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Fold assignment was not created for this dataset",
                n_examples=len(view),
                n_assigned=int(fold_assignment.indices.size)
            )

        return Parallel(n_jobs=self.n_jobs, prefer="threads")(
            delayed(self._run_fold)(fold_assignment, fold, train_and_evaluate)
            for fold in range(fold_assignment.n_folds)
        )

    def _run_fold(self, fold_assignment: FoldAssignment, fold: int, train_and_evaluate: FoldProcedure) -> float:
        with self.app_logger.log_context(fold=fold):
            try:
                accuracy = float(train_and_evaluate(
                    fold_assignment.training_view(fold),
                    fold_assignment.validation_view(fold),
                    fold
                ))
            except ErrorHandler:
                raise
            except Exception as e:
                raise self.error_handler.create_error_handler(
                    'model_testing',
                    f"Error evaluating fold {fold}",
                    original_error=str(e),
                    fold=fold
                )

            if not 0.0 <= accuracy <= 1.0:
                raise self.error_handler.create_error_handler(
                    'model_testing',
                    "Fold procedure returned an accuracy outside [0, 1]",
                    fold=fold,
                    accuracy=accuracy
                )

            self.app_logger.structured_log(
                logging.DEBUG,
                "Fold evaluated",
                fold=fold,
                accuracy=accuracy
            )
            return accuracy

    def aggregate(self, accuracies: Sequence[float]) -> CrossValidationSummary:
        """
        Mean of the fold accuracies and its standard error, the sample
        standard deviation (ddof=1) divided by sqrt(C).
        """
        values = np.asarray(accuracies, dtype=float)
        if values.size < 2:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "At least two fold accuracies are needed to compute a standard error",
                n_values=int(values.size)
            )
        return CrossValidationSummary(
            fold_accuracies=tuple(values.tolist()),
            mean_accuracy=float(values.mean()),
            standard_error=float(values.std(ddof=1) / math.sqrt(values.size))
        )

    def cross_validate(self, dataset: Union[LabeledDataset, DatasetView], fold_assignment: FoldAssignment,
                       train_and_evaluate: FoldProcedure) -> CrossValidationSummary:
        summary = self.aggregate(self.run_folds(dataset, fold_assignment, train_and_evaluate))
        self.app_logger.structured_log(
            logging.INFO,
            "Cross-validation completed",
            n_folds=summary.n_folds,
            mean_accuracy=summary.mean_accuracy,
            standard_error=summary.standard_error
        )
        return summary

"""
End-to-end model testing: split -> tune -> select -> test.

The test group is cut off first and never reaches the tuner; only the
final holdout evaluation sees it.
"""

import logging
from typing import Union
import numpy as np

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.error_handling.error_handler import ErrorHandler
from knn_framework.core.error_handling.error_handler_factory import ErrorHandlerFactory
from knn_framework.framework.data_classes import (
    DatasetView,
    HoldoutResult,
    LabeledDataset,
    WorkflowResult,
    as_view
)
from knn_framework.framework.randomness import derive_rng

from .base_model_testing import BaseModelTester
from .splitting.base_splitter import BaseSplitter
from .hyperparams_optimizers.base_hyperparams_optimizer import BaseHyperparamsOptimizer
from .trainers.base_trainer import BaseTrainer


class ModelTester(BaseModelTester):
    def __init__(self,
                 config: BaseConfigManager,
                 splitter: BaseSplitter,
                 optimizer: BaseHyperparamsOptimizer,
                 trainer: BaseTrainer,
                 app_logger: BaseAppLogger,
                 error_handler: ErrorHandlerFactory):
        self.config = config
        self._model_cfg = config.core.model_testing_config
        self.splitter = splitter
        self.optimizer = optimizer
        self.trainer = trainer
        self.app_logger = app_logger
        self.error_handler = error_handler

        self.app_logger.structured_log(logging.INFO, "ModelTester initialized",
                                       config_type=type(config).__name__,
                                       optimizer_type=type(optimizer).__name__,
                                       trainer_type=type(trainer).__name__)

    @staticmethod
    def log_performance(func):
        """Decorator factory for performance logging"""
        def wrapper(*args, **kwargs):
            # Get the self instance from args since this is now a static method
            instance = args[0]
            return instance.app_logger.log_performance(func)(*args, **kwargs)
        return wrapper

    @log_performance
    def run_workflow(self, dataset: Union[LabeledDataset, DatasetView]) -> WorkflowResult:
        """
        Run the configured workflow on ``dataset``.

        Every group but the last is used for tuning; the last group is the
        test group. With the default two proportions that means tune on
        ``train`` and test on ``test``.
        """
        try:
            view = as_view(dataset)
            seed = self.config.random_state

            partition = self.splitter.split(
                view,
                self._model_cfg.split_proportions,
                seed,
                group_names=getattr(self._model_cfg, 'group_names', None)
            )
            *tuning_groups, test_group = partition.group_names
            train_view = view.restrict(np.concatenate([partition.indices(name) for name in tuning_groups]))
            test_view = partition.view(test_group)

            self.app_logger.structured_log(
                logging.INFO,
                "Data partitioned",
                tuning_groups=tuning_groups,
                test_group=test_group,
                train_class_counts={str(k): v for k, v in train_view.class_counts().items()},
                test_class_counts={str(k): v for k, v in test_view.class_counts().items()}
            )

            curve = self.optimizer.tune(
                train_view,
                self._model_cfg.candidate_ks,
                self._model_cfg.n_splits,
                seed
            )
            selected_k = self.optimizer.select_k(curve, getattr(self._model_cfg, 'selection_tolerance', 0.0))
            holdout = self.evaluate_holdout(train_view, test_view, selected_k, seed)

            return WorkflowResult(
                partition_sizes=partition.sizes(),
                tuning_curve=curve,
                selected_k=selected_k,
                holdout=holdout,
                metadata={
                    'seed': seed,
                    'distance_metric': getattr(self._model_cfg, 'distance_metric', 'euclidean'),
                    'selection_tolerance': getattr(self._model_cfg, 'selection_tolerance', 0.0)
                }
            )
        except ErrorHandler:
            raise
        except Exception as e:
            raise self.error_handler.create_error_handler(
                'model_testing',
                "Error running model testing workflow",
                original_error=str(e)
            )

    def evaluate_holdout(self, train_view: DatasetView, test_view: DatasetView,
                         k: int, seed: int) -> HoldoutResult:
        with self.app_logger.log_context(k=k, stage='holdout'):
            holdout = self.trainer.train_and_evaluate(train_view, test_view, k, derive_rng(seed, k))
            self.app_logger.structured_log(
                logging.INFO,
                "Holdout evaluation completed",
                k=k,
                accuracy=holdout.accuracy,
                n_examples=holdout.n_examples,
                confusion_matrix=holdout.confusion_matrix.counts
            )
        return holdout

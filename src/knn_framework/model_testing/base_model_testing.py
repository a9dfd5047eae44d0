from abc import ABC, abstractmethod
from typing import Union

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.framework.data_classes import (
    DatasetView,
    HoldoutResult,
    LabeledDataset,
    WorkflowResult
)
from .splitting.base_splitter import BaseSplitter
from .hyperparams_optimizers.base_hyperparams_optimizer import BaseHyperparamsOptimizer
from .trainers.base_trainer import BaseTrainer


class BaseModelTester(ABC):
    @abstractmethod
    def __init__(self,
                 config: BaseConfigManager,
                 splitter: BaseSplitter,
                 optimizer: BaseHyperparamsOptimizer,
                 trainer: BaseTrainer,
                 app_logger: BaseAppLogger,
                 error_handler):
        """
        Initialize the model tester with required dependencies.

        Args:
            config: Configuration manager
            splitter: Stratified splitter producing the train/test partition
            optimizer: Tuner for the neighbor count
            trainer: Trainer fitting and scoring the classifier
            app_logger: Application logger
            error_handler: Error handling utility
        """
        pass

    @abstractmethod
    def run_workflow(self, dataset: Union[LabeledDataset, DatasetView]) -> WorkflowResult:
        """
        Split, tune k on the training data, select k and test on held-out data.

        Returns:
            WorkflowResult with the partition sizes, tuning curve, selected k and holdout result.
        """
        pass

    @abstractmethod
    def evaluate_holdout(self, train_view: DatasetView, test_view: DatasetView,
                         k: int, seed: int) -> HoldoutResult:
        """
        Fit on the training view with the chosen k and evaluate on the test view.
        """
        pass

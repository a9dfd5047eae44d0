from abc import ABC, abstractmethod
from typing import Callable, List, Sequence, Union

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.framework.data_classes import (
    CrossValidationSummary,
    DatasetView,
    FoldAssignment,
    LabeledDataset
)

# (training view, validation view, fold id) -> accuracy
FoldProcedure = Callable[[DatasetView, DatasetView, int], float]


class BaseCrossValidator(ABC):
    @abstractmethod
    def __init__(self, config: BaseConfigManager, app_logger: BaseAppLogger, error_handler):
        pass

    @abstractmethod
    def make_folds(self, dataset: Union[LabeledDataset, DatasetView], n_folds: int, seed: int) -> FoldAssignment:
        """Assign every example to exactly one of ``n_folds`` stratified folds."""
        pass

    @abstractmethod
    def run_folds(self, dataset: Union[LabeledDataset, DatasetView], fold_assignment: FoldAssignment,
                  train_and_evaluate: FoldProcedure) -> List[float]:
        """Run the procedure once per fold and return accuracies in fold-id order."""
        pass

    @abstractmethod
    def aggregate(self, accuracies: Sequence[float]) -> CrossValidationSummary:
        """Mean and standard error of fold accuracies."""
        pass

    @abstractmethod
    def cross_validate(self, dataset: Union[LabeledDataset, DatasetView], fold_assignment: FoldAssignment,
                       train_and_evaluate: FoldProcedure) -> CrossValidationSummary:
        pass

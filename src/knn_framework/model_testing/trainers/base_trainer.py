from abc import ABC, abstractmethod
import numpy as np

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.framework.data_classes import DatasetView, HoldoutResult
from knn_framework.model_testing.cross_validation.base_cross_validator import FoldProcedure


class BaseTrainer(ABC):
    @abstractmethod
    def __init__(self, config: BaseConfigManager, app_logger: BaseAppLogger, error_handler):
        pass

    @abstractmethod
    def train_and_evaluate(self, train_view: DatasetView, eval_view: DatasetView,
                           k: int, rng: np.random.Generator) -> HoldoutResult:
        """
        Fit on ``train_view`` only and evaluate on ``eval_view``.

        Returns:
            HoldoutResult with per-example predictions, accuracy and confusion matrix.
        """
        pass

    @abstractmethod
    def fold_procedure(self, k: int, seed: int) -> FoldProcedure:
        """Return the per-fold callable a cross-validator runs for neighbor count ``k``."""
        pass

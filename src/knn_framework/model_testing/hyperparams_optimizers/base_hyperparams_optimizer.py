from abc import ABC, abstractmethod
from typing import Optional, Sequence, Union

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.framework.data_classes import DatasetView, LabeledDataset, TuningCurve
from ..cross_validation.base_cross_validator import BaseCrossValidator
from ..trainers.base_trainer import BaseTrainer


class BaseHyperparamsOptimizer(ABC):
    @abstractmethod
    def __init__(self,
                 config: BaseConfigManager,
                 cross_validator: BaseCrossValidator,
                 trainer: BaseTrainer,
                 app_logger: BaseAppLogger,
                 error_handler):
        pass

    @abstractmethod
    def tune(self,
             training_data: Union[LabeledDataset, DatasetView],
             candidate_ks: Sequence[int],
             n_folds: Optional[int] = None,
             seed: Optional[int] = None) -> TuningCurve:
        """
        Cross-validate every candidate neighbor count on one shared fold assignment.

        Args:
            training_data: The training group only; test rows must never reach here.
            candidate_ks: Neighbor counts to evaluate, in order.
            n_folds: Number of folds (configured ``n_splits`` when None).
            seed: Seed for folds and tie-breaks (configured ``random_state`` when None).

        Returns:
            TuningCurve of (k, mean accuracy, standard error) points.
        """
        pass

    @abstractmethod
    def select_k(self, curve: TuningCurve, tolerance: Optional[float] = None) -> int:
        """Pick the final neighbor count from a tuning curve."""
        pass

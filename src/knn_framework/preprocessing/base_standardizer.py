from abc import ABC, abstractmethod
import numpy as np

from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.framework.data_classes import DatasetView, StandardizerState


class BaseStandardizer(ABC):
    """
    Two-phase feature scaling: statistics are learned from one training group
    and then applied unchanged to any group.
    """

    @abstractmethod
    def __init__(self, app_logger: BaseAppLogger, error_handler):
        pass

    @abstractmethod
    def fit(self, training_view: DatasetView) -> StandardizerState:
        """Learn column statistics from the training group only."""
        pass

    @abstractmethod
    def transform(self, state: StandardizerState, view: DatasetView) -> np.ndarray:
        """Return the view's feature matrix scaled with a previously fitted state."""
        pass

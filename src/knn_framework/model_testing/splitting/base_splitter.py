from abc import ABC, abstractmethod
from typing import Optional, Sequence, Union

from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.framework.data_classes import DatasetView, LabeledDataset, Partition


class BaseSplitter(ABC):
    @abstractmethod
    def __init__(self, app_logger: BaseAppLogger, error_handler):
        pass

    @abstractmethod
    def split(self,
              dataset: Union[LabeledDataset, DatasetView],
              proportions: Sequence[float],
              seed: int,
              group_names: Optional[Sequence[str]] = None) -> Partition:
        """
        Partition a dataset into named, disjoint groups.

        Args:
            dataset: The dataset, or a view over it, to partition.
            proportions: Ordered group fractions summing to 1.
            seed: Seed making the partition reproducible.
            group_names: Optional names, one per proportion.

        Returns:
            Partition covering every index of the input exactly once.
        """
        pass

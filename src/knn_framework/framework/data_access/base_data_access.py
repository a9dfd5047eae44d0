"""
base_data_access.py

Abstract base class for data access operations. Concrete classes load labeled
datasets and persist run results for different storage back ends.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import pandas as pd

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.app_file_handling.base_app_file_handler import BaseAppFileHandler
from knn_framework.framework.data_classes import LabeledDataset


class BaseDataAccess(ABC):

    @abstractmethod
    def __init__(self, config: BaseConfigManager, app_logger: BaseAppLogger,
                 app_file_handler: BaseAppFileHandler, error_handler: Any):
        pass

    @abstractmethod
    def load_dataframe(self, file_name: str) -> pd.DataFrame:
        """
        Load the indicated dataframe.

        Returns:
            pd.DataFrame: The indicated dataframe.
        """
        pass

    @abstractmethod
    def load_dataset(self, file_name: Optional[str] = None, label_column: Optional[str] = None,
                     feature_columns: Optional[List[str]] = None) -> LabeledDataset:
        """
        Load a labeled dataset: one label column plus numeric feature columns.
        """
        pass

    @abstractmethod
    def save_results(self, results: Dict[str, Any], file_name: str) -> str:
        """
        Save a JSON-serializable results dictionary and return where it was written.
        """
        pass

    @abstractmethod
    def save_dataframe(self, df: pd.DataFrame, file_name: str) -> str:
        """
        Save a dataframe and return where it was written.
        """
        pass

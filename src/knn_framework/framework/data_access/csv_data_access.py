"""
csv_data_access.py

Concrete implementation of BaseDataAccess reading labeled datasets from CSV files
and writing run results to the configured results directory.

This class isolates the data access layer from the rest of the application, so
the model testing code only ever sees LabeledDataset objects.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.app_file_handling.base_app_file_handler import BaseAppFileHandler
from knn_framework.core.error_handling.error_handler import ErrorHandler
from knn_framework.core.error_handling.error_handler_factory import ErrorHandlerFactory
from knn_framework.framework.data_classes import LabeledDataset

from .base_data_access import BaseDataAccess


class CSVDataAccess(BaseDataAccess):
    def __init__(self, config: BaseConfigManager, app_logger: BaseAppLogger,
                 app_file_handler: BaseAppFileHandler, error_handler: ErrorHandlerFactory):
        """
        Initialize the data access object.

        Args:
            config: The configuration object.
            app_logger: The logger object.
            app_file_handler: The file handler object.
            error_handler: Factory for application errors.
        """
        self.config = config
        self.app_logger = app_logger
        self.app_file_handler = app_file_handler
        self.error_handler = error_handler

    @staticmethod
    def log_performance(func):
        """Decorator factory for performance logging"""
        def wrapper(*args, **kwargs):
            # Get the self instance from args since this is now a static method
            instance = args[0]
            return instance.app_logger.log_performance(func)(*args, **kwargs)
        return wrapper

    @log_performance
    def load_dataframe(self, file_name: str) -> pd.DataFrame:
        """
        Load the data from a CSV file.

        Args:
            file_name (str): Path of the CSV file.

        Returns:
            pd.DataFrame: The loaded data.
        """
        try:
            df = self.app_file_handler.read_csv(file_name)
            self.app_logger.structured_log(logging.INFO, "Dataframe loaded",
                                           file_name=str(file_name), shape=df.shape)
            return df
        except Exception as e:
            raise self.error_handler.create_error_handler(
                'data_access',
                f"Error loading dataframe from {file_name}",
                original_error=str(e)
            )

    @log_performance
    def load_dataset(self, file_name: Optional[str] = None, label_column: Optional[str] = None,
                     feature_columns: Optional[List[str]] = None) -> LabeledDataset:
        """
        Load a labeled dataset from a CSV file.

        Falls back to ``data_file``, ``label_column`` and ``feature_columns``
        from the configuration for any argument left as None. When no feature
        columns are configured, every column except the label is used.

        Raises:
            DataAccessError: If the file cannot be read.
            DataValidationError: If columns are missing, non-numeric or incomplete.
        """
        file_name = file_name or getattr(self.config, 'data_file', None)
        label_column = label_column or getattr(self.config, 'label_column', None)
        if feature_columns is None:
            feature_columns = getattr(self.config, 'feature_columns', None)

        if not file_name or not label_column:
            raise self.error_handler.create_error_handler(
                'configuration',
                "Both a data file and a label column are required to load a dataset",
                file_name=file_name,
                label_column=label_column
            )

        df = self.load_dataframe(file_name)

        try:
            return self._dataframe_to_dataset(df, label_column, feature_columns, source=str(file_name))
        except ErrorHandler:
            raise
        except Exception as e:
            raise self.error_handler.create_error_handler(
                'data_validation',
                "Error converting dataframe into a labeled dataset",
                original_error=str(e),
                file_name=str(file_name)
            )

    def _dataframe_to_dataset(self, df: pd.DataFrame, label_column: str,
                              feature_columns: Optional[List[str]], source: str) -> LabeledDataset:
        if label_column not in df.columns:
            raise self.error_handler.create_error_handler(
                'data_validation',
                f"Label column '{label_column}' not found",
                available_columns=df.columns.tolist()
            )

        if feature_columns is None:
            feature_columns = [column for column in df.columns if column != label_column]
        feature_columns = list(feature_columns)

        missing = [column for column in feature_columns if column not in df.columns]
        if missing:
            raise self.error_handler.create_error_handler(
                'data_validation',
                "Feature columns not found",
                missing_columns=missing
            )

        non_numeric = [column for column in feature_columns
                       if not pd.api.types.is_numeric_dtype(df[column])]
        if non_numeric:
            raise self.error_handler.create_error_handler(
                'data_validation',
                "Feature columns must be numeric",
                non_numeric_columns=non_numeric
            )

        subset = df[feature_columns + [label_column]]
        if subset.isna().any().any():
            raise self.error_handler.create_error_handler(
                'data_validation',
                "Dataset contains missing values",
                missing_per_column=subset.isna().sum()[lambda s: s > 0].to_dict()
            )

        dataset = LabeledDataset(
            features=subset[feature_columns].to_numpy(dtype=float),
            labels=subset[label_column].to_numpy(),
            feature_names=tuple(feature_columns),
            metadata={'source': source, 'label_column': label_column}
        )

        self.app_logger.structured_log(logging.INFO, "Labeled dataset loaded",
                                       n_examples=len(dataset),
                                       n_features=dataset.n_features,
                                       class_counts={str(k): v for k, v in dataset.class_counts().items()})
        return dataset

    @log_performance
    def save_results(self, results: Dict[str, Any], file_name: str) -> str:
        """
        Save a results dictionary as JSON in the configured results directory.
        """
        try:
            save_path = self._get_results_directory()
            self.app_file_handler.ensure_directory(save_path)
            full_path = save_path / file_name
            self.app_file_handler.write_json(results, full_path)
            self.app_logger.structured_log(logging.INFO, "Results saved", file_path=str(full_path))
            return str(full_path)
        except Exception as e:
            raise self.error_handler.create_error_handler(
                'data_access',
                f"Error saving results: {str(e)}",
                file_name=file_name
            )

    @log_performance
    def save_dataframe(self, df: pd.DataFrame, file_name: str) -> str:
        """
        Save a dataframe as CSV in the configured results directory.
        """
        try:
            save_path = self._get_results_directory()
            self.app_file_handler.ensure_directory(save_path)
            full_path = save_path / file_name
            self.app_file_handler.write_csv(df, full_path)
            self.app_logger.structured_log(logging.INFO, "Dataframe saved",
                                           file_path=str(full_path), shape=df.shape)
            return str(full_path)
        except Exception as e:
            raise self.error_handler.create_error_handler(
                'data_access',
                f"Error saving dataframe: {str(e)}",
                file_name=file_name
            )

    def _get_results_directory(self) -> Path:
        return Path(getattr(self.config, 'results_dir', 'results'))

from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from .base_error_handler import BaseErrorHandler
import logging

class ErrorHandler(BaseErrorHandler):
    exit_code = 1  # Default exit code

    def __init__(self, message: str, app_logger: BaseAppLogger, log_level=logging.ERROR, **kwargs):
        # Pass all parameters as keyword arguments to avoid conflicts
        super().__init__(message=message, app_logger=app_logger, log_level=log_level, **kwargs)

    def log(self) -> None:
        """Implementation of abstract log method"""
        self.app_logger.structured_log(
            self.log_level,
            self.message,
            error_type=self.__class__.__name__,
            **self.additional_info
        )

class ConfigurationError(ErrorHandler):
    """Raised when the application configuration cannot be loaded or is incomplete."""
    exit_code = 2

class InvalidConfigurationError(ErrorHandler):
    """Raised when a run parameter is malformed: proportions, fold count, k out of range."""
    exit_code = 2

class InsufficientDataError(ErrorHandler):
    """Raised when a class is too small to be represented in every requested group."""
    exit_code = 3

class EmptyInputError(ErrorHandler):
    """Raised when a metric is requested over zero predictions."""
    exit_code = 3

class DataAccessError(ErrorHandler):
    """Raised when there's an error reading or writing data."""
    exit_code = 4

class DataValidationError(ErrorHandler):
    """Raised when loaded data cannot form a labeled dataset."""
    exit_code = 4

class PreprocessingError(ErrorHandler):
    """Raised when there's an error in the preprocessing process."""
    exit_code = 5

class ModelTestingError(ErrorHandler):
    """Raised when there's an error in the model testing process."""
    exit_code = 5

class OptimizationError(ErrorHandler):
    """Raised when there's an error in the hyperparameter search."""
    exit_code = 5

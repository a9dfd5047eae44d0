import logging
import time
import functools
import contextlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Callable
from contextvars import ContextVar

import numpy as np
from pythonjsonlogger import jsonlogger

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from .base_app_logger import BaseAppLogger


# Context variable to store logging context
_log_context: ContextVar[Dict[str, Any]] = ContextVar('log_context', default={})

class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        if log_record.get('level'):
            log_record['level'] = log_record['level'].upper()
        else:
            log_record['level'] = record.levelname


def _to_serializable(value: Any) -> Any:
    """Convert numpy data types to native Python types"""
    if isinstance(value, (np.integer, np.floating, np.bool_)):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    return value


class AppLogger(BaseAppLogger):
    """Concrete implementation of BaseAppLogger"""

    LOGGER_NAME = 'knn_framework'

    def __init__(self, config: Optional[BaseConfigManager]):
        self.logger = None
        self.config = config

    def _resolve_log_level(self) -> int:
        level = getattr(self.config, 'log_level', logging.INFO) if self.config else logging.INFO
        if isinstance(level, str):
            return getattr(logging, level.upper(), logging.INFO)
        return level

    def setup(self, log_file: str) -> logging.Logger:
        """
        Setup logging configuration with file and console handlers

        Args:
            log_file: Path to log file. The file handler writes JSON records.

        Returns:
            Configured logger instance
        """
        logger = logging.getLogger(self.LOGGER_NAME)
        logger.setLevel(self._resolve_log_level())

        # Drop handlers from a previous setup() so records are not duplicated
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        file_formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(message)s')
        console_formatter = logging.Formatter('%(levelname)s: %(message)s')

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            log_file_handler = logging.FileHandler(log_file, encoding='utf-8')
            log_file_handler.setFormatter(file_formatter)
            logger.addHandler(log_file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        self.logger = logger
        return logger

    def structured_log(self, level: int, message: str, **kwargs) -> None:
        """
        Log a structured message with additional context

        Args:
            level: Logging level (e.g., logging.INFO)
            message: Log message
            **kwargs: Additional context to include in log
        """
        if self.logger is None:
            raise RuntimeError("Logger not initialized. Call setup() first.")

        context = _log_context.get()
        log_data = {key: _to_serializable(value) for key, value in {**context, **kwargs}.items()}

        structured_message = f"{message} | Context: {log_data}" if log_data else message

        self.logger.log(level, structured_message)

    def log_performance(self, func: Callable) -> Callable:
        """
        Decorator for logging function performance

        Args:
            func: Function to decorate

        Returns:
            Wrapped function with performance logging
        """
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                duration = time.time() - start_time
                self.structured_log(
                    logging.DEBUG,
                    f"Function {func.__name__} completed",
                    duration_seconds=duration,
                    status="success"
                )
                return result
            except Exception as e:
                duration = time.time() - start_time
                self.structured_log(
                    logging.ERROR,
                    f"Function {func.__name__} failed",
                    duration_seconds=duration,
                    status="error",
                    error_type=type(e).__name__,
                    error_message=str(e)
                )
                raise
        return wrapper

    @contextlib.contextmanager
    def log_context(self, **kwargs):
        """
        Context manager for adding context to logs

        Args:
            **kwargs: Context key-value pairs to add to logs
        """
        token = None
        try:
            current_context = _log_context.get()
            token = _log_context.set({**current_context, **kwargs})
            yield
        finally:
            if token is not None:
                _log_context.reset(token)

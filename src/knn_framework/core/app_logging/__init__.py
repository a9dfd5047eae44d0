from .app_logger import AppLogger
from .base_app_logger import BaseAppLogger

__all__ = ["AppLogger", "BaseAppLogger"]

from enum import Enum
from typing import Dict, Type

from knn_framework.core.config_management.base_config_manager import BaseConfigManager
from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.error_handling.error_handler_factory import ErrorHandlerFactory

from .base_hyperparams_optimizer import BaseHyperparamsOptimizer
from .grid_tuner import GridTuner
from ..cross_validation.base_cross_validator import BaseCrossValidator
from ..trainers.base_trainer import BaseTrainer


class OptimizerType(Enum):
    """Supported hyperparameter optimizer types."""
    GRID = "grid"


class OptimizerFactory:
    """Factory for creating hyperparameter optimizers with proper dependency injection."""

    _optimizers: Dict[OptimizerType, Type[BaseHyperparamsOptimizer]] = {
        OptimizerType.GRID: GridTuner,
    }

    @classmethod
    def create_optimizer(cls,
                         optimizer_type: OptimizerType,
                         config: BaseConfigManager,
                         cross_validator: BaseCrossValidator,
                         trainer: BaseTrainer,
                         app_logger: BaseAppLogger,
                         error_handler: ErrorHandlerFactory) -> BaseHyperparamsOptimizer:
        optimizer_class = cls._optimizers.get(optimizer_type)
        if optimizer_class is None:
            raise ValueError(f"Unknown optimizer type: {optimizer_type}")

        return optimizer_class(
            config=config,
            cross_validator=cross_validator,
            trainer=trainer,
            app_logger=app_logger,
            error_handler=error_handler
        )

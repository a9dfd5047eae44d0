"""
Dependency Injection container for nearest-neighbor model testing with
proper logging/error handling injection.
"""

from dependency_injector import containers, providers
from knn_framework.core.common_di_container import CommonDIContainer
from knn_framework.preprocessing.standardizer import Standardizer

from .model_tester import ModelTester
from .splitting.stratified_splitter import StratifiedSplitter
from .cross_validation.cross_validator import CrossValidator
from .evaluation.evaluator import Evaluator
from .trainers.knn_trainer import KNNTrainer
from .hyperparams_optimizers.hyperparams_optimizer_factory import OptimizerFactory, OptimizerType


class ModelTestingDIContainer(containers.DeclarativeContainer):
    # Import common container
    common = providers.Container(CommonDIContainer)

    # Use common container's components
    config = common.config
    app_logger = common.app_logger
    app_file_handler = common.app_file_handler
    error_handler = common.error_handler_factory
    data_access = common.data_access

    standardizer = providers.Singleton(
        Standardizer,
        app_logger=app_logger,
        error_handler=error_handler
    )

    evaluator = providers.Singleton(
        Evaluator,
        app_logger=app_logger,
        error_handler=error_handler
    )

    splitter = providers.Singleton(
        StratifiedSplitter,
        app_logger=app_logger,
        error_handler=error_handler
    )

    cross_validator = providers.Singleton(
        CrossValidator,
        config=config,
        app_logger=app_logger,
        error_handler=error_handler
    )

    trainer = providers.Factory(
        KNNTrainer,
        config=config,
        app_logger=app_logger,
        error_handler=error_handler,
        standardizer=standardizer,
        evaluator=evaluator
    )

    # Hyperparameter optimizer with proper injection
    optimizer = providers.Factory(
        OptimizerFactory.create_optimizer,
        optimizer_type=OptimizerType.GRID,
        config=config,
        cross_validator=cross_validator,
        trainer=trainer,
        app_logger=app_logger,
        error_handler=error_handler
    )

    # Model tester with injected dependencies
    model_tester = providers.Factory(
        ModelTester,
        config=config,
        splitter=splitter,
        optimizer=optimizer,
        trainer=trainer,
        app_logger=app_logger,
        error_handler=error_handler
    )

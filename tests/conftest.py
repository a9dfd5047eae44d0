"""
Common test fixtures for knn_framework tests.
"""
from types import SimpleNamespace
from unittest.mock import Mock

import numpy as np
import pytest

from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.error_handling.error_handler_factory import ErrorHandlerFactory
from knn_framework.framework.data_classes import LabeledDataset
from knn_framework.model_testing.cross_validation.cross_validator import CrossValidator
from knn_framework.model_testing.evaluation.evaluator import Evaluator
from knn_framework.model_testing.hyperparams_optimizers.grid_tuner import GridTuner
from knn_framework.model_testing.model_tester import ModelTester
from knn_framework.model_testing.splitting.stratified_splitter import StratifiedSplitter
from knn_framework.model_testing.trainers.knn_trainer import KNNTrainer
from knn_framework.preprocessing.standardizer import Standardizer


class MockContextManager:
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False


@pytest.fixture
def mock_app_logger():
    """Create a mock app logger for testing."""
    logger = Mock(spec=BaseAppLogger)
    logger.structured_log = Mock()
    logger.log_performance = lambda func: func
    logger.log_context = lambda **kwargs: MockContextManager()
    return logger


@pytest.fixture
def error_handler(mock_app_logger):
    """Real error handler factory logging through the mock logger."""
    return ErrorHandlerFactory(mock_app_logger)


@pytest.fixture
def model_testing_config():
    return SimpleNamespace(
        split_proportions=[0.75, 0.25],
        group_names=None,
        n_splits=5,
        n_jobs=1,
        candidate_ks=[1, 3, 5],
        selection_tolerance=0.0,
        distance_metric='euclidean',
        standardize=True
    )


@pytest.fixture
def config(model_testing_config):
    return SimpleNamespace(
        random_state=42,
        log_level='INFO',
        core=SimpleNamespace(model_testing_config=model_testing_config)
    )


@pytest.fixture
def tiny_dataset():
    """Eight examples, four per class, well separated on both features."""
    features = np.array([
        [0.0, 1.0], [0.2, 1.1], [0.4, 0.9], [0.1, 1.2],
        [5.0, 3.0], [5.2, 3.1], [4.8, 2.9], [5.1, 3.2],
    ])
    labels = np.array(['A', 'A', 'A', 'A', 'B', 'B', 'B', 'B'])
    return LabeledDataset(features=features, labels=labels, feature_names=('f1', 'f2'))


@pytest.fixture
def blobs_dataset():
    """100 examples: two noisy Gaussian blobs of 50 examples each."""
    rng = np.random.default_rng(0)
    features = np.vstack([
        rng.normal(loc=[0.0, 0.0, 0.0], scale=1.0, size=(50, 3)),
        rng.normal(loc=[2.0, 2.0, 0.0], scale=1.0, size=(50, 3)),
    ])
    labels = np.array(['neg'] * 50 + ['pos'] * 50)
    return LabeledDataset(features=features, labels=labels)


@pytest.fixture
def splitter(mock_app_logger, error_handler):
    return StratifiedSplitter(mock_app_logger, error_handler)


@pytest.fixture
def cross_validator(config, mock_app_logger, error_handler):
    return CrossValidator(config, mock_app_logger, error_handler)


@pytest.fixture
def standardizer(mock_app_logger, error_handler):
    return Standardizer(mock_app_logger, error_handler)


@pytest.fixture
def evaluator(mock_app_logger, error_handler):
    return Evaluator(mock_app_logger, error_handler)


@pytest.fixture
def trainer(config, mock_app_logger, error_handler, standardizer, evaluator):
    return KNNTrainer(config, mock_app_logger, error_handler, standardizer=standardizer, evaluator=evaluator)


@pytest.fixture
def grid_tuner(config, cross_validator, trainer, mock_app_logger, error_handler):
    return GridTuner(config, cross_validator, trainer, mock_app_logger, error_handler)


@pytest.fixture
def model_tester(config, splitter, grid_tuner, trainer, mock_app_logger, error_handler):
    return ModelTester(config, splitter, grid_tuner, trainer, mock_app_logger, error_handler)

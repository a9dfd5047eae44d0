import logging

import pytest

from knn_framework.core.error_handling.error_handler import (
    ConfigurationError,
    DataAccessError,
    EmptyInputError,
    ErrorHandler,
    InsufficientDataError,
    InvalidConfigurationError,
    OptimizationError
)


@pytest.mark.parametrize("error_type, error_class, exit_code", [
    ('configuration', ConfigurationError, 2),
    ('invalid_configuration', InvalidConfigurationError, 2),
    ('insufficient_data', InsufficientDataError, 3),
    ('empty_input', EmptyInputError, 3),
    ('data_access', DataAccessError, 4),
    ('optimization', OptimizationError, 5),
])
def test_factory_creates_typed_errors(error_handler, error_type, error_class, exit_code):
    error = error_handler.create_error_handler(error_type, "something went wrong")

    assert isinstance(error, error_class)
    assert isinstance(error, ErrorHandler)
    assert error.exit_code == exit_code
    assert str(error) == "something went wrong"


def test_error_logs_itself_with_context(error_handler, mock_app_logger):
    error_handler.create_error_handler('invalid_configuration', "bad k", k=0, max_k=80)

    mock_app_logger.structured_log.assert_called_once_with(
        logging.ERROR,
        "bad k",
        error_type='InvalidConfigurationError',
        k=0,
        max_k=80
    )


def test_log_level_can_be_overridden(error_handler, mock_app_logger):
    error = error_handler.create_error_handler('invalid_configuration', "skipped", log_level=logging.WARNING)

    assert error.log_level == logging.WARNING
    assert mock_app_logger.structured_log.call_args.args[0] == logging.WARNING


def test_unknown_error_type(error_handler):
    with pytest.raises(ValueError):
        error_handler.create_error_handler('not_a_kind', "message")


def test_errors_can_be_raised_and_caught_as_error_handler(error_handler):
    with pytest.raises(ErrorHandler):
        raise error_handler.create_error_handler('empty_input', "no predictions")

import json
from types import SimpleNamespace

import pandas as pd
import pytest

from knn_framework.core.app_file_handling.app_file_handler import LocalAppFileHandler
from knn_framework.core.error_handling.error_handler import (
    ConfigurationError,
    DataAccessError,
    DataValidationError
)
from knn_framework.framework.data_access.csv_data_access import CSVDataAccess


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / 'data.csv'
    pd.DataFrame({
        'height': [1.0, 1.2, 3.1, 3.3],
        'width': [0.5, 0.4, 2.2, 2.0],
        'note': ['x', 'y', 'z', 'w'],
        'species': ['small', 'small', 'large', 'large'],
    }).to_csv(path, index=False)
    return path


@pytest.fixture
def data_access(tmp_path, csv_file, mock_app_logger, error_handler):
    config = SimpleNamespace(
        data_file=str(csv_file),
        label_column='species',
        feature_columns=['height', 'width'],
        results_dir=str(tmp_path / 'results')
    )
    return CSVDataAccess(config, mock_app_logger, LocalAppFileHandler(), error_handler)


def test_load_dataset_from_configuration(data_access):
    dataset = data_access.load_dataset()

    assert len(dataset) == 4
    assert dataset.feature_names == ('height', 'width')
    assert dataset.classes == ('large', 'small')
    assert dataset.metadata['label_column'] == 'species'


def test_arguments_override_configuration(data_access, csv_file):
    dataset = data_access.load_dataset(str(csv_file), label_column='species', feature_columns=['width'])

    assert dataset.n_features == 1


def test_non_numeric_features_are_rejected(data_access, csv_file):
    with pytest.raises(DataValidationError):
        data_access.load_dataset(str(csv_file), label_column='species', feature_columns=['height', 'note'])


def test_missing_columns_are_rejected(data_access, csv_file):
    with pytest.raises(DataValidationError):
        data_access.load_dataset(str(csv_file), label_column='genus')
    with pytest.raises(DataValidationError):
        data_access.load_dataset(str(csv_file), label_column='species', feature_columns=['depth'])


def test_missing_values_are_rejected(data_access, tmp_path):
    path = tmp_path / 'gaps.csv'
    path.write_text("a,label\n1.0,x\n,y\n")

    with pytest.raises(DataValidationError):
        data_access.load_dataset(str(path), label_column='label', feature_columns=['a'])


def test_missing_file_is_a_data_access_error(data_access, tmp_path):
    with pytest.raises(DataAccessError):
        data_access.load_dataset(str(tmp_path / 'absent.csv'))


def test_label_column_is_required(mock_app_logger, error_handler, csv_file):
    config = SimpleNamespace(data_file=str(csv_file))
    data_access = CSVDataAccess(config, mock_app_logger, LocalAppFileHandler(), error_handler)

    with pytest.raises(ConfigurationError):
        data_access.load_dataset()


def test_save_results_and_dataframe(data_access, tmp_path):
    results_path = data_access.save_results({'selected_k': 3}, 'results.json')
    frame_path = data_access.save_dataframe(pd.DataFrame({'k': [1, 3]}), 'curve.csv')

    assert json.loads((tmp_path / 'results' / 'results.json').read_text()) == {'selected_k': 3}
    assert results_path.endswith('results.json')
    assert pd.read_csv(frame_path)['k'].tolist() == [1, 3]

import math
from collections import Counter

import numpy as np
import pytest

from knn_framework.core.error_handling.error_handler import (
    InsufficientDataError,
    InvalidConfigurationError,
    ModelTestingError
)
from knn_framework.framework.data_classes import DatasetView, LabeledDataset
from knn_framework.model_testing.cross_validation.cross_validator import CrossValidator


def test_every_index_validated_once_and_trained_c_minus_one_times(cross_validator, blobs_dataset):
    assignment = cross_validator.make_folds(blobs_dataset, n_folds=5, seed=3)

    validated = Counter()
    trained = Counter()
    for fold in range(5):
        validation = assignment.validation_indices(fold)
        training = assignment.training_indices(fold)
        assert len(np.intersect1d(validation, training)) == 0
        validated.update(validation.tolist())
        trained.update(training.tolist())

    assert set(validated) == set(range(100))
    assert all(count == 1 for count in validated.values())
    assert all(count == 4 for count in trained.values())


def test_folds_are_stratified(cross_validator, blobs_dataset):
    assignment = cross_validator.make_folds(blobs_dataset, n_folds=5, seed=3)

    assert assignment.fold_sizes() == (20, 20, 20, 20, 20)
    for fold in range(5):
        assert assignment.validation_view(fold).class_counts() == {'neg': 10, 'pos': 10}


def test_round_robin_continues_across_classes(cross_validator):
    dataset = LabeledDataset(features=[[0.0], [1.0], [2.0], [3.0]], labels=['a', 'a', 'b', 'b'])

    assignment = cross_validator.make_folds(dataset, n_folds=3, seed=0)

    assert sorted(assignment.fold_sizes()) == [1, 1, 2]


def test_odd_classes_still_give_equal_folds(cross_validator):
    dataset = LabeledDataset(features=np.arange(6, dtype=float).reshape(-1, 1),
                             labels=['a', 'a', 'a', 'b', 'b', 'b'])

    assignment = cross_validator.make_folds(dataset, n_folds=2, seed=0)

    assert sorted(assignment.fold_sizes()) == [3, 3]


def test_same_seed_gives_same_folds(cross_validator, blobs_dataset):
    first = cross_validator.make_folds(blobs_dataset, n_folds=4, seed=9)
    second = cross_validator.make_folds(blobs_dataset, n_folds=4, seed=9)

    assert np.array_equal(first.fold_ids, second.fold_ids)


def test_fewer_than_two_folds_is_invalid(cross_validator, blobs_dataset):
    with pytest.raises(InvalidConfigurationError):
        cross_validator.make_folds(blobs_dataset, n_folds=1, seed=0)


def test_more_folds_than_examples_is_insufficient(cross_validator, tiny_dataset):
    with pytest.raises(InsufficientDataError):
        cross_validator.make_folds(tiny_dataset, n_folds=9, seed=0)


def test_run_folds_passes_views_and_keeps_fold_order(cross_validator, blobs_dataset):
    assignment = cross_validator.make_folds(blobs_dataset, n_folds=5, seed=1)
    seen = {}

    def procedure(training_view, validation_view, fold_id):
        assert isinstance(training_view, DatasetView)
        assert isinstance(validation_view, DatasetView)
        seen[fold_id] = (training_view.indices.copy(), validation_view.indices.copy())
        return fold_id / 10

    accuracies = cross_validator.run_folds(blobs_dataset, assignment, procedure)

    assert accuracies == [0.0, 0.1, 0.2, 0.3, 0.4]
    for fold_id, (training, validation) in seen.items():
        assert len(training) + len(validation) == 100
        assert np.array_equal(np.sort(validation), np.sort(assignment.validation_indices(fold_id)))


def test_parallel_folds_match_sequential(config, mock_app_logger, error_handler, blobs_dataset):
    config.core.model_testing_config.n_jobs = 2
    parallel = CrossValidator(config, mock_app_logger, error_handler)
    assignment = parallel.make_folds(blobs_dataset, n_folds=5, seed=1)

    def procedure(training_view, validation_view, fold_id):
        return validation_view.class_counts()['neg'] / len(validation_view)

    accuracies = parallel.run_folds(blobs_dataset, assignment, procedure)

    assert accuracies == [0.5] * 5


def test_run_folds_rejects_assignment_for_other_data(cross_validator, blobs_dataset):
    assignment = cross_validator.make_folds(blobs_dataset.view(np.arange(50)), n_folds=5, seed=1)

    with pytest.raises(InvalidConfigurationError):
        cross_validator.run_folds(blobs_dataset, assignment, lambda train, val, fold: 1.0)


def test_unexpected_procedure_error_is_wrapped(cross_validator, blobs_dataset):
    assignment = cross_validator.make_folds(blobs_dataset, n_folds=2, seed=1)

    def procedure(training_view, validation_view, fold_id):
        raise KeyError("boom")

    with pytest.raises(ModelTestingError):
        cross_validator.run_folds(blobs_dataset, assignment, procedure)


def test_out_of_range_accuracy_is_rejected(cross_validator, blobs_dataset):
    assignment = cross_validator.make_folds(blobs_dataset, n_folds=2, seed=1)

    with pytest.raises(ModelTestingError):
        cross_validator.run_folds(blobs_dataset, assignment, lambda train, val, fold: 1.5)


def test_aggregate_mean_and_standard_error(cross_validator):
    summary = cross_validator.aggregate([0.6, 0.8])

    assert summary.mean_accuracy == pytest.approx(0.7)
    assert summary.standard_error == pytest.approx(np.std([0.6, 0.8], ddof=1) / math.sqrt(2))
    assert summary.standard_error == pytest.approx(0.1)
    assert summary.n_folds == 2


def test_aggregate_of_equal_folds_has_zero_standard_error(cross_validator):
    summary = cross_validator.aggregate([0.75, 0.75, 0.75, 0.75])

    assert summary.mean_accuracy == pytest.approx(0.75)
    assert summary.standard_error == 0.0


def test_aggregate_mean_within_fold_range(cross_validator):
    values = [0.55, 0.9, 0.7, 0.62, 0.81]

    summary = cross_validator.aggregate(values)

    assert min(values) <= summary.mean_accuracy <= max(values)
    assert summary.fold_accuracies == tuple(values)


def test_aggregate_needs_two_values(cross_validator):
    with pytest.raises(InvalidConfigurationError):
        cross_validator.aggregate([0.5])


def test_cross_validate_combines_run_and_aggregate(cross_validator, blobs_dataset):
    assignment = cross_validator.make_folds(blobs_dataset, n_folds=4, seed=2)

    summary = cross_validator.cross_validate(blobs_dataset, assignment, lambda train, val, fold: 0.5 + fold / 10)

    assert summary.fold_accuracies == pytest.approx((0.5, 0.6, 0.7, 0.8))
    assert summary.mean_accuracy == pytest.approx(0.65)

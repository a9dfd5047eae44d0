import json

import numpy as np
import pytest

from knn_framework.core.error_handling.error_handler import (
    InsufficientDataError,
    InvalidConfigurationError
)
from knn_framework.framework.data_classes import LabeledDataset


def test_eight_example_workflow(model_tester, model_testing_config, tiny_dataset):
    model_testing_config.n_splits = 2
    model_testing_config.candidate_ks = [1]

    result = model_tester.run_workflow(tiny_dataset)

    assert result.partition_sizes == {'train': 6, 'test': 2}
    assert result.selected_k == 1
    assert result.holdout.confusion_matrix.total == 2
    assert result.holdout.confusion_matrix.counts.sum(axis=1).tolist() == [1, 1]
    assert result.holdout.accuracy == 1.0


def test_test_group_never_reaches_the_tuner(model_tester, blobs_dataset):
    tuned_views = []
    original = model_tester.optimizer.tune

    def recording(view, *args, **kwargs):
        tuned_views.append(view)
        return original(view, *args, **kwargs)

    model_tester.optimizer.tune = recording
    result = model_tester.run_workflow(blobs_dataset)

    test_indices = {p.index for p in result.holdout.predictions}
    assert len(tuned_views) == 1
    assert test_indices.isdisjoint(tuned_views[0].indices.tolist())
    assert len(tuned_views[0]) + len(test_indices) == len(blobs_dataset)


def test_workflow_summary_is_json_serializable(model_tester, blobs_dataset):
    result = model_tester.run_workflow(blobs_dataset)

    summary = json.loads(json.dumps(result.summarize()))

    assert summary['selected_k'] in [1, 3, 5]
    assert summary['partition_sizes'] == {'train': 76, 'test': 24}
    assert summary['seed'] == 42
    assert len(summary['tuning_curve']) == 3


def test_three_groups_tune_on_all_but_the_last(model_tester, model_testing_config, blobs_dataset):
    model_testing_config.split_proportions = [0.6, 0.2, 0.2]

    result = model_tester.run_workflow(blobs_dataset)

    assert result.partition_sizes == {'train': 60, 'validation': 20, 'test': 20}
    assert result.holdout.n_examples == 20


def test_workflow_is_reproducible(model_tester, blobs_dataset):
    first = model_tester.run_workflow(blobs_dataset)
    second = model_tester.run_workflow(blobs_dataset)

    assert first.tuning_curve.points == second.tuning_curve.points
    assert first.selected_k == second.selected_k
    assert np.array_equal(first.holdout.confusion_matrix.counts, second.holdout.confusion_matrix.counts)


def test_no_valid_candidate_fails_selection(model_tester, model_testing_config, blobs_dataset):
    model_testing_config.candidate_ks = [0, 500]

    with pytest.raises(InvalidConfigurationError):
        model_tester.run_workflow(blobs_dataset)


def test_split_errors_propagate_unchanged(model_tester):
    dataset = LabeledDataset(features=[[0.0], [1.0], [2.0]], labels=['a', 'a', 'b'])

    with pytest.raises(InsufficientDataError):
        model_tester.run_workflow(dataset)

import numpy as np
import pytest

from knn_framework.framework.data_classes import (
    DatasetView,
    FoldAssignment,
    LabeledDataset,
    LabeledExample,
    Partition,
    as_view
)


class TestLabeledDataset:
    def test_defaults_for_classes_and_feature_names(self):
        dataset = LabeledDataset(features=[[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]], labels=['b', 'a', 'b'])

        assert len(dataset) == 3
        assert dataset.n_features == 2
        assert dataset.classes == ('a', 'b')
        assert dataset.feature_names == ('x0', 'x1')
        assert dataset.class_counts() == {'a': 1, 'b': 2}
        assert dataset.label_codes.tolist() == [1, 0, 1]

    def test_getitem_returns_labeled_example(self, tiny_dataset):
        example = tiny_dataset[4]

        assert isinstance(example, LabeledExample)
        assert example.features == (5.0, 3.0)
        assert example.label == 'B'

    def test_backing_arrays_are_read_only(self, tiny_dataset):
        with pytest.raises(ValueError):
            tiny_dataset.features[0, 0] = 99.0
        with pytest.raises(ValueError):
            tiny_dataset.labels[0] = 'B'

    def test_declared_class_set_may_include_unseen_classes(self):
        dataset = LabeledDataset(features=[[0.0], [1.0]], labels=['a', 'b'], classes=('a', 'b', 'c'))

        assert dataset.class_counts() == {'a': 1, 'b': 1, 'c': 0}

    @pytest.mark.parametrize("kwargs", [
        dict(features=[[0.0], [1.0]], labels=['a']),
        dict(features=[[0.0], [np.nan]], labels=['a', 'b']),
        dict(features=[[0.0], [np.inf]], labels=['a', 'b']),
        dict(features=[[0.0], [1.0]], labels=['a', 'z'], classes=('a', 'b')),
        dict(features=[[0.0], [1.0]], labels=['a', 'b'], feature_names=('x', 'y')),
        dict(features=np.empty((0, 2)), labels=[]),
        dict(features=[0.0, 1.0], labels=['a', 'b']),
        dict(features=[[0.0], [1.0]], labels=['a', 'a'], classes=('a', 'a')),
    ])
    def test_invalid_construction_raises(self, kwargs):
        with pytest.raises(ValueError):
            LabeledDataset(**kwargs)


class TestDatasetView:
    def test_view_exposes_only_its_rows(self, tiny_dataset):
        view = tiny_dataset.view([1, 5])

        assert len(view) == 2
        assert view.features.tolist() == [[0.2, 1.1], [5.2, 3.1]]
        assert view.labels.tolist() == ['A', 'B']
        assert view.class_counts() == {'A': 1, 'B': 1}

    def test_restrict_refuses_indices_outside_the_view(self, tiny_dataset):
        view = tiny_dataset.view([0, 1, 2])

        assert view.restrict([2, 0]).indices.tolist() == [2, 0]
        with pytest.raises(ValueError):
            view.restrict([0, 7])

    def test_duplicate_or_out_of_range_indices_are_rejected(self, tiny_dataset):
        with pytest.raises(ValueError):
            DatasetView(tiny_dataset, [0, 0])
        with pytest.raises(ValueError):
            DatasetView(tiny_dataset, [8])

    def test_as_view(self, tiny_dataset):
        view = tiny_dataset.view([0])

        assert as_view(view) is view
        assert len(as_view(tiny_dataset)) == 8
        with pytest.raises(TypeError):
            as_view([[0.0]])


class TestPartition:
    def test_groups_must_cover_source_without_overlap(self, tiny_dataset):
        view = tiny_dataset.view()

        with pytest.raises(ValueError):
            Partition(view, {'train': [0, 1, 2, 3, 4, 5], 'test': [5, 6, 7]})
        with pytest.raises(ValueError):
            Partition(view, {'train': [0, 1, 2], 'test': [3, 4]})

    def test_view_by_group_name(self, tiny_dataset):
        partition = Partition(tiny_dataset.view(), {'train': [0, 1, 4, 5, 6, 7], 'test': [2, 3]})

        assert partition.group_names == ('train', 'test')
        assert partition.sizes() == {'train': 6, 'test': 2}
        assert partition.view('test').labels.tolist() == ['A', 'A']


class TestFoldAssignment:
    def test_training_and_validation_views(self, tiny_dataset):
        assignment = FoldAssignment(tiny_dataset.view(), [0, 1, 0, 1, 0, 1, 0, 1], n_folds=2)

        assert assignment.fold_sizes() == (4, 4)
        assert assignment.validation_indices(0).tolist() == [0, 2, 4, 6]
        assert assignment.training_view(0).indices.tolist() == [1, 3, 5, 7]
        assert assignment.min_training_size() == 4
        assert assignment.as_dict()[3] == 1

    def test_fold_ids_out_of_range_are_rejected(self, tiny_dataset):
        with pytest.raises(ValueError):
            FoldAssignment(tiny_dataset.view(), [0, 1, 2, 0, 1, 2, 0, 1], n_folds=2)

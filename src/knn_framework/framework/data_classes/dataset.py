"""Data classes for labeled datasets and read-only index views over them."""

from dataclasses import dataclass, field
from typing import Any, Dict, NamedTuple, Optional, Sequence, Tuple
import numpy as np


class LabeledExample(NamedTuple):
    """A single feature vector with its class label."""
    features: Tuple[float, ...]
    label: Any


def _read_only(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class LabeledDataset:
    """
    Immutable collection of feature vectors with class labels.

    ``features`` is an (N, D) float matrix aligned with ``feature_names``;
    ``labels`` holds one label per row and every label must belong to
    ``classes``. When ``classes`` is omitted it is the sorted set of labels.
    The backing arrays are copied on construction and made read-only.
    """
    features: np.ndarray
    labels: np.ndarray
    classes: Optional[Tuple[Any, ...]] = None
    feature_names: Optional[Tuple[str, ...]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    label_codes: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        features = np.array(self.features, dtype=float)
        labels = np.array(self.labels)

        if features.ndim != 2:
            raise ValueError(f"features must be a 2D array, got {features.ndim}D array")
        if features.shape[0] < 1:
            raise ValueError("A labeled dataset needs at least one example")
        if labels.ndim != 1 or len(labels) != len(features):
            raise ValueError(
                f"features and labels must have same length. "
                f"Got features: {len(features)}, labels: {labels.shape}"
            )
        if not np.all(np.isfinite(features)):
            raise ValueError("features must be finite numbers")

        classes = tuple(np.unique(labels).tolist()) if self.classes is None else tuple(self.classes)
        if not classes:
            raise ValueError("The class set must not be empty")
        if len(set(classes)) != len(classes):
            raise ValueError(f"Duplicate entries in class set: {classes}")

        class_index = {label: code for code, label in enumerate(classes)}
        unknown = sorted({str(label) for label in labels.tolist() if label not in class_index})
        if unknown:
            raise ValueError(f"Labels not in the declared class set: {unknown}")
        label_codes = np.array([class_index[label] for label in labels.tolist()], dtype=np.intp)

        if self.feature_names is None:
            feature_names = tuple(f"x{i}" for i in range(features.shape[1]))
        else:
            feature_names = tuple(str(name) for name in self.feature_names)
        if len(feature_names) != features.shape[1]:
            raise ValueError(
                f"Got {len(feature_names)} feature names for {features.shape[1]} feature columns"
            )

        object.__setattr__(self, 'features', _read_only(features))
        object.__setattr__(self, 'labels', _read_only(labels))
        object.__setattr__(self, 'classes', classes)
        object.__setattr__(self, 'feature_names', feature_names)
        object.__setattr__(self, 'label_codes', _read_only(label_codes))

    def __len__(self) -> int:
        return self.features.shape[0]

    def __getitem__(self, index: int) -> LabeledExample:
        return LabeledExample(tuple(self.features[index].tolist()), np.asarray(self.labels[index]).item())

    @property
    def n_features(self) -> int:
        return self.features.shape[1]

    def class_counts(self) -> Dict[Any, int]:
        counts = np.bincount(self.label_codes, minlength=len(self.classes))
        return {label: int(count) for label, count in zip(self.classes, counts)}

    def view(self, indices: Optional[Sequence[int]] = None) -> "DatasetView":
        """Return a read-only view over ``indices`` (all rows when omitted)."""
        if indices is None:
            indices = np.arange(len(self))
        return DatasetView(self, indices)


class DatasetView:
    """
    Read-only index set over a LabeledDataset.

    A view only exposes the rows it indexes. Narrower views can be derived
    with ``restrict``, which refuses indices outside the current view, so code
    handed a training view has no path to validation or test rows.
    """

    __slots__ = ('_dataset', '_indices')

    def __init__(self, dataset: LabeledDataset, indices: Sequence[int]):
        indices = np.array(indices, dtype=np.intp).reshape(-1)
        if indices.size and (indices.min() < 0 or indices.max() >= len(dataset)):
            raise ValueError(f"View indices must lie in [0, {len(dataset)})")
        if np.unique(indices).size != indices.size:
            raise ValueError("View indices must be unique")
        self._dataset = dataset
        self._indices = _read_only(indices)

    def __len__(self) -> int:
        return self._indices.size

    def __repr__(self) -> str:
        return f"DatasetView(n_examples={len(self)}, n_features={self.n_features})"

    @property
    def indices(self) -> np.ndarray:
        """Positions of the viewed rows in the underlying dataset."""
        return self._indices

    @property
    def features(self) -> np.ndarray:
        return self._dataset.features[self._indices]

    @property
    def labels(self) -> np.ndarray:
        return self._dataset.labels[self._indices]

    @property
    def label_codes(self) -> np.ndarray:
        return self._dataset.label_codes[self._indices]

    @property
    def classes(self) -> Tuple[Any, ...]:
        return self._dataset.classes

    @property
    def feature_names(self) -> Tuple[str, ...]:
        return self._dataset.feature_names

    @property
    def n_features(self) -> int:
        return self._dataset.n_features

    def class_counts(self) -> Dict[Any, int]:
        counts = np.bincount(self.label_codes, minlength=len(self.classes))
        return {label: int(count) for label, count in zip(self.classes, counts)}

    def restrict(self, indices: Sequence[int]) -> "DatasetView":
        """Return a view over a subset of this view's dataset indices."""
        indices = np.array(indices, dtype=np.intp).reshape(-1)
        outside = np.setdiff1d(indices, self._indices)
        if outside.size:
            raise ValueError(f"Indices outside of this view: {outside.tolist()[:10]}")
        return DatasetView(self._dataset, indices)


def as_view(data) -> DatasetView:
    """Accept either a LabeledDataset or a DatasetView."""
    if isinstance(data, DatasetView):
        return data
    if isinstance(data, LabeledDataset):
        return data.view()
    raise TypeError(f"Expected LabeledDataset or DatasetView, got {type(data).__name__}")

"""Data classes for index partitions and cross-validation fold assignments."""

from typing import Dict, Iterator, Mapping, Sequence, Tuple
import numpy as np

from .dataset import DatasetView


class Partition:
    """
    Disjoint, exhaustive split of a view's indices into named groups.

    Groups hold dataset indices only; ``view(name)`` wraps them in a
    DatasetView restricted to the source the partition was cut from.
    """

    def __init__(self, source: DatasetView, groups: Mapping[str, Sequence[int]]):
        self._source = source
        self._groups: Dict[str, np.ndarray] = {}
        for name, indices in groups.items():
            indices = np.array(indices, dtype=np.intp)
            indices.setflags(write=False)
            self._groups[name] = indices

        combined = np.concatenate(list(self._groups.values())) if self._groups else np.array([], dtype=np.intp)
        if combined.size != len(source) or not np.array_equal(np.sort(combined), np.sort(source.indices)):
            raise ValueError("Partition groups must be disjoint and cover every source index")

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[str]:
        return iter(self._groups)

    def __repr__(self) -> str:
        return f"Partition({self.sizes()})"

    @property
    def group_names(self) -> Tuple[str, ...]:
        return tuple(self._groups)

    def indices(self, name: str) -> np.ndarray:
        return self._groups[name]

    def view(self, name: str) -> DatasetView:
        return self._source.restrict(self._groups[name])

    def sizes(self) -> Dict[str, int]:
        return {name: int(indices.size) for name, indices in self._groups.items()}


class FoldAssignment:
    """
    Maps every index of a source view to exactly one fold id in [0, n_folds).

    ``fold_ids`` is aligned with ``source.indices``. Fold f's validation
    group is every index assigned to f; its training group is the rest.
    """

    def __init__(self, source: DatasetView, fold_ids: Sequence[int], n_folds: int):
        fold_ids = np.array(fold_ids, dtype=np.intp)
        if fold_ids.shape != source.indices.shape:
            raise ValueError("fold_ids must align with the source indices")
        if fold_ids.size and (fold_ids.min() < 0 or fold_ids.max() >= n_folds):
            raise ValueError(f"fold ids must lie in [0, {n_folds})")
        fold_ids.setflags(write=False)
        self._source = source
        self._fold_ids = fold_ids
        self.n_folds = n_folds

    def __repr__(self) -> str:
        return f"FoldAssignment(n_folds={self.n_folds}, fold_sizes={self.fold_sizes()})"

    @property
    def indices(self) -> np.ndarray:
        return self._source.indices

    @property
    def fold_ids(self) -> np.ndarray:
        return self._fold_ids

    def as_dict(self) -> Dict[int, int]:
        """Dataset index -> fold id."""
        return dict(zip(self._source.indices.tolist(), self._fold_ids.tolist()))

    def validation_indices(self, fold: int) -> np.ndarray:
        return self._source.indices[self._fold_ids == fold]

    def training_indices(self, fold: int) -> np.ndarray:
        return self._source.indices[self._fold_ids != fold]

    def validation_view(self, fold: int) -> DatasetView:
        return self._source.restrict(self.validation_indices(fold))

    def training_view(self, fold: int) -> DatasetView:
        return self._source.restrict(self.training_indices(fold))

    def fold_sizes(self) -> Tuple[int, ...]:
        return tuple(np.bincount(self._fold_ids, minlength=self.n_folds).tolist())

    def min_training_size(self) -> int:
        """Smallest training group over all folds."""
        return len(self._source) - max(self.fold_sizes())

"""Data classes for predictions and evaluation metrics."""

from dataclasses import dataclass
from typing import Any, Optional, Tuple
import numpy as np
import pandas as pd


@dataclass(frozen=True)
class PredictionResult:
    """Predicted label for one example, plus its true label when known."""
    predicted: Any
    true: Optional[Any] = None
    index: Optional[int] = None

    @property
    def is_correct(self) -> bool:
        return self.true is not None and self.predicted == self.true


@dataclass(frozen=True, eq=False)
class ConfusionMatrix:
    """Counts of (true label, predicted label) pairs, square over the class set."""
    classes: Tuple[Any, ...]
    counts: np.ndarray

    def __post_init__(self):
        counts = np.array(self.counts, dtype=np.int64)
        if counts.shape != (len(self.classes), len(self.classes)):
            raise ValueError(
                f"counts must be {len(self.classes)}x{len(self.classes)}, got {counts.shape}"
            )
        counts.setflags(write=False)
        object.__setattr__(self, 'classes', tuple(self.classes))
        object.__setattr__(self, 'counts', counts)

    def __getitem__(self, key: Tuple[Any, Any]) -> int:
        true_label, predicted_label = key
        return int(self.counts[self.classes.index(true_label), self.classes.index(predicted_label)])

    @property
    def total(self) -> int:
        return int(self.counts.sum())

    @property
    def correct(self) -> int:
        return int(np.trace(self.counts))

    def to_frame(self) -> pd.DataFrame:
        """Rows are true labels, columns are predicted labels."""
        return pd.DataFrame(
            self.counts,
            index=pd.Index(self.classes, name='true'),
            columns=pd.Index(self.classes, name='predicted'),
        )


@dataclass(frozen=True)
class CrossValidationSummary:
    """Per-fold accuracies in fold-id order with their mean and standard error."""
    fold_accuracies: Tuple[float, ...]
    mean_accuracy: float
    standard_error: float

    @property
    def n_folds(self) -> int:
        return len(self.fold_accuracies)

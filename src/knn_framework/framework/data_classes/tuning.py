"""Data classes for hyperparameter tuning and holdout evaluation results."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple
import pandas as pd

from .metrics import ConfusionMatrix, PredictionResult


class TuningPoint(NamedTuple):
    """One point of the accuracy-vs-k curve."""
    k: int
    mean_accuracy: float
    standard_error: float


@dataclass
class TuningCurve:
    """
    Ordered accuracy-vs-k curve produced by a grid search.

    Iterating yields TuningPoint tuples in candidate order. Candidates that
    failed validation are excluded from the points and listed in
    ``failed_candidates``, keyed by the repr of the raw candidate, with
    their error message.
    """
    points: List[TuningPoint] = field(default_factory=list)
    fold_accuracies: Dict[int, Tuple[float, ...]] = field(default_factory=dict)
    failed_candidates: Dict[str, str] = field(default_factory=dict)
    n_folds: int = 0
    seed: Optional[int] = None

    def __iter__(self) -> Iterator[TuningPoint]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, position: int) -> TuningPoint:
        return self.points[position]

    @property
    def ks(self) -> List[int]:
        return [point.k for point in self.points]

    def best_mean_accuracy(self) -> float:
        return max(point.mean_accuracy for point in self.points)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.points, columns=list(TuningPoint._fields))


@dataclass
class HoldoutResult:
    """Predictions and metrics of a classifier evaluated on one held-out group."""
    k: int
    predictions: List[PredictionResult]
    accuracy: float
    confusion_matrix: ConfusionMatrix

    @property
    def n_examples(self) -> int:
        return len(self.predictions)


@dataclass
class WorkflowResult:
    """Outcome of split -> tune -> select -> test."""
    partition_sizes: Dict[str, int]
    tuning_curve: TuningCurve
    selected_k: int
    holdout: HoldoutResult
    metadata: Dict[str, Any] = field(default_factory=dict)

    def summarize(self) -> Dict[str, Any]:
        return {
            'partition_sizes': self.partition_sizes,
            'n_folds': self.tuning_curve.n_folds,
            'tuning_curve': [point._asdict() for point in self.tuning_curve],
            'failed_candidates': dict(self.tuning_curve.failed_candidates),
            'selected_k': self.selected_k,
            'test_accuracy': self.holdout.accuracy,
            'test_examples': self.holdout.n_examples,
            'confusion_matrix': {
                'classes': [str(label) for label in self.holdout.confusion_matrix.classes],
                'counts': self.holdout.confusion_matrix.counts.tolist(),
            },
            **self.metadata,
        }

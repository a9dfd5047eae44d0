"""Data classes for datasets, partitions, metrics and tuning results."""

from .dataset import (
    LabeledExample,
    LabeledDataset,
    DatasetView,
    as_view
)

from .partition import (
    Partition,
    FoldAssignment
)

from .metrics import (
    PredictionResult,
    ConfusionMatrix,
    CrossValidationSummary
)

from .preprocessing import StandardizerState

from .tuning import (
    TuningPoint,
    TuningCurve,
    HoldoutResult,
    WorkflowResult
)

__all__ = [
    'LabeledExample',
    'LabeledDataset',
    'DatasetView',
    'as_view',
    'Partition',
    'FoldAssignment',
    'PredictionResult',
    'ConfusionMatrix',
    'CrossValidationSummary',
    'StandardizerState',
    'TuningPoint',
    'TuningCurve',
    'HoldoutResult',
    'WorkflowResult'
]

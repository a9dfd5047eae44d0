"""Data classes for fitted preprocessing state."""

from dataclasses import dataclass
from typing import Any, Dict, Tuple
import numpy as np


@dataclass(frozen=True, eq=False)
class StandardizerState:
    """
    Column statistics learned from one training group.

    ``fitted_indices`` records the dataset rows the statistics came from so
    callers can check a state was never fit on evaluation rows.
    """
    mean: np.ndarray
    scale: np.ndarray
    feature_names: Tuple[str, ...]
    fitted_indices: np.ndarray

    def __post_init__(self):
        for name in ('mean', 'scale', 'fitted_indices'):
            array = np.array(getattr(self, name))
            array.setflags(write=False)
            object.__setattr__(self, name, array)

    @property
    def n_samples_seen(self) -> int:
        return int(self.fitted_indices.size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'feature_names': list(self.feature_names),
            'mean': self.mean.tolist(),
            'scale': self.scale.tolist(),
            'n_samples_seen': self.n_samples_seen,
        }

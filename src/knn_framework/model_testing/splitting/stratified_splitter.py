"""
Class-proportional partitioning into two or more groups.

Each class is shuffled on its own and cut at the cumulative proportions, so
every group receives, per class, within one example of its ideal share.
Fractional shares are resolved by largest remainder: every group first gets
the floor of its ideal count and the leftover examples go to the groups with
the largest fractional parts, earlier groups winning ties.

A class must have at least as many examples as there are groups, but that
does not put the class in every group: with proportions (0.9, 0.05, 0.05) a
three-example class rounds to (3, 0, 0).
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union
import numpy as np

from knn_framework.core.app_logging.base_app_logger import BaseAppLogger
from knn_framework.core.error_handling.error_handler import ErrorHandler
from knn_framework.core.error_handling.error_handler_factory import ErrorHandlerFactory
from knn_framework.framework.data_classes import DatasetView, LabeledDataset, Partition, as_view
from knn_framework.framework.randomness import derive_rng, is_valid_seed

from .base_splitter import BaseSplitter

PROPORTION_TOLERANCE = 1e-9


def default_group_names(n_groups: int) -> Tuple[str, ...]:
    if n_groups == 2:
        return ('train', 'test')
    if n_groups == 3:
        return ('train', 'validation', 'test')
    return tuple(f"group_{i}" for i in range(n_groups))


def allocate_counts(n_examples: int, proportions: Sequence[float]) -> np.ndarray:
    """Split ``n_examples`` into integer counts by largest remainder."""
    ideal = n_examples * np.asarray(proportions, dtype=float)
    counts = np.floor(ideal + PROPORTION_TOLERANCE).astype(int)
    leftover = n_examples - int(counts.sum())
    if leftover > 0:
        order = np.argsort(-(ideal - counts), kind='stable')
        counts[order[:leftover]] += 1
    return counts


class StratifiedSplitter(BaseSplitter):
    def __init__(self, app_logger: BaseAppLogger, error_handler: ErrorHandlerFactory):
        self.app_logger = app_logger
        self.error_handler = error_handler

    @staticmethod
    def log_performance(func):
        """Decorator factory for performance logging"""
        def wrapper(*args, **kwargs):
            instance = args[0]
            return instance.app_logger.log_performance(func)(*args, **kwargs)
        return wrapper

    @log_performance
    def split(self,
              dataset: Union[LabeledDataset, DatasetView],
              proportions: Sequence[float],
              seed: int,
              group_names: Optional[Sequence[str]] = None) -> Partition:
        """
        Partition ``dataset`` into class-proportional groups.

        Raises:
            InvalidConfigurationError: For malformed proportions, seed or names.
            InsufficientDataError: If a class has fewer examples than groups.
        """
        view = as_view(dataset)
        proportions = self._validate_proportions(proportions)
        names = self._validate_group_names(group_names, len(proportions))
        self._validate_seed(seed)

        try:
            class_members = self._class_members(view, len(proportions))

            rng = derive_rng(seed)
            allocations: Dict[str, List[np.ndarray]] = {name: [] for name in names}
            for members in class_members:
                shuffled = rng.permutation(members)
                cuts = np.cumsum(allocate_counts(shuffled.size, proportions))[:-1]
                for name, chunk in zip(names, np.split(shuffled, cuts)):
                    allocations[name].append(chunk)

            groups = {
                name: np.sort(np.concatenate(chunks)) if chunks else np.array([], dtype=np.intp)
                for name, chunks in allocations.items()
            }
            partition = Partition(view, groups)
        except ErrorHandler:
            raise
        except Exception as e:
            raise self.error_handler.create_error_handler(
                'model_testing',
                "Error creating stratified split",
                original_error=str(e)
            )

        self.app_logger.structured_log(
            logging.INFO,
            "Stratified split created",
            seed=seed,
            proportions=list(proportions),
            group_sizes=partition.sizes()
        )
        return partition

    def _class_members(self, view: DatasetView, n_groups: int) -> List[np.ndarray]:
        """Indices of each class present in the view, in class order."""
        members = [view.indices[view.label_codes == code] for code in range(len(view.classes))]
        too_small = {
            str(label): int(indices.size)
            for label, indices in zip(view.classes, members)
            if 0 < indices.size < n_groups
        }
        if too_small or len(view) == 0:
            raise self.error_handler.create_error_handler(
                'insufficient_data',
                f"Every class needs at least {n_groups} examples to be split into {n_groups} groups",
                class_counts=too_small,
                n_examples=len(view)
            )
        return [indices for indices in members if indices.size]

    def _validate_proportions(self, proportions: Sequence[float]) -> Tuple[float, ...]:
        try:
            values = tuple(float(p) for p in proportions)
        except (TypeError, ValueError) as e:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Split proportions must be numbers",
                original_error=str(e)
            )
        if len(values) < 2:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "At least two split proportions are required",
                proportions=list(values)
            )
        if not all(np.isfinite(p) and p > 0 for p in values):
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Split proportions must be positive",
                proportions=list(values)
            )
        if not np.isclose(sum(values), 1.0, rtol=0.0, atol=PROPORTION_TOLERANCE):
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Split proportions must sum to 1",
                proportions=list(values),
                total=sum(values)
            )
        return values

    def _validate_group_names(self, group_names: Optional[Sequence[str]], n_groups: int) -> Tuple[str, ...]:
        if group_names is None:
            return default_group_names(n_groups)
        names = tuple(str(name) for name in group_names)
        if len(names) != n_groups or len(set(names)) != n_groups:
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "Group names must be unique and match the number of proportions",
                group_names=list(names),
                n_groups=n_groups
            )
        return names

    def _validate_seed(self, seed: int) -> None:
        if not is_valid_seed(seed):
            raise self.error_handler.create_error_handler(
                'invalid_configuration',
                "A non-negative integer seed is required for reproducible splits",
                seed=repr(seed)
            )

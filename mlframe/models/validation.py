"""K-fold cross-validation.

Folds are built with ``sklearn.model_selection.KFold``: by default a plain
sequential partition of the row ids into ``k`` contiguous blocks, optionally
permuted with a fixed seed. Every fold and its complement are materialized
with ``Dataframe.subset`` so each transient model trains on dense row ids.
"""

import uuid
from contextlib import ExitStack
from typing import TYPE_CHECKING, List, Optional, Tuple, Type

import numpy as np
import structlog
from sklearn.model_selection import KFold

from mlframe.data.dataframe import Dataframe
from mlframe.models.parameters import TrainingParameters, ValidationMetrics
from mlframe.storage.base import DatabaseConfiguration
from mlframe.utils.logging import get_logger, run_context

if TYPE_CHECKING:
    from mlframe.models.base import BaseMLModel

logger = get_logger(__name__)


def kfold_partitions(
    n_samples: int,
    k: int,
    shuffle: bool = False,
    random_seed: Optional[int] = None,
) -> List[Tuple[List[int], List[int]]]:
    """Split the ids ``0..n_samples-1`` into ``k`` (train, test) pairs.

    Test folds are exhaustive and non-overlapping; fold sizes differ by at
    most one.

    Args:
        n_samples: Number of rows
        k: Number of folds
        shuffle: Permute ids before splitting
        random_seed: Seed of the permutation (only used when shuffling)

    Returns:
        List of (train ids, test ids), in fold order

    Raises:
        ValueError: If k < 2 or k > n_samples
    """
    if k < 2:
        raise ValueError(f"k must be >= 2, got {k}")
    if k > n_samples:
        raise ValueError(f"k ({k}) cannot exceed the number of rows ({n_samples})")

    splitter = KFold(
        n_splits=k,
        shuffle=shuffle,
        random_state=random_seed if shuffle else None,
    )
    return [
        (train.tolist(), test.tolist())
        for train, test in splitter.split(np.arange(n_samples))
    ]


class KFoldCrossValidator:
    """Runs k-fold cross-validation for a model class.

    Each fold trains a transient model of ``model_class`` under its own name,
    validates it on the held-out rows and erases it. The caller's own
    knowledge base is never opened.
    """

    def __init__(
        self,
        model_class: Type["BaseMLModel"],
        configuration: DatabaseConfiguration,
        name: str,
    ) -> None:
        """Initialize the validator.

        Args:
            model_class: Concrete BaseMLModel subclass; built as model_class(name, configuration)
            configuration: Storage configuration for subsets and transient models
            name: Base name of the transient models
        """
        self.model_class = model_class
        self.configuration = configuration
        self.name = name

    def cross_validate(
        self,
        data: Dataframe,
        training_parameters: TrainingParameters,
        k: int,
        shuffle: bool = False,
        random_seed: Optional[int] = None,
    ) -> ValidationMetrics:
        """Train and validate on every fold and aggregate the metrics.

        Args:
            data: Full dataframe
            training_parameters: Parameters used for every fold
            k: Number of folds
            shuffle: Permute ids before assigning folds
            random_seed: Seed of the permutation

        Returns:
            Aggregated validation metrics
        """
        partitions = kfold_partitions(len(data), k, shuffle=shuffle, random_seed=random_seed)
        run_tag = uuid.uuid4().hex[:8]

        with run_context():
            return self._cross_validate(data, training_parameters, partitions, run_tag)

    def _cross_validate(
        self,
        data: Dataframe,
        training_parameters: TrainingParameters,
        partitions: List[Tuple[List[int], List[int]]],
        run_tag: str,
    ) -> ValidationMetrics:
        k = len(partitions)
        logger.info(
            "Starting k-fold cross-validation",
            model=self.name,
            k=k,
            n_samples=len(data),
        )

        fold_metrics: List[ValidationMetrics] = []
        for fold, (train_ids, test_ids) in enumerate(partitions):
            fold_name = f"{self.name}_cv{run_tag}_fold{fold}"
            with structlog.contextvars.bound_contextvars(model=self.name, fold=fold):
                fold_metrics.append(
                    self._run_fold(data, train_ids, test_ids, training_parameters, fold_name)
                )

        metrics = self.model_class.aggregate_validation_metrics(fold_metrics)
        logger.info("Cross-validation complete", model=self.name, k=k)
        return metrics

    def _run_fold(
        self,
        data: Dataframe,
        train_ids: List[int],
        test_ids: List[int],
        training_parameters: TrainingParameters,
        fold_name: str,
    ) -> ValidationMetrics:
        # Whatever was created is released, in reverse order, even if a later step fails
        with ExitStack() as cleanup:
            training_data = data.subset(train_ids)
            cleanup.callback(training_data.delete)
            testing_data = data.subset(test_ids)
            cleanup.callback(testing_data.delete)
            model = self.model_class(fold_name, self.configuration)
            cleanup.callback(model.erase)

            model.train(training_data, training_parameters)
            metrics = model.validate(testing_data)
            logger.debug(
                "Fold validated",
                train_size=len(train_ids),
                test_size=len(test_ids),
            )
            return metrics

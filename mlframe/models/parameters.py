"""Base classes of the three blocks stored in a model's knowledge base.

Concrete algorithms subclass them as dataclasses with their own fields::

    @dataclass
    class NaiveBayesParameters(ModelParameters):
        log_priors: Dict[Any, float] = field(default_factory=dict)
"""

import numbers
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Sequence, TypeVar

import numpy as np

VM = TypeVar("VM", bound="ValidationMetrics")


@dataclass
class ModelParameters:
    """Learned state of a model (weights, priors, support vectors...)."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TrainingParameters:
    """Hyperparameters supplied by the caller before training."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ValidationMetrics:
    """Performance metrics produced by validating a model."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def average(cls, metrics_list: Sequence[VM]) -> VM:
        """Combine the metrics of several folds into one.

        Numeric fields are averaged. Any other field (class lists, confusion
        matrices...) is taken from the first fold; algorithms that need a
        different rule override ``BaseMLModel.aggregate_validation_metrics``.

        Args:
            metrics_list: Metrics of each fold, in fold order

        Returns:
            Aggregated metrics of the same class as the inputs

        Raises:
            ValueError: If metrics_list is empty
        """
        if not metrics_list:
            raise ValueError("Cannot aggregate an empty list of validation metrics")

        first = metrics_list[0]
        values: Dict[str, Any] = {}
        for f in fields(first):
            if not f.init:
                continue
            column = [getattr(metrics, f.name) for metrics in metrics_list]
            if all(_is_number(value) for value in column):
                values[f.name] = float(np.mean(column))
            else:
                values[f.name] = getattr(first, f.name)

        return type(first)(**values)


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Number) and not isinstance(value, (bool, np.bool_))

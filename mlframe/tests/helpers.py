"""Test doubles shared by the unit tests."""

import fnmatch
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

from mlframe.models.base import BaseMLModel
from mlframe.models.parameters import ModelParameters, TrainingParameters, ValidationMetrics


@dataclass
class MajorityParameters(ModelParameters):
    """Label frequencies seen during training."""

    label_counts: Dict[Any, int] = field(default_factory=dict)
    majority_label: Any = None


@dataclass
class MajorityTrainingParameters(TrainingParameters):
    """Additive smoothing applied to the label counts."""

    smoothing: float = 0.0


@dataclass
class AccuracyMetrics(ValidationMetrics):
    """Share of rows whose label equals the prediction."""

    accuracy: float = 0.0
    n_samples: int = 0
    model_label: Any = None


class MajorityClassModel(BaseMLModel):
    """Predicts the most frequent training label for every row."""

    training_parameters_class = MajorityTrainingParameters
    validation_metrics_class = AccuracyMetrics

    def fit(self, training_data, training_parameters):
        counts = Counter(record.label for record in training_data)
        majority_label = counts.most_common(1)[0][0] if counts else None
        return MajorityParameters(label_counts=dict(counts), majority_label=majority_label)

    def predict_dataset(self, dataset):
        parameters = self.knowledge_base.model_parameters
        smoothing = self.knowledge_base.training_parameters.smoothing
        total = sum(parameters.label_counts.values()) + smoothing * len(parameters.label_counts)
        probabilities = {
            label: (count + smoothing) / total
            for label, count in parameters.label_counts.items()
        }
        for rid in dataset.index():
            dataset.set_predictions(rid, parameters.majority_label, probabilities)

    def validate_model(self, dataset):
        majority_label = self.knowledge_base.model_parameters.majority_label
        correct = sum(1 for record in dataset if record.label == majority_label)
        return AccuracyMetrics(
            accuracy=correct / len(dataset),
            n_samples=len(dataset),
            model_label=majority_label,
        )


class FakeRedis:
    """Dict-backed stand-in for the subset of redis.Redis used by RedisMap."""

    def __init__(self) -> None:
        self.hashes: Dict[str, Dict[bytes, bytes]] = {}
        self.closed = False

    def hget(self, name: str, key: bytes) -> Optional[bytes]:
        return self.hashes.get(name, {}).get(key)

    def hset(self, name: str, key: bytes, value: bytes) -> int:
        bucket = self.hashes.setdefault(name, {})
        created = key not in bucket
        bucket[key] = value
        return int(created)

    def hdel(self, name: str, *keys: bytes) -> int:
        bucket = self.hashes.get(name, {})
        removed = sum(1 for key in keys if bucket.pop(key, None) is not None)
        if not bucket:
            self.hashes.pop(name, None)
        return removed

    def hexists(self, name: str, key: bytes) -> bool:
        return key in self.hashes.get(name, {})

    def hlen(self, name: str) -> int:
        return len(self.hashes.get(name, {}))

    def hkeys(self, name: str) -> list:
        return list(self.hashes.get(name, {}))

    def delete(self, *names: str) -> int:
        return sum(1 for name in names if self.hashes.pop(name, None) is not None)

    def scan_iter(self, match: str = "*") -> Iterator[str]:
        # Redis patterns escape with a backslash, fnmatch with a one-character class
        pattern = re.sub(r"\\(.)", r"[\1]", match)
        return iter([name for name in list(self.hashes) if fnmatch.fnmatchcase(name, pattern)])

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        self.closed = True

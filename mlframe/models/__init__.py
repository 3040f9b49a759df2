"""Model lifecycle: knowledge base, base model and cross-validation."""

from mlframe.models.base import BaseMLModel, ModelState
from mlframe.models.knowledge_base import KnowledgeBase
from mlframe.models.parameters import ModelParameters, TrainingParameters, ValidationMetrics
from mlframe.models.validation import KFoldCrossValidator, kfold_partitions

__all__ = [
    "BaseMLModel",
    "ModelState",
    "KnowledgeBase",
    "ModelParameters",
    "TrainingParameters",
    "ValidationMetrics",
    "KFoldCrossValidator",
    "kfold_partitions",
]

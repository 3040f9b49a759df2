"""Knowledge base: the persisted state of one model.

The knowledge base keeps three blocks (model parameters, training
parameters, validation metrics) in a map of the model's own connector
session. The blocks are always saved and loaded together.
"""

from typing import Optional

from mlframe.exceptions import KnowledgeBaseError, ModelNotTrainedError
from mlframe.models.parameters import ModelParameters, TrainingParameters, ValidationMetrics
from mlframe.storage.base import DatabaseConfiguration
from mlframe.utils.logging import get_logger

logger = get_logger(__name__)

KNOWLEDGE_BASE_MAP = "knowledge_base"
MODEL_PARAMETERS_KEY = "model_parameters"
TRAINING_PARAMETERS_KEY = "training_parameters"
VALIDATION_METRICS_KEY = "validation_metrics"


class KnowledgeBase:
    """Persistence unit of a model, keyed by the model name.

    Attributes:
        name: Model name, also the connector database name
        configuration: Storage configuration
        connector: Connector session (algorithms may allocate extra maps on it)
        model_parameters: Learned state, None until fitted or loaded
        training_parameters: Hyperparameters, None until trained or loaded
        validation_metrics: Metrics, None until set by a training or validation pass
    """

    def __init__(self, name: str, configuration: DatabaseConfiguration) -> None:
        self.name = name
        self.configuration = configuration
        self.connector = configuration.get_connector(name)
        self._store = self.connector.get_or_create_map(KNOWLEDGE_BASE_MAP)
        self._closed = False
        self._erased = False

        self.model_parameters: Optional[ModelParameters] = None
        self.training_parameters: Optional[TrainingParameters] = None
        self.validation_metrics: Optional[ValidationMetrics] = None

    @property
    def is_loaded(self) -> bool:
        """True once parameters are in memory (after fitting or load())."""
        return self.model_parameters is not None

    def exists(self) -> bool:
        """Check whether a knowledge base was persisted under this name."""
        self._check_usable()
        return MODEL_PARAMETERS_KEY in self._store

    def save(self) -> None:
        """Persist all three blocks, overwriting any previous state.

        Raises:
            KnowledgeBaseError: If there are no model parameters to save
        """
        self._check_usable()
        if self.model_parameters is None:
            raise KnowledgeBaseError(
                f"Knowledge base '{self.name}' has no model parameters to save"
            )

        self._store[TRAINING_PARAMETERS_KEY] = self.training_parameters
        self._store[VALIDATION_METRICS_KEY] = self.validation_metrics
        self._store[MODEL_PARAMETERS_KEY] = self.model_parameters
        logger.debug("Knowledge base saved", model_name=self.name)

    def load(self) -> None:
        """Read all three blocks from storage, replacing the in-memory copy.

        Raises:
            ModelNotTrainedError: If nothing was persisted under this name
        """
        if not self.exists():
            logger.error("Knowledge base not found", model_name=self.name)
            raise ModelNotTrainedError(
                f"Model '{self.name}' has no persisted knowledge base; train it first"
            )

        self.model_parameters = self._store[MODEL_PARAMETERS_KEY]
        self.training_parameters = self._store.get(TRAINING_PARAMETERS_KEY)
        self.validation_metrics = self._store.get(VALIDATION_METRICS_KEY)
        logger.debug("Knowledge base loaded", model_name=self.name)

    def get_validation_metrics(self) -> Optional[ValidationMetrics]:
        """Return the validation metrics, loading the knowledge base if needed."""
        if not self.is_loaded:
            self.load()
        return self.validation_metrics

    def set_validation_metrics(self, validation_metrics: ValidationMetrics) -> None:
        """Replace the validation metrics and persist immediately.

        Raises:
            ModelNotTrainedError: If nothing was persisted under this name
        """
        if not self.is_loaded:
            self.load()
        self.validation_metrics = validation_metrics
        self.save()

    def erase(self) -> None:
        """Drop the persisted state and close the session. No-op once erased.

        A closed knowledge base is reopened for the drop.
        """
        if self._erased:
            return
        if self._closed:
            self.connector = self.configuration.get_connector(self.name)
            self._store = self.connector.get_or_create_map(KNOWLEDGE_BASE_MAP)
        self.connector.drop_map(KNOWLEDGE_BASE_MAP, self._store)
        self.connector.drop_database()
        self.connector.close()
        self._closed = True
        self._erased = True
        self.model_parameters = None
        self.training_parameters = None
        self.validation_metrics = None
        logger.info("Knowledge base erased", model_name=self.name)

    def close(self) -> None:
        """Close the session, keeping the persisted state."""
        self.connector.close()
        self._closed = True

    def _check_usable(self) -> None:
        if self._closed:
            raise KnowledgeBaseError(f"Knowledge base '{self.name}' is closed or erased")

"""Base model interface for all learning algorithms.

Defines the train -> save -> load -> predict/validate lifecycle shared by every
algorithm. Concrete algorithms implement three hooks (``fit``,
``predict_dataset``, ``validate_model``); everything else is orchestrated here.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Sequence, Type

from mlframe.config.settings import get_settings
from mlframe.data.dataframe import Dataframe
from mlframe.models.knowledge_base import KnowledgeBase
from mlframe.models.parameters import ModelParameters, TrainingParameters, ValidationMetrics
from mlframe.models.validation import KFoldCrossValidator
from mlframe.storage.base import DatabaseConfiguration
from mlframe.storage.factory import build_configuration
from mlframe.utils.logging import get_logger, run_context

logger = get_logger(__name__)


class ModelState(str, Enum):
    """Lifecycle state of a model."""

    UNTRAINED = "untrained"
    TRAINED = "trained"


class BaseMLModel(ABC):
    """Abstract base class for all learning algorithms.

    Subclasses set ``training_parameters_class`` and
    ``validation_metrics_class`` and implement the hooks. Their constructor
    must accept ``(name, configuration)`` because cross-validation builds
    transient instances that way.

    Attributes:
        name: Model name; the knowledge base is persisted under it
        configuration: Storage configuration
        knowledge_base: Persisted state of the model
        state: UNTRAINED until a knowledge base exists under ``name``
    """

    training_parameters_class: Type[TrainingParameters] = TrainingParameters
    validation_metrics_class: Type[ValidationMetrics] = ValidationMetrics

    def __init__(
        self,
        name: str,
        configuration: Optional[DatabaseConfiguration] = None,
    ) -> None:
        """Open the model's knowledge base.

        Args:
            name: Model name
            configuration: Storage configuration (built from settings if None)
        """
        self.name = name
        self.configuration = configuration or build_configuration()
        self.knowledge_base = KnowledgeBase(name, self.configuration)
        self.state = (
            ModelState.TRAINED if self.knowledge_base.exists() else ModelState.UNTRAINED
        )

        logger.info(
            "Model initialized",
            model_class=type(self).__name__,
            model_name=name,
            state=self.state.value,
        )

    # Hooks

    @abstractmethod
    def fit(
        self,
        training_data: Dataframe,
        training_parameters: TrainingParameters,
    ) -> ModelParameters:
        """Learn the model parameters from the training data.

        Implementations may also set ``self.knowledge_base.validation_metrics``
        and may allocate large maps on ``self.knowledge_base.connector``.

        Args:
            training_data: Training dataframe (dense row ids)
            training_parameters: Hyperparameters

        Returns:
            Learned model parameters
        """
        pass

    @abstractmethod
    def predict_dataset(self, dataset: Dataframe) -> None:
        """Store predictions for every row of ``dataset``.

        Use ``dataset.set_predictions()`` so the metadata is left untouched.
        The knowledge base is loaded when this is called.

        Args:
            dataset: Rows to score, updated in place
        """
        pass

    @abstractmethod
    def validate_model(self, dataset: Dataframe) -> ValidationMetrics:
        """Compute validation metrics of the loaded model on ``dataset``.

        Args:
            dataset: Labelled rows

        Returns:
            Validation metrics
        """
        pass

    @classmethod
    def aggregate_validation_metrics(
        cls, metrics_list: Sequence[ValidationMetrics]
    ) -> ValidationMetrics:
        """Combine per-fold metrics. Defaults to averaging numeric fields."""
        return cls.validation_metrics_class.average(metrics_list)

    # Lifecycle

    def train(
        self,
        training_data: Dataframe,
        training_parameters: Optional[TrainingParameters] = None,
    ) -> None:
        """Fit the model and persist its knowledge base.

        Args:
            training_data: Training dataframe
            training_parameters: Hyperparameters (defaults of
                ``training_parameters_class`` if None)

        Raises:
            TypeError: If training_parameters has the wrong type
        """
        if training_parameters is None:
            training_parameters = self.training_parameters_class()
        elif not isinstance(training_parameters, self.training_parameters_class):
            raise TypeError(
                f"training_parameters must be {self.training_parameters_class.__name__}, "
                f"got {type(training_parameters).__name__}"
            )

        with run_context():
            self._fit_and_save(training_data, training_parameters)

    def _fit_and_save(
        self,
        training_data: Dataframe,
        training_parameters: TrainingParameters,
    ) -> None:
        logger.info(
            "Starting training",
            model_name=self.name,
            n_samples=len(training_data),
            n_features=training_data.column_count,
        )

        knowledge_base = self.knowledge_base
        previous_state = (
            knowledge_base.model_parameters,
            knowledge_base.training_parameters,
            knowledge_base.validation_metrics,
        )
        knowledge_base.training_parameters = training_parameters
        knowledge_base.validation_metrics = None

        try:
            model_parameters = self.fit(training_data, training_parameters)
        except Exception as e:
            # The three blocks must keep describing the last successful fit
            (
                knowledge_base.model_parameters,
                knowledge_base.training_parameters,
                knowledge_base.validation_metrics,
            ) = previous_state
            logger.error(
                "Training failed",
                model_name=self.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        knowledge_base.model_parameters = model_parameters
        knowledge_base.save()
        self.state = ModelState.TRAINED

        logger.info("Training complete", model_name=self.name)

    def predict(self, new_data: Dataframe) -> None:
        """Load the knowledge base and store predictions in ``new_data``.

        Raises:
            ModelNotTrainedError: If no knowledge base was persisted
        """
        self.knowledge_base.load()
        self.predict_dataset(new_data)
        logger.info("Prediction complete", model_name=self.name, n_samples=len(new_data))

    def validate(self, testing_data: Dataframe) -> ValidationMetrics:
        """Load the knowledge base and validate against ``testing_data``.

        The metrics are returned, not stored; call ``set_validation_metrics``
        to persist them.

        Raises:
            ModelNotTrainedError: If no knowledge base was persisted
        """
        self.knowledge_base.load()
        validation_metrics = self.validate_model(testing_data)
        logger.info("Validation complete", model_name=self.name, n_samples=len(testing_data))
        return validation_metrics

    def k_fold_cross_validation(
        self,
        data: Dataframe,
        training_parameters: Optional[TrainingParameters] = None,
        k: Optional[int] = None,
        shuffle: Optional[bool] = None,
        random_seed: Optional[int] = None,
    ) -> ValidationMetrics:
        """Estimate the performance of this algorithm with k-fold cross-validation.

        This model's own knowledge base is not touched.

        Args:
            data: Full dataframe
            training_parameters: Hyperparameters for every fold
            k: Number of folds (settings.cv_folds if None)
            shuffle: Permute ids before assigning folds (settings.cv_shuffle if None)
            random_seed: Permutation seed (settings.cv_random_seed if None)

        Returns:
            Aggregated validation metrics
        """
        settings = get_settings()
        if training_parameters is None:
            training_parameters = self.training_parameters_class()

        validator = KFoldCrossValidator(type(self), self.configuration, self.name)
        return validator.cross_validate(
            data,
            training_parameters,
            k=k if k is not None else settings.cv_folds,
            shuffle=shuffle if shuffle is not None else settings.cv_shuffle,
            random_seed=random_seed if random_seed is not None else settings.cv_random_seed,
        )

    def get_validation_metrics(self) -> Optional[ValidationMetrics]:
        """Return the persisted validation metrics."""
        return self.knowledge_base.get_validation_metrics()

    def set_validation_metrics(self, validation_metrics: ValidationMetrics) -> None:
        """Store validation metrics (e.g. from validate()) and persist them."""
        self.knowledge_base.set_validation_metrics(validation_metrics)
        logger.info("Validation metrics updated", model_name=self.name)

    def erase(self) -> None:
        """Delete the persisted knowledge base. The instance can no longer be used."""
        self.knowledge_base.erase()

    def close(self) -> None:
        """Release the storage session, keeping the persisted knowledge base."""
        self.knowledge_base.close()

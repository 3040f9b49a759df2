"""Record: one row of a Dataframe."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class Record:
    """A single observation: features, label and optional predictions.

    Records are values. Once stored in a Dataframe they are replaced whole,
    never mutated. Equality only looks at ``features`` and ``label``; the
    prediction fields are ignored so a record still matches its source after
    a model has scored it.

    Attributes:
        features: Mapping from column identifier to value
        label: Ground-truth response value (None when unknown)
        predicted_label: Label assigned by a model
        predicted_probabilities: Mapping from candidate label to probability
    """

    features: Mapping[Any, Any] = field(default_factory=dict)
    label: Any = None
    predicted_label: Any = field(default=None, compare=False)
    predicted_probabilities: Optional[Mapping[Any, float]] = field(
        default=None, compare=False
    )

    # Features are dicts, so records are not hashable
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", dict(self.features))
        if self.predicted_probabilities is not None:
            object.__setattr__(
                self, "predicted_probabilities", dict(self.predicted_probabilities)
            )

    def with_features(self, features: Mapping[Any, Any]) -> "Record":
        """Return a copy holding different features (label and predictions kept)."""
        return replace(self, features=features)

    def with_predictions(
        self,
        predicted_label: Any,
        predicted_probabilities: Optional[Mapping[Any, float]] = None,
    ) -> "Record":
        """Return a copy holding the given predictions."""
        return replace(
            self,
            predicted_label=predicted_label,
            predicted_probabilities=predicted_probabilities,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert record to dictionary."""
        return {
            "features": dict(self.features),
            "label": self.label,
            "predicted_label": self.predicted_label,
            "predicted_probabilities": (
                dict(self.predicted_probabilities)
                if self.predicted_probabilities is not None
                else None
            ),
        }

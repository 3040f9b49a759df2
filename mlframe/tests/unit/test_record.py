"""Unit tests for Record."""

import dataclasses

import pytest

from mlframe.data.record import Record


@pytest.mark.unit
class TestRecord:
    """Tests for Record value semantics."""

    def test_defaults(self) -> None:
        """Test a bare record has no features, label or predictions."""
        record = Record()

        assert record.features == {}
        assert record.label is None
        assert record.predicted_label is None
        assert record.predicted_probabilities is None

    def test_immutable(self) -> None:
        """Test attributes cannot be reassigned."""
        record = Record({"a": 1}, "x")

        with pytest.raises(dataclasses.FrozenInstanceError):
            record.label = "y"

    def test_features_copied(self) -> None:
        """Test the record does not alias the caller's mapping."""
        features = {"a": 1}
        record = Record(features, "x")

        features["a"] = 2

        assert record.features == {"a": 1}

    def test_equality_ignores_predictions(self) -> None:
        """Test predictions do not take part in equality."""
        record = Record({"a": 1}, "x")
        scored = record.with_predictions("y", {"x": 0.2, "y": 0.8})

        assert scored == record
        assert scored.predicted_label == "y"
        assert record.predicted_label is None

    def test_equality_uses_features_and_label(self) -> None:
        """Test different features or labels are not equal."""
        assert Record({"a": 1}, "x") != Record({"a": 1}, "y")
        assert Record({"a": 1}, "x") != Record({"a": 2}, "x")

    def test_not_hashable(self) -> None:
        """Test records cannot be used as set members."""
        with pytest.raises(TypeError):
            {Record({"a": 1})}

    def test_with_features_keeps_label_and_predictions(self) -> None:
        """Test with_features only swaps the features."""
        record = Record({"a": 1, "b": 2}, "x", predicted_label="x")

        updated = record.with_features({"a": 1})

        assert updated.features == {"a": 1}
        assert updated.label == "x"
        assert updated.predicted_label == "x"
        assert record.features == {"a": 1, "b": 2}

    def test_to_dict(self) -> None:
        """Test conversion to a plain dictionary."""
        record = Record({"a": 1}, True, predicted_label=False, predicted_probabilities={False: 1.0})

        assert record.to_dict() == {
            "features": {"a": 1},
            "label": True,
            "predicted_label": False,
            "predicted_probabilities": {False: 1.0},
        }

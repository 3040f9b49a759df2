"""Unit tests for DataType and type inference."""

import numpy as np
import pytest

from mlframe.data.types import DataType, infer_data_type


@pytest.mark.unit
class TestInferDataType:
    """Tests for infer_data_type."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, DataType.BOOLEAN),
            (np.bool_(False), DataType.BOOLEAN),
            (np.int8(3), DataType.ORDINAL),
            (np.int16(-2), DataType.ORDINAL),
            (np.uint8(200), DataType.ORDINAL),
            (1, DataType.NUMERICAL),
            (2.5, DataType.NUMERICAL),
            (np.float32(0.1), DataType.NUMERICAL),
            (np.int64(7), DataType.NUMERICAL),
            ("red", DataType.CATEGORICAL),
            (("a", 1), DataType.CATEGORICAL),
        ],
    )
    def test_inference(self, value, expected) -> None:
        """Test each kind of value maps to its category."""
        assert infer_data_type(value) is expected

    def test_missing_value(self) -> None:
        """Test None has no type."""
        assert infer_data_type(None) is None


@pytest.mark.unit
class TestParse:
    """Tests for DataType.parse."""

    @pytest.mark.parametrize("text", ["yes", "TRUE", " 1 ", "t", "Y"])
    def test_boolean_true(self, text) -> None:
        """Test accepted spellings of true."""
        assert DataType.BOOLEAN.parse(text) is True

    @pytest.mark.parametrize("text", ["no", "False", "0", "f", "N"])
    def test_boolean_false(self, text) -> None:
        """Test accepted spellings of false."""
        assert DataType.BOOLEAN.parse(text) is False

    def test_boolean_unknown(self) -> None:
        """Test unrecognized boolean text is missing."""
        assert DataType.BOOLEAN.parse("maybe") is None

    def test_numbers(self) -> None:
        """Test ordinal and numerical parsing."""
        assert DataType.ORDINAL.parse("4") == 4
        assert DataType.ORDINAL.parse("-2") == -2
        assert DataType.NUMERICAL.parse("1e3") == 1000.0

    def test_invalid_number(self) -> None:
        """Test unparsable numbers raise ValueError."""
        with pytest.raises(ValueError):
            DataType.NUMERICAL.parse("abc")

    @pytest.mark.parametrize("text", ["2.7", "4.0", "1e3"])
    def test_ordinal_rejects_fractions(self, text) -> None:
        """Test ordinal text must be an integer literal."""
        with pytest.raises(ValueError):
            DataType.ORDINAL.parse(text)

    def test_categorical_stripped(self) -> None:
        """Test categorical text is stripped."""
        assert DataType.CATEGORICAL.parse("  Paris ") == "Paris"

    @pytest.mark.parametrize("data_type", list(DataType))
    def test_empty(self, data_type) -> None:
        """Test empty and missing cells parse to None."""
        assert data_type.parse("") is None
        assert data_type.parse("   ") is None
        assert data_type.parse(None) is None

    def test_string_values(self) -> None:
        """Test DataType members compare to their string values."""
        assert DataType("numerical") is DataType.NUMERICAL
        assert DataType.ORDINAL == "ordinal"

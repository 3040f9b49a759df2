"""Value categories of dataframe columns and the rules that infer them."""

import numbers
from enum import Enum
from typing import Any, Optional

import numpy as np

_TRUE_STRINGS = frozenset({"1", "true", "yes", "y", "t"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "n", "f"})


class DataType(str, Enum):
    """Category of a feature column or of the label."""

    BOOLEAN = "boolean"
    ORDINAL = "ordinal"
    NUMERICAL = "numerical"
    CATEGORICAL = "categorical"

    def parse(self, text: Optional[str]) -> Any:
        """Convert raw text (e.g. a CSV cell) into a value of this category.

        Args:
            text: Raw string value

        Returns:
            Parsed value, or None for empty input

        Raises:
            ValueError: If an ordinal or numerical value cannot be parsed
        """
        if text is None:
            return None
        text = text.strip()
        if not text:
            return None

        if self is DataType.BOOLEAN:
            lowered = text.lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
            return None
        if self is DataType.ORDINAL:
            return int(text)
        if self is DataType.NUMERICAL:
            return float(text)
        return text


def infer_data_type(value: Any) -> Optional[DataType]:
    """Infer the category of a single value.

    Booleans are checked before numbers since ``bool`` is an ``int``
    subclass. Small fixed-width integers are ordinal, every other number is
    numerical and anything else is categorical.

    Args:
        value: Scalar value of a feature or label

    Returns:
        DataType of the value, or None for a missing value
    """
    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)):
        return DataType.BOOLEAN
    if isinstance(value, (np.int8, np.int16, np.uint8)):
        return DataType.ORDINAL
    if isinstance(value, numbers.Number):
        return DataType.NUMERICAL
    return DataType.CATEGORICAL

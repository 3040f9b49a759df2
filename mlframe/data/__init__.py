"""Dataframe, Record and the value categories of their columns."""

from mlframe.data.builder import parse_csv, parse_text_files
from mlframe.data.dataframe import Dataframe, UnsupportedRemovalMixin
from mlframe.data.record import Record
from mlframe.data.types import DataType, infer_data_type

__all__ = [
    "Dataframe",
    "UnsupportedRemovalMixin",
    "Record",
    "DataType",
    "infer_data_type",
    "parse_csv",
    "parse_text_files",
]

"""Build Dataframes from CSV and plain-text files.

Both builders abort on any I/O failure: the partially built Dataframe is
deleted and a DatasetIOError is raised from the original exception.
"""

from pathlib import Path
from typing import IO, Any, Callable, Dict, Mapping, Optional, Union

import pandas as pd

from mlframe.config.settings import get_settings
from mlframe.data.dataframe import Dataframe
from mlframe.data.record import Record
from mlframe.data.types import DataType
from mlframe.exceptions import DatasetIOError
from mlframe.storage.base import DatabaseConfiguration
from mlframe.utils.logging import get_logger

logger = get_logger(__name__)

FeatureExtractor = Callable[[str], Mapping[Any, Any]]

CSV_CHUNK_SIZE = 10_000

# ValueError also covers cells that do not parse as their declared type
_IO_ERRORS = (
    OSError,
    UnicodeDecodeError,
    pd.errors.ParserError,
    pd.errors.EmptyDataError,
    ValueError,
)


def parse_csv(
    source: Union[str, Path, IO[str]],
    label_column: Optional[str],
    column_types: Mapping[str, DataType],
    configuration: DatabaseConfiguration,
    delimiter: Optional[str] = None,
    quotechar: Optional[str] = None,
) -> Dataframe:
    """Build a Dataframe from a CSV file with a header row.

    Column types are known up front, so records are stored without running
    type inference and the metadata is set directly from ``column_types``.
    Rows whose field count differs from the header are skipped.

    Args:
        source: Path or open text stream
        label_column: Header name of the label column (None for unlabelled data)
        column_types: Header name -> DataType for every column to load
        configuration: Storage configuration for the new Dataframe
        delimiter: Field delimiter (defaults to settings.csv_delimiter)
        quotechar: Quote character (defaults to settings.csv_quotechar)

    Returns:
        Populated Dataframe

    Raises:
        DatasetIOError: If the file cannot be read or parsed
    """
    settings = get_settings()
    delimiter = delimiter or settings.csv_delimiter
    quotechar = quotechar or settings.csv_quotechar

    logger.info("Parsing CSV file", label_column=label_column, columns=len(column_types))

    label_type = column_types.get(label_column) if label_column is not None else None
    feature_types: Dict[str, DataType] = {
        column: data_type
        for column, data_type in column_types.items()
        if column != label_column
    }
    dataframe = Dataframe(configuration, label_type=label_type, column_types=feature_types)

    skipped = 0

    def _skip_long_row(fields: list) -> None:
        nonlocal skipped
        skipped += 1
        logger.warning("Skipping row because its size does not match the header", fields=len(fields))
        return None

    try:
        # The header row is read as data so that a long first row is never
        # taken for an index column
        reader = pd.read_csv(
            source,
            sep=delimiter,
            quotechar=quotechar,
            header=None,
            dtype=str,
            keep_default_na=False,
            engine="python",
            on_bad_lines=_skip_long_row,
            chunksize=CSV_CHUNK_SIZE,
        )
        header: Optional[list] = None
        with reader:
            for chunk in reader:
                if header is None:
                    header = chunk.iloc[0].tolist()
                    chunk = chunk.iloc[1:]
                    if label_column is not None and label_column not in header:
                        logger.warning("The file is missing the label column", label_column=label_column)
                    columns = [column for column in column_types if column in header]
                chunk = chunk.set_axis(header, axis=1)

                # Short rows are padded with NaN; empty cells stay "" because of keep_default_na
                short_rows = chunk.isna().any(axis=1)
                if short_rows.any():
                    skipped += int(short_rows.sum())
                    logger.warning(
                        "Skipping rows because their size does not match the header",
                        rows=int(short_rows.sum()),
                    )
                    chunk = chunk[~short_rows]

                for row in chunk.to_dict(orient="records"):
                    label = None
                    features: Dict[str, Any] = {}
                    for column in columns:
                        value = column_types[column].parse(row[column])
                        if column == label_column:
                            label = value
                        else:
                            features[column] = value
                    dataframe._add(Record(features, label))
    except _IO_ERRORS as e:
        logger.error("Failed to parse CSV file", error=str(e), error_type=type(e).__name__)
        dataframe.delete()
        raise DatasetIOError(f"Failed to parse CSV file: {e}") from e

    logger.info("CSV file parsed", rows=len(dataframe), skipped_rows=skipped)
    return dataframe


def parse_text_files(
    text_files: Mapping[Any, Union[str, Path]],
    extractor: FeatureExtractor,
    configuration: DatabaseConfiguration,
    encoding: str = "utf-8",
) -> Dataframe:
    """Build a Dataframe from one text file per class label.

    Every line of a file becomes one Record whose features are produced by
    ``extractor`` and whose label is the file's key. Use a ``None`` key to
    load text of unknown class.

    Args:
        text_files: Class label -> path of a file with one example per line
        extractor: Turns a line of text into a feature mapping
        configuration: Storage configuration for the new Dataframe
        encoding: File encoding

    Returns:
        Populated Dataframe

    Raises:
        DatasetIOError: If any file cannot be read
    """
    dataframe = Dataframe(configuration)

    for label, path in text_files.items():
        logger.info("Parsing text file", label=label, path=str(path))
        try:
            with open(path, "r", encoding=encoding) as f:
                for line in f:
                    dataframe.append(Record(extractor(line.rstrip("\r\n")), label))
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read text file", path=str(path), error=str(e))
            dataframe.delete()
            raise DatasetIOError(f"Failed to read {path}: {e}") from e

    logger.info("Text files parsed", rows=len(dataframe), labels=len(text_files))
    return dataframe

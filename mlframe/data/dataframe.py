"""Storage-backed dataframe of Records.

Every learning algorithm takes a Dataframe as input. Rows and column
metadata live in maps handed out by a StorageConnector, so the memory
footprint of a Dataframe does not grow with its row count.

Row ids are the dense range ``0..len(df)-1``. Matrix based algorithms use
a row id directly as a matrix row index, which is why rows can be appended
or replaced but never removed.
"""

import operator
import uuid
from collections.abc import Collection
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, NoReturn, Optional, Tuple

import pandas as pd

from mlframe.data.record import Record
from mlframe.data.types import DataType, infer_data_type
from mlframe.exceptions import (
    DataframeDeletedError,
    RecordIndexError,
    UnsupportedOperationError,
)
from mlframe.storage.base import DatabaseConfiguration
from mlframe.utils.logging import get_logger

logger = get_logger(__name__)

RECORDS_MAP = "tmp_records"
COLUMN_TYPES_MAP = "tmp_column_types"

_UNSEEN = object()


class UnsupportedRemovalMixin:
    """Row removal surface of a Dataframe. Every method always raises.

    The methods exist so that code written against a mutable collection
    fails loudly instead of silently leaving a gap in the row ids.
    """

    def _reject_removal(self, operation: str) -> NoReturn:
        logger.warning("Rejected row removal", operation=operation)
        raise UnsupportedOperationError(
            f"{operation}() is not supported: Dataframe row ids must stay contiguous"
        )

    def remove(self, record: Record) -> None:
        """NOT SUPPORTED: remove the first record equal to ``record``."""
        self._reject_removal("remove")

    def remove_all(self, records: Iterable[Record]) -> None:
        """NOT SUPPORTED: remove every record contained in ``records``."""
        self._reject_removal("remove_all")

    def retain_all(self, records: Iterable[Record]) -> None:
        """NOT SUPPORTED: keep only the records contained in ``records``."""
        self._reject_removal("retain_all")

    def remove_id(self, rid: int) -> None:
        """NOT SUPPORTED: remove the record with id ``rid``."""
        self._reject_removal("remove_id")

    def pop(self, rid: int) -> Record:
        """NOT SUPPORTED: remove and return the record with id ``rid``."""
        self._reject_removal("pop")

    def clear(self) -> None:
        """NOT SUPPORTED: remove every record."""
        self._reject_removal("clear")

    def __delitem__(self, rid: int) -> None:
        self._reject_removal("__delitem__")


class Dataframe(UnsupportedRemovalMixin, Collection):
    """Ordered, append-only collection of Records with column type metadata.

    Attributes:
        configuration: Storage configuration used for this and derived dataframes
        database_name: Name of this dataframe's own connector session
    """

    def __init__(
        self,
        configuration: DatabaseConfiguration,
        label_type: Optional[DataType] = None,
        column_types: Optional[Mapping[Any, DataType]] = None,
    ) -> None:
        """Create an empty dataframe with its own connector session.

        Args:
            configuration: Storage configuration to open the session from
            label_type: Known label type (builders that already know the schema)
            column_types: Known feature column types (same)
        """
        self.configuration = configuration
        self.database_name = f"dts_{uuid.uuid4().hex}"

        self._connector = configuration.get_connector(self.database_name)
        self._records = self._connector.get_or_create_map(RECORDS_MAP)
        self._column_types = self._connector.get_or_create_map(COLUMN_TYPES_MAP)
        self._label_type = label_type
        self._deleted = False

        if column_types:
            self._column_types.update(column_types)

        logger.debug("Dataframe created", database=self.database_name)

    # Read surface

    def __len__(self) -> int:
        self._check_alive()
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        for rid in self.index():
            yield self._records[rid]

    def __contains__(self, record: object) -> bool:
        return any(r == record for r in self)

    def __getitem__(self, rid: int) -> Record:
        self._check_alive()
        rid = operator.index(rid)
        try:
            return self._records[rid]
        except KeyError:
            raise RecordIndexError(f"Record id {rid} out of range (size {len(self)})") from None

    def __repr__(self) -> str:
        if self._deleted:
            return f"<Dataframe {self.database_name} (deleted)>"
        return (
            f"<Dataframe {self.database_name} rows={len(self)} "
            f"columns={self.column_count}>"
        )

    def index(self) -> range:
        """Row ids in order."""
        return range(len(self))

    def items(self) -> Iterator[Tuple[int, Record]]:
        """Iterate over ``(row id, record)`` pairs in id order."""
        for rid in self.index():
            yield rid, self._records[rid]

    def index_of(self, record: Record) -> int:
        """Return the id of the first record equal to ``record``.

        Only features and label are compared, predictions are ignored.

        Raises:
            ValueError: If no such record exists
        """
        for rid, r in self.items():
            if r == record:
                return rid
        raise ValueError("Record not found in Dataframe")

    def contains_all(self, records: Iterable[Record]) -> bool:
        """Check whether every record of ``records`` is in the dataframe."""
        return all(record in self for record in records)

    @property
    def label_type(self) -> Optional[DataType]:
        """Type of the label, None until a non-null label is seen."""
        self._check_alive()
        return self._label_type

    @property
    def column_types(self) -> Mapping[Any, DataType]:
        """Read-only view of feature column types."""
        self._check_alive()
        return MappingProxyType(self._column_types)

    @property
    def column_count(self) -> int:
        """Number of known feature columns."""
        self._check_alive()
        return len(self._column_types)

    def column_values(self, column: Any) -> pd.Series:
        """Extract a feature column across all rows.

        Args:
            column: Feature column identifier

        Returns:
            Series indexed by row id; rows lacking the column hold None
        """
        values = [record.features.get(column) for record in self]
        return pd.Series(values, index=pd.RangeIndex(len(values)), name=column, dtype=object)

    def label_values(self) -> pd.Series:
        """Extract the labels across all rows as a Series indexed by row id."""
        values = [record.label for record in self]
        return pd.Series(values, index=pd.RangeIndex(len(values)), name="label", dtype=object)

    # Append surface

    def append(self, record: Record) -> int:
        """Add a record at the end and update the metadata.

        Args:
            record: Record to add

        Returns:
            Id of the new record (the previous row count)
        """
        rid = self._add(record)
        self._update_metadata(record)
        return rid

    def extend(self, records: Iterable[Record]) -> List[int]:
        """Append every record of ``records``, returning their ids."""
        return [self.append(record) for record in records]

    def replace(self, rid: int, record: Record, update_metadata: bool = True) -> int:
        """Replace the record stored under an existing id.

        Metadata is only grown: if the new record lacks a column the old one
        had, the column stays in ``column_types`` until
        ``recalculate_metadata()`` is called.

        Args:
            rid: Id of an existing record
            record: Replacement record
            update_metadata: Set False for bulk updates that leave features untouched

        Returns:
            The id

        Raises:
            RecordIndexError: If ``rid`` was never appended
        """
        self._check_alive()
        rid = operator.index(rid)
        if rid not in self._records:
            raise RecordIndexError(f"Record id {rid} out of range (size {len(self)})")
        self._records[rid] = record
        if update_metadata:
            self._update_metadata(record)
        return rid

    def set_predictions(
        self,
        rid: int,
        predicted_label: Any,
        predicted_probabilities: Optional[Mapping[Any, float]] = None,
    ) -> None:
        """Store a model's predictions for one row, leaving metadata untouched."""
        record = self[rid].with_predictions(predicted_label, predicted_probabilities)
        self.replace(rid, record, update_metadata=False)

    def drop_columns(self, columns: Iterable[Any]) -> None:
        """Remove feature columns from the metadata and from every record.

        Columns unknown to the metadata are ignored. Predictions are kept.

        Args:
            columns: Column identifiers to drop
        """
        self._check_alive()
        to_drop = {column for column in columns if column in self._column_types}
        if not to_drop:
            return

        for column in to_drop:
            del self._column_types[column]

        rewritten = 0
        for rid, record in self.items():
            if to_drop.isdisjoint(record.features):
                continue
            features = {k: v for k, v in record.features.items() if k not in to_drop}
            self._records[rid] = record.with_features(features)
            rewritten += 1

        logger.info(
            "Columns dropped",
            database=self.database_name,
            columns=sorted(map(str, to_drop)),
            records_rewritten=rewritten,
        )

    def recalculate_metadata(self) -> None:
        """Rebuild ``label_type`` and ``column_types`` by scanning every row."""
        self._check_alive()
        self._label_type = None
        self._column_types.clear()
        for record in self:
            self._update_metadata(record)

        logger.debug(
            "Metadata recalculated",
            database=self.database_name,
            columns=len(self._column_types),
        )

    # Derivation

    def subset(self, ids: Iterable[int]) -> "Dataframe":
        """Build a new dataframe from the given rows, in the given order.

        The new dataframe has its own connector session and its own ids
        starting at 0; it shares nothing with this one.

        Args:
            ids: Row ids to copy (repeats allowed)

        Returns:
            New Dataframe

        Raises:
            RecordIndexError: If an id is out of range; nothing is left behind
        """
        self._check_alive()
        dataframe = Dataframe(self.configuration)
        try:
            for rid in ids:
                dataframe.append(self[rid])
        except Exception:
            dataframe.delete()
            raise

        logger.debug(
            "Subset created",
            source=self.database_name,
            target=dataframe.database_name,
            rows=len(dataframe),
        )
        return dataframe

    def copy(self) -> "Dataframe":
        """Return an independent copy holding the same records in the same order."""
        return self.subset(self.index())

    def delete(self) -> None:
        """Drop the backing storage. The instance can no longer be used."""
        if self._deleted:
            return
        self._connector.drop_map(COLUMN_TYPES_MAP, self._column_types)
        self._connector.drop_map(RECORDS_MAP, self._records)
        self._connector.drop_database()
        self._connector.close()

        self._deleted = True
        self._label_type = None
        self._records = None
        self._column_types = None
        logger.debug("Dataframe deleted", database=self.database_name)

    # Internals

    def _add(self, record: Record) -> int:
        """Append without touching the metadata; callers must keep it consistent."""
        self._check_alive()
        rid = len(self._records)
        self._records[rid] = record
        return rid

    def _update_metadata(self, record: Record) -> None:
        for column, value in record.features.items():
            # A column first seen with a missing value is typed by its next real value
            current = self._column_types.get(column, _UNSEEN)
            if current is _UNSEEN or (current is None and value is not None):
                self._column_types[column] = infer_data_type(value)

        if self._label_type is None:
            self._label_type = infer_data_type(record.label)

    def _check_alive(self) -> None:
        if self._deleted:
            raise DataframeDeletedError(
                f"Dataframe {self.database_name} was deleted and cannot be used"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Summary of the metadata, for logging and debugging."""
        return {
            "database_name": self.database_name,
            "rows": len(self),
            "label_type": self.label_type.value if self.label_type else None,
            "column_types": {
                str(column): (data_type.value if data_type else None)
                for column, data_type in self.column_types.items()
            },
        }

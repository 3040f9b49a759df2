"""Storage connector abstract base classes.

This module defines the minimal contract that dataframes and knowledge bases
rely on: a session that hands out named, mutable, unique-keyed maps and can
tear them down again.
"""

from abc import ABC, abstractmethod
from typing import Any, MutableMapping


class StorageConnector(ABC):
    """Abstract storage connector interface.

    A connector is one session against a named database. It provides:
    - Named maps that behave like ``dict`` (get/put/contains/len/iterate)
    - Teardown of a single map or of the whole database
    - Release of the underlying session

    No ordering, transaction or durability guarantee is assumed beyond a value
    written under a key being readable under that key within the session.
    Failures are raised to the caller as-is and never retried.
    """

    def __init__(self, database_name: str) -> None:
        self.database_name = database_name

    @abstractmethod
    def get_or_create_map(self, name: str) -> MutableMapping[Any, Any]:
        """Return the map called ``name``, creating it if necessary.

        Args:
            name: Map name, unique within the database

        Returns:
            Mutable mapping backed by the storage
        """
        pass

    @abstractmethod
    def drop_map(self, name: str, mapping: MutableMapping[Any, Any]) -> None:
        """Drop a map and all of its entries.

        Args:
            name: Map name given to get_or_create_map()
            mapping: The handle returned by get_or_create_map()
        """
        pass

    @abstractmethod
    def drop_database(self) -> None:
        """Drop every map of this connector's database."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the session. The connector must not be used afterwards."""
        pass

    def __enter__(self) -> "StorageConnector":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class DatabaseConfiguration(ABC):
    """Factory of connector sessions for a storage backend."""

    @abstractmethod
    def get_connector(self, database_name: str) -> StorageConnector:
        """Open a connector session on ``database_name``.

        Args:
            database_name: Logical database (model name or dataframe id)

        Returns:
            Connector session
        """
        pass

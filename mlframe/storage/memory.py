"""In-process storage connector.

Databases are plain dictionaries owned by the configuration, so a knowledge
base saved through one connector is visible to any later connector opened on
the same database name through the same configuration.
"""

from typing import Any, Dict, MutableMapping

from mlframe.storage.base import DatabaseConfiguration, StorageConnector
from mlframe.utils.logging import get_logger

logger = get_logger(__name__)


class InMemoryConnector(StorageConnector):
    """Connector session over a dictionary-of-dictionaries database."""

    def __init__(self, database_name: str, configuration: "InMemoryConfiguration") -> None:
        super().__init__(database_name)
        self._configuration = configuration
        self._closed = False

    @property
    def _database(self) -> Dict[str, Dict[Any, Any]]:
        return self._configuration.databases.setdefault(self.database_name, {})

    def get_or_create_map(self, name: str) -> MutableMapping[Any, Any]:
        self._check_open()
        return self._database.setdefault(name, {})

    def drop_map(self, name: str, mapping: MutableMapping[Any, Any]) -> None:
        self._check_open()
        mapping.clear()
        self._database.pop(name, None)

    def drop_database(self) -> None:
        self._check_open()
        database = self._configuration.databases.pop(self.database_name, None)
        if database is not None:
            for mapping in database.values():
                mapping.clear()
        logger.debug("Database dropped", database=self.database_name)

    def close(self) -> None:
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Connector for '{self.database_name}' is closed")


class InMemoryConfiguration(DatabaseConfiguration):
    """Configuration whose databases live in the current process."""

    def __init__(self) -> None:
        self.databases: Dict[str, Dict[str, Dict[Any, Any]]] = {}

    def get_connector(self, database_name: str) -> InMemoryConnector:
        return InMemoryConnector(database_name, self)

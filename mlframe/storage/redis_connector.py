"""Redis storage connector.

Every map is a Redis hash named ``<prefix>:<database>:<map>``, with the
database name percent-encoded so that it holds no ``:`` and no glob
characters. Keys and values are pickled, so any picklable Python object
(records, DataTypes, parameter dataclasses) can be stored. Rows never have
to fit in the process memory.
"""

import pickle
import re
from typing import Any, Iterator, MutableMapping, Optional
from urllib.parse import quote

import redis

from mlframe.storage.base import DatabaseConfiguration, StorageConnector
from mlframe.utils.logging import get_logger

logger = get_logger(__name__)

# Fixed so that hash fields written by one interpreter are found by another
PICKLE_PROTOCOL = 4

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def _dumps(obj: Any) -> bytes:
    return pickle.dumps(obj, protocol=PICKLE_PROTOCOL)


def _escape_glob(text: str) -> str:
    return _GLOB_SPECIAL.sub(r"\\\1", text)


class RedisMap(MutableMapping[Any, Any]):
    """MutableMapping view over a single Redis hash."""

    def __init__(self, client: "redis.Redis", key: str) -> None:
        self._client = client
        self.key = key

    def __getitem__(self, item: Any) -> Any:
        raw = self._client.hget(self.key, _dumps(item))
        if raw is None:
            raise KeyError(item)
        return pickle.loads(raw)

    def __setitem__(self, item: Any, value: Any) -> None:
        self._client.hset(self.key, _dumps(item), _dumps(value))

    def __delitem__(self, item: Any) -> None:
        if not self._client.hdel(self.key, _dumps(item)):
            raise KeyError(item)

    def __contains__(self, item: object) -> bool:
        return bool(self._client.hexists(self.key, _dumps(item)))

    def __len__(self) -> int:
        return int(self._client.hlen(self.key))

    def __iter__(self) -> Iterator[Any]:
        for raw in self._client.hkeys(self.key):
            yield pickle.loads(raw)

    def clear(self) -> None:
        self._client.delete(self.key)


class RedisConnector(StorageConnector):
    """Connector session on one logical database inside a Redis server."""

    def __init__(self, database_name: str, client: "redis.Redis", key_prefix: str) -> None:
        super().__init__(database_name)
        self._client = client
        self._namespace = f"{key_prefix}:{quote(database_name, safe='')}:"
        self._closed = False

    def get_or_create_map(self, name: str) -> RedisMap:
        self._check_open()
        # Hashes spring into existence on first write
        return RedisMap(self._client, self._namespace + name)

    def drop_map(self, name: str, mapping: MutableMapping[Any, Any]) -> None:
        self._check_open()
        self._client.delete(self._namespace + name)

    def drop_database(self) -> None:
        self._check_open()
        keys = list(self._client.scan_iter(match=_escape_glob(self._namespace) + "*"))
        if keys:
            self._client.delete(*keys)
        logger.debug(
            "Database dropped",
            database=self.database_name,
            keys_removed=len(keys),
        )

    def close(self) -> None:
        # The client belongs to the configuration and is shared across sessions
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Connector for '{self.database_name}' is closed")


class RedisConfiguration(DatabaseConfiguration):
    """Configuration backed by a Redis server.

    Attributes:
        redis_url: Redis connection URL
        key_prefix: Prefix of every key written through this configuration
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        key_prefix: str = "mlframe",
        client: Optional["redis.Redis"] = None,
    ) -> None:
        """Initialize the Redis configuration.

        Args:
            redis_url: Redis connection URL (redis://...)
            key_prefix: Namespace for every key written
            client: Pre-built client (the URL is ignored when given)
        """
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.client = client if client is not None else redis.from_url(
            redis_url,
            decode_responses=False,  # values are pickled bytes
        )
        logger.info("RedisConfiguration initialized", key_prefix=key_prefix)

    def get_connector(self, database_name: str) -> RedisConnector:
        return RedisConnector(database_name, self.client, self.key_prefix)

    def close(self) -> None:
        """Close the Redis client shared by every connector."""
        self.client.close()
        logger.debug("Closed Redis connection")

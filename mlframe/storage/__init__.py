"""Storage connectors.

Dataframes and knowledge bases depend only on the abstract contract in
``mlframe.storage.base``; the in-memory and Redis adapters are interchangeable.
"""

from mlframe.storage.base import DatabaseConfiguration, StorageConnector
from mlframe.storage.factory import build_configuration
from mlframe.storage.memory import InMemoryConfiguration, InMemoryConnector
from mlframe.storage.redis_connector import RedisConfiguration, RedisConnector, RedisMap

__all__ = [
    "DatabaseConfiguration",
    "StorageConnector",
    "build_configuration",
    "InMemoryConfiguration",
    "InMemoryConnector",
    "RedisConfiguration",
    "RedisConnector",
    "RedisMap",
]

"""Select a storage configuration from the application settings."""

from typing import Optional

from mlframe.config.settings import Settings, StorageBackend, get_settings
from mlframe.storage.base import DatabaseConfiguration
from mlframe.storage.memory import InMemoryConfiguration
from mlframe.storage.redis_connector import RedisConfiguration
from mlframe.utils.logging import get_logger

logger = get_logger(__name__)


def build_configuration(settings: Optional[Settings] = None) -> DatabaseConfiguration:
    """Build the DatabaseConfiguration named by ``settings.storage_backend``.

    Args:
        settings: Settings instance (defaults to the global settings)

    Returns:
        Storage configuration
    """
    settings = settings or get_settings()

    if settings.storage_backend == StorageBackend.REDIS:
        configuration: DatabaseConfiguration = RedisConfiguration(
            redis_url=settings.redis_url,
            key_prefix=settings.redis_key_prefix,
        )
    else:
        configuration = InMemoryConfiguration()

    logger.debug(
        "Storage configuration built",
        backend=settings.storage_backend.value,
    )
    return configuration

"""
bucketkv - key-value storage drivers over object storage, dood!

This package exposes an S3 bucket through a uniform async CRUD-and-list driver
contract, so a generic storage layer can use it interchangeably with other
backends.

Example Usage:
    >>> from bucketkv import S3DriverOptions, S3StorageDriver
    >>>
    >>> async with S3StorageDriver(S3DriverOptions(bucket="my-bucket", prefix="app")) as driver:
    ...     await driver.setItem("users/42", '{"name": "Prinny"}')
    ...     print(await driver.getKeys())  # ['users/42']

Configured from TOML, with logging set up from the [logging] section:
    >>> from bucketkv import ConfigManager, StorageService, initLogging
    >>>
    >>> configManager = ConfigManager("config.toml")
    >>> initLogging(configManager.getLoggingConfig())
    >>> storage = StorageService.getInstance()
    >>> storage.injectConfig(configManager)
    >>> await storage.setItem("users/42", '{"name": "Prinny"}')
    >>> await storage.dispose()
"""

from .config import ConfigManager
from .drivers import MAX_DELETE_BATCH_SIZE, AbstractStorageDriver, S3StorageDriver
from .exceptions import (
    StorageBackendError,
    StorageBulkDeleteError,
    StorageConfigError,
    StorageDisposedError,
    StorageError,
    StorageKeyError,
)
from .logging_utils import configureLogger, initLogging
from .service import StorageService
from .types import DeleteFailure, ItemMeta, RemoveItemOptions, S3DriverOptions, SetItemOptions
from .utils import normalizeKey, normalizeMetadataKey

__version__ = "0.1.0"

__all__ = [
    # Drivers
    "AbstractStorageDriver",
    "S3StorageDriver",
    "MAX_DELETE_BATCH_SIZE",
    "StorageService",
    # Configuration and logging
    "ConfigManager",
    "initLogging",
    "configureLogger",
    # Types
    "S3DriverOptions",
    "SetItemOptions",
    "RemoveItemOptions",
    "ItemMeta",
    "DeleteFailure",
    # Helpers
    "normalizeKey",
    "normalizeMetadataKey",
    # Exceptions
    "StorageError",
    "StorageKeyError",
    "StorageConfigError",
    "StorageDisposedError",
    "StorageBackendError",
    "StorageBulkDeleteError",
]

"""
Storage service: Singleton service for key-value storage operations

This module provides a singleton service that selects a storage driver from
configuration and delegates every storage operation to it.
"""

import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Union

from .drivers.abstract import AbstractStorageDriver
from .drivers.s3 import S3StorageDriver
from .exceptions import StorageConfigError
from .types import ItemMeta, RemoveItemOptions, SetItemOptions

if TYPE_CHECKING:
    from .config.manager import ConfigManager

logger = logging.getLogger(__name__)

DriverFactory = Callable[[Mapping[str, Any]], AbstractStorageDriver]


class StorageService:
    """
    Singleton service for key-value storage operations.

    The driver is configured at initialization time through the injectConfig
    method, using the `type` field of the storage configuration to pick a
    registered driver factory.

    Built-in drivers:
    - s3: AWS S3 or S3-compatible storage

    Usage:
        storage = StorageService.getInstance()
        storage.injectConfig(configManager)

        await storage.setItem("my-key", "data")
        data = await storage.getItem("my-key")
        keys = await storage.getKeys()
        await storage.dispose()

    Thread Safety:
        The singleton instance creation is thread-safe using RLock.
        Individual operations depend on driver implementation.
    """

    _instance: Union["StorageService", None] = None
    _lock = threading.RLock()

    def __new__(cls) -> "StorageService":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
            return cls._instance

    def __init__(self):
        """
        Initialize storage service.

        Only runs once due to singleton pattern.
        """
        if not hasattr(self, "initialized"):
            self.driver: AbstractStorageDriver | None = None
            self.driverFactories: Dict[str, DriverFactory] = {S3StorageDriver.name: S3StorageDriver}
            self.initialized = False
            logger.info("StorageService created, awaiting configuration, dood!")

    @classmethod
    def getInstance(cls) -> "StorageService":
        """Get singleton instance."""
        return cls()

    def registerDriver(self, name: str, factory: DriverFactory) -> None:
        """
        Register a driver factory for a storage type.

        Args:
            name: Storage type used in the `type` configuration field
            factory: Callable building a driver from its configuration section
        """
        self.driverFactories[name] = factory
        logger.debug(f"Registered storage driver '{name}', dood!")

    def injectConfig(self, configManager: "ConfigManager") -> None:
        """
        Initialize service with configuration from ConfigManager.

        Args:
            configManager: The configuration manager containing storage settings

        Raises:
            StorageConfigError: If configuration is invalid, driver creation fails,
                or a driver is already configured (call dispose() first)

        Configuration format:
            {
                "type": "s3",
                "s3": {
                    "bucket": "my-bucket",
                    "prefix": "objects",
                    "region": "us-east-1",
                    "endpoint": "https://s3.amazonaws.com",
                    "access-key-id": "...",
                    "secret-access-key": "..."
                }
            }
        """
        try:
            if self.driver is not None:
                raise StorageConfigError("StorageService is already configured, call dispose() first")

            config = configManager.getStorageConfig()

            if not config:
                raise StorageConfigError("Storage configuration is missing")

            storageType = config.get("type")
            if not storageType:
                raise StorageConfigError("Storage type is not specified in configuration")

            factory = self.driverFactories.get(storageType)
            if factory is None:
                raise StorageConfigError(f"Unknown storage type: {storageType}")

            driverConfig = config.get(storageType)
            if not driverConfig:
                raise StorageConfigError(f"Storage configuration for '{storageType}' is missing")

            self.driver = factory(driverConfig)
            self.initialized = True
            logger.info(f"StorageService initialized with {storageType} driver, dood!")

        except StorageConfigError:
            raise
        except Exception as e:
            raise StorageConfigError(f"Failed to initialize storage service: {e}") from e

    def _getDriver(self) -> AbstractStorageDriver:
        """
        Get the configured driver.

        Raises:
            StorageConfigError: If service is not initialized
        """
        if not self.initialized or self.driver is None:
            raise StorageConfigError("StorageService is not initialized. Call injectConfig() first, dood!")
        return self.driver

    async def hasItem(self, key: str) -> bool:
        return await self._getDriver().hasItem(key)

    async def getItem(self, key: str) -> Optional[str]:
        value = await self._getDriver().getItem(key)
        if value is None:
            logger.debug(f"Item not found with key: {key}, dood!")
        return value

    async def getItemRaw(self, key: str) -> Optional[bytes]:
        value = await self._getDriver().getItemRaw(key)
        if value is None:
            logger.debug(f"Item not found with key: {key}, dood!")
        return value

    async def setItem(
        self, key: str, value: "str | bytes", options: "SetItemOptions | Mapping[str, Any] | None" = None
    ) -> None:
        await self._getDriver().setItem(key, value, options)

    async def setItemRaw(
        self, key: str, value: bytes, options: "SetItemOptions | Mapping[str, Any] | None" = None
    ) -> None:
        await self._getDriver().setItemRaw(key, value, options)

    async def removeItem(self, key: str, options: "RemoveItemOptions | Mapping[str, Any] | None" = None) -> None:
        await self._getDriver().removeItem(key, options)

    async def getMeta(self, key: str) -> Optional[ItemMeta]:
        return await self._getDriver().getMeta(key)

    async def getKeys(self) -> List[str]:
        return await self._getDriver().getKeys()

    async def clear(self) -> None:
        await self._getDriver().clear()
        logger.info("Storage cleared, dood!")

    async def dispose(self) -> None:
        """
        Dispose the configured driver and return to the unconfigured state.

        Does nothing if the service was never configured.
        """
        if self.driver is None:
            return
        driver = self.driver
        self.driver = None
        self.initialized = False
        await driver.dispose()
        logger.info("StorageService disposed, dood!")

"""
Abstract storage driver interface

This module defines the abstract base class that all storage drivers must implement.
It is the contract a generic storage layer relies on, so that an object storage
bucket, a filesystem or a database can be swapped without callers noticing.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from ..types import ItemMeta, RemoveItemOptions, SetItemOptions


class AbstractStorageDriver(ABC):
    """
    Abstract base class for storage drivers.

    All storage driver implementations must inherit from this class and implement
    all abstract methods. Keys passed to the driver are logical keys; mapping them
    to backend locations is the driver's job.

    Implementations should report missing items as None/False and wrap every other
    backend failure in StorageBackendError.
    """

    name: str = "abstract"

    @property
    @abstractmethod
    def options(self) -> Any:
        """Configuration the driver was created with."""
        pass

    @abstractmethod
    async def hasItem(self, key: str) -> bool:
        """
        Check if an item exists for the specified key.

        Args:
            key: The logical storage key to check

        Returns:
            True if the item exists, False otherwise

        Raises:
            StorageBackendError: If the existence check fails
        """
        pass

    @abstractmethod
    async def getItemRaw(self, key: str) -> Optional[bytes]:
        """
        Retrieve the raw bytes of an item.

        Args:
            key: The logical storage key to retrieve

        Returns:
            The item bytes, or None if the item does not exist

        Raises:
            StorageBackendError: If the retrieval fails (not for missing keys)
        """
        pass

    @abstractmethod
    async def getItem(self, key: str) -> Optional[str]:
        """
        Retrieve an item decoded as UTF-8 text.

        Args:
            key: The logical storage key to retrieve

        Returns:
            The item text, or None if the item does not exist

        Raises:
            StorageBackendError: If the retrieval fails (not for missing keys)
        """
        pass

    @abstractmethod
    async def setItemRaw(
        self, key: str, value: bytes, options: "SetItemOptions | Mapping[str, Any] | None" = None
    ) -> None:
        """
        Store raw bytes under the specified key, overwriting any existing item.

        Args:
            key: The logical storage key
            value: The bytes to store
            options: Write options (user metadata, hasBody)

        Raises:
            StorageBackendError: If the write fails
        """
        pass

    @abstractmethod
    async def setItem(
        self, key: str, value: "str | bytes", options: "SetItemOptions | Mapping[str, Any] | None" = None
    ) -> None:
        """
        Store a text item under the specified key.

        Args:
            key: The logical storage key
            value: The text (or bytes) to store
            options: Write options (user metadata, hasBody)

        Raises:
            StorageBackendError: If the write fails
        """
        pass

    @abstractmethod
    async def removeItem(self, key: str, options: "RemoveItemOptions | Mapping[str, Any] | None" = None) -> None:
        """
        Remove the item for the specified key. Removing a missing item is not an error.

        Args:
            key: The logical storage key
            options: Remove options (specific version)

        Raises:
            StorageBackendError: If the deletion fails
        """
        pass

    @abstractmethod
    async def getMeta(self, key: str) -> Optional[ItemMeta]:
        """
        Retrieve metadata of an item.

        Args:
            key: The logical storage key

        Returns:
            Item metadata, or None if the item does not exist

        Raises:
            StorageBackendError: If the lookup fails
        """
        pass

    @abstractmethod
    async def getKeys(self) -> List[str]:
        """
        List all keys held by the driver.

        Returns:
            All logical keys, in backend order

        Raises:
            StorageBackendError: If listing fails
        """
        pass

    @abstractmethod
    async def clear(self) -> None:
        """
        Remove every item held by the driver.

        Raises:
            StorageBackendError: If removal fails
        """
        pass

    @abstractmethod
    async def dispose(self) -> None:
        """Release backend resources. The driver must not be used afterwards."""
        pass

    async def __aenter__(self) -> "AbstractStorageDriver":
        return self

    async def __aexit__(self, excType, excValue, traceback) -> None:
        await self.dispose()

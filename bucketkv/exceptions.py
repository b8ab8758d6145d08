"""
Storage driver exceptions

This module defines the exception hierarchy for bucketkv.
All storage-related errors inherit from StorageError base class.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import DeleteFailure


class StorageError(Exception):
    """
    Base exception for all storage driver errors.

    Catch this to handle any storage error generically.
    """

    pass


class StorageKeyError(StorageError):
    """
    Exception raised when a storage key is invalid (empty or only whitespace).
    """

    pass


class StorageConfigError(StorageError):
    """
    Exception raised when storage configuration is invalid.

    This exception is raised synchronously, before any network call, when:
    - Required configuration parameters are missing (e.g. bucket)
    - Only one half of a credential pair is supplied
    - Driver type is not recognized
    - The service is used before it was configured
    """

    pass


class StorageDisposedError(StorageError):
    """
    Exception raised when a driver is used after dispose() was called.
    """

    pass


class StorageBackendError(StorageError):
    """
    Exception raised when a backend operation fails.

    This exception wraps backend-specific errors such as:
    - Permission errors (AccessDenied)
    - Throttling (SlowDown)
    - Network errors
    - Malformed requests

    Not-found outcomes are never reported with this exception, they are
    returned as None/False by the driver instead.

    Args:
        message: Description of the backend error
        originalError: The original exception that caused this error (optional)
    """

    def __init__(self, message: str, originalError: Exception | None = None):
        """
        Initialize StorageBackendError with message and optional original error.

        Args:
            message: Description of the backend error
            originalError: The original exception that caused this error
        """
        super().__init__(message)
        self.originalError = originalError


class StorageBulkDeleteError(StorageBackendError):
    """
    Exception raised when a bulk delete finished but some objects were rejected.

    All batches are attempted before this is raised, so objects not listed in
    `failures` have been removed.

    Args:
        message: Description of the failure
        failures: Rejected objects keyed by "<key>:<versionId>"
    """

    def __init__(self, message: str, failures: dict[str, "DeleteFailure"]):
        super().__init__(message)
        self.failures = failures

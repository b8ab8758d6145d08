"""
S3 storage driver implementation

This module provides a storage driver for AWS S3 and S3-compatible storage services.
Uses boto3 library for S3 operations; blocking calls run in worker threads so the
driver can be awaited from the event loop.
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional

import boto3
from botocore.exceptions import ClientError

from ..exceptions import (
    StorageBackendError,
    StorageBulkDeleteError,
    StorageConfigError,
    StorageDisposedError,
)
from ..types import (
    DeleteFailure,
    ItemMeta,
    RemoveItemOptions,
    S3DriverOptions,
    SetItemOptions,
    coerceRemoveItemOptions,
    coerceSetItemOptions,
)
from ..utils import getListPrefix, normalizeKey, toLogicalKey, toRequestMetadata
from .abstract import AbstractStorageDriver

logger = logging.getLogger(__name__)

DRIVER_NAME = "s3"

# S3 accepts up to 1000 objects per DeleteObjects request
MAX_DELETE_BATCH_SIZE = 999

# Error codes S3 uses for a missing object (HeadObject has no body, so only "404")
NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def isNotFoundError(error: ClientError) -> bool:
    """Check whether a botocore ClientError means "object does not exist"."""
    return str(error.response.get("Error", {}).get("Code", "")) in NOT_FOUND_CODES


def isSuccessResponse(response: Mapping[str, Any]) -> bool:
    """Check the HTTP status code of a boto3 response."""
    return response.get("ResponseMetadata", {}).get("HTTPStatusCode", 200) == 200


class S3StorageDriver(AbstractStorageDriver):
    """
    S3-based storage driver using boto3.

    Stores items in AWS S3 or S3-compatible storage services (e.g., Yandex Object Storage).
    Logical keys are mapped under the configured prefix with normalizeKey().

    Features:
    - Explicit credentials or the default boto3 credential chain
    - Support for custom S3 endpoints (for S3-compatible services)
    - Optional key prefix for namespace isolation, listing is scoped to it
    - 404 errors return None/False instead of raising exceptions
    - Paginated listing and batched bulk deletion

    Args:
        options: S3DriverOptions or a mapping accepted by S3DriverOptions.fromDict()
        client: Optional pre-built boto3 S3 client (owned by the driver from now on)

    Raises:
        StorageConfigError: If bucket is missing or credentials are only half supplied
        StorageBackendError: If S3 client initialization fails

    Example:
        >>> driver = S3StorageDriver(S3DriverOptions(bucket="my-bucket", prefix="objects"))
        >>> await driver.setItem("greeting", "hello")
        >>> await driver.getItem("/greeting")
        'hello'
        >>> await driver.dispose()
    """

    name = DRIVER_NAME

    def __init__(self, options: "S3DriverOptions | Mapping[str, Any]", client: Any = None):
        if not isinstance(options, S3DriverOptions):
            options = S3DriverOptions.fromDict(options)

        if not options.bucket:
            raise StorageConfigError(f"[{DRIVER_NAME}] Missing required option `bucket`")
        if bool(options.accessKeyId) != bool(options.secretAccessKey):
            raise StorageConfigError(
                f"[{DRIVER_NAME}] `accessKeyId` and `secretAccessKey` must be supplied together or not at all"
            )

        self._options = options
        self.bucket = options.bucket
        self.prefix = options.prefix
        self.client: Any = client if client is not None else self._createClient(options)
        logger.info(f"S3StorageDriver ready, bucket: {self.bucket}, prefix: {self.prefix}, dood!")

    @staticmethod
    def _createClient(options: S3DriverOptions) -> Any:
        """
        Create boto3 S3 client.

        Explicit credentials are passed only when both halves are present,
        otherwise boto3 resolves them from the environment/profile/instance role.

        Raises:
            StorageBackendError: If S3 client initialization fails
        """
        clientParams: Dict[str, Any] = {"region_name": options.region}
        if options.endpoint:
            clientParams["endpoint_url"] = options.endpoint
        if options.accessKeyId and options.secretAccessKey:
            clientParams["aws_access_key_id"] = options.accessKeyId
            clientParams["aws_secret_access_key"] = options.secretAccessKey

        try:
            return boto3.client("s3", **clientParams)
        except Exception as e:
            raise StorageBackendError(f"Failed to initialize S3 client: {e}", originalError=e) from e

    @property
    def options(self) -> S3DriverOptions:
        return self._options

    def _getS3Key(self, key: str) -> str:
        """
        Get the full S3 key with prefix.

        Raises:
            StorageKeyError: If the key is empty
        """
        return normalizeKey(self.prefix, key)

    def _ensureClient(self) -> Any:
        """
        Get the client handle.

        Raises:
            StorageDisposedError: If the driver was disposed
        """
        if self.client is None:
            raise StorageDisposedError(f"S3StorageDriver for bucket '{self.bucket}' has been disposed")
        return self.client

    async def _send(self, operation: str, **params: Any) -> Dict[str, Any]:
        """Run a single blocking boto3 call in a worker thread."""
        client = self._ensureClient()
        return await asyncio.to_thread(getattr(client, operation), **params)

    async def _headObject(self, key: str) -> Optional[Dict[str, Any]]:
        """
        HEAD the object for a logical key.

        Returns:
            The boto3 response, or None if the object does not exist

        Raises:
            StorageBackendError: If the lookup fails for any other reason
        """
        s3Key = self._getS3Key(key)
        self._ensureClient()

        try:
            return await self._send("head_object", Bucket=self.bucket, Key=s3Key)
        except ClientError as e:
            if isNotFoundError(e):
                return None
            raise StorageBackendError(f"Failed to check existence of key '{key}' in S3: {e}", originalError=e) from e
        except Exception as e:
            raise StorageBackendError(f"Failed to check existence of key '{key}' in S3: {e}", originalError=e) from e

    async def hasItem(self, key: str) -> bool:
        """
        Check if an object exists in S3.

        The object exists when HEAD succeeds with status 200 and the object
        is not a delete marker.

        Raises:
            StorageKeyError: If the key is invalid
            StorageBackendError: If the existence check fails
        """
        response = await self._headObject(key)
        if response is None:
            return False
        return isSuccessResponse(response) and not response.get("DeleteMarker", False)

    def _readObject(self, s3Key: str) -> Optional[bytes]:
        """Download and read an object body. Runs in a worker thread."""
        response = self._ensureClient().get_object(Bucket=self.bucket, Key=s3Key)
        body = response.get("Body")
        if not isSuccessResponse(response) or body is None:
            return None
        try:
            return body.read()
        finally:
            body.close()

    async def getItemRaw(self, key: str) -> Optional[bytes]:
        """
        Download binary data from S3.

        Returns:
            The binary data if the object exists, None if not found (404).
            A zero-length object gives b"".

        Raises:
            StorageKeyError: If the key is invalid
            StorageBackendError: If the download operation fails (not for 404)
        """
        s3Key = self._getS3Key(key)
        self._ensureClient()

        try:
            data = await asyncio.to_thread(self._readObject, s3Key)
        except ClientError as e:
            if isNotFoundError(e):
                logger.debug(f"Object not found with key: {s3Key}")
                return None
            raise StorageBackendError(f"Failed to get object with key '{key}' from S3: {e}", originalError=e) from e
        except Exception as e:
            raise StorageBackendError(f"Failed to get object with key '{key}' from S3: {e}", originalError=e) from e

        logger.debug(f"Retrieved object with key: {s3Key}, dood!")
        return data

    async def getItem(self, key: str) -> Optional[str]:
        """Download an object and decode it as UTF-8 text."""
        data = await self.getItemRaw(key)
        if data is None:
            return None
        return data.decode("utf-8")

    async def setItemRaw(
        self, key: str, value: Any, options: "SetItemOptions | Mapping[str, Any] | None" = None
    ) -> None:
        """
        Upload binary data to S3.

        Args:
            key: The logical storage key
            value: The object body (bytes or a file-like object)
            options: meta is attached as user metadata, the body is sent only if hasBody

        Raises:
            StorageKeyError: If the key is invalid or two metadata keys name the same header
            StorageBackendError: If the upload operation fails
        """
        opts = coerceSetItemOptions(options)
        s3Key = self._getS3Key(key)
        self._ensureClient()

        putParams: Dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": s3Key,
        }
        if opts.hasBody:
            putParams["Body"] = value
        if opts.meta:
            putParams["Metadata"] = toRequestMetadata(opts.meta)

        try:
            await self._send("put_object", **putParams)
        except Exception as e:
            raise StorageBackendError(f"Failed to store object with key '{key}' to S3: {e}", originalError=e) from e

        logger.debug(f"Stored object with key: {s3Key}, dood!")

    async def setItem(
        self, key: str, value: "str | bytes", options: "SetItemOptions | Mapping[str, Any] | None" = None
    ) -> None:
        """Upload a text item to S3, encoded as UTF-8."""
        if isinstance(value, str):
            value = value.encode("utf-8")
        await self.setItemRaw(key, value, options)

    async def removeItem(self, key: str, options: "RemoveItemOptions | Mapping[str, Any] | None" = None) -> None:
        """
        Delete an object from S3.

        S3 reports success for missing keys, so removing them is not an error.

        Args:
            key: The logical storage key
            options: version selects a specific object version

        Raises:
            StorageKeyError: If the key is invalid
            StorageBackendError: If the deletion fails
        """
        opts = coerceRemoveItemOptions(options)
        s3Key = self._getS3Key(key)
        self._ensureClient()

        deleteParams: Dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": s3Key,
        }
        if opts.version:
            deleteParams["VersionId"] = opts.version

        try:
            await self._send("delete_object", **deleteParams)
        except Exception as e:
            raise StorageBackendError(f"Failed to delete object with key '{key}' from S3: {e}", originalError=e) from e

        logger.debug(f"Deleted object with key: {s3Key}, dood!")

    async def getMeta(self, key: str) -> Optional[ItemMeta]:
        """
        Get object metadata from S3.

        Returns:
            mtime (LastModified), size (ContentLength) and user metadata,
            or None if the object does not exist

        Raises:
            StorageKeyError: If the key is invalid
            StorageBackendError: If the lookup fails
        """
        response = await self._headObject(key)
        if response is None:
            return None
        return {
            "mtime": response.get("LastModified"),
            "size": response.get("ContentLength"),
            "meta": dict(response.get("Metadata") or {}),
        }

    async def _listObjectKeys(self) -> List[str]:
        """
        List physical keys of every object under the configured prefix.

        Follows continuation tokens until S3 reports the listing is complete.
        A failing page aborts the whole listing.

        Raises:
            StorageBackendError: If any list request fails
            StorageDisposedError: If the driver is disposed while listing
        """
        listPrefix = getListPrefix(self.prefix)
        keys: List[str] = []
        continuationToken: Optional[str] = None
        self._ensureClient()

        try:
            while True:
                listParams: Dict[str, Any] = {"Bucket": self.bucket}
                if listPrefix:
                    listParams["Prefix"] = listPrefix
                if continuationToken:
                    listParams["ContinuationToken"] = continuationToken

                response = await self._send("list_objects_v2", **listParams)
                for obj in response.get("Contents", []):
                    if obj.get("Key"):
                        keys.append(obj["Key"])

                if not response.get("IsTruncated"):
                    break
                continuationToken = response.get("NextContinuationToken")
                if not continuationToken:
                    raise StorageBackendError("S3 reported a truncated listing without a continuation token")
        except (StorageBackendError, StorageDisposedError):
            raise
        except Exception as e:
            raise StorageBackendError(
                f"Failed to list objects with prefix '{listPrefix}' in S3: {e}", originalError=e
            ) from e

        return keys

    async def getKeys(self) -> List[str]:
        """
        List all keys under the configured prefix.

        Returns:
            Logical keys (prefix removed) in the order S3 returns them,
            which is ascending UTF-8 binary order of the object keys.

        Raises:
            StorageBackendError: If the list operation fails
        """
        keys = [toLogicalKey(self.prefix, s3Key) for s3Key in await self._listObjectKeys()]
        logger.debug(f"Listed {len(keys)} objects in bucket {self.bucket}, dood!")
        return keys

    async def clear(self) -> None:
        """
        Remove all objects under the configured prefix.

        Objects are deleted in batches of MAX_DELETE_BATCH_SIZE keys. Every batch
        is attempted; objects S3 refused to delete are reported afterwards.

        Raises:
            StorageBackendError: If listing or a delete request fails
            StorageBulkDeleteError: If some objects could not be deleted
            StorageDisposedError: If the driver is disposed while clearing
        """
        keys = await self._listObjectKeys()
        failures: Dict[str, DeleteFailure] = {}
        totalKeys = len(keys)

        for start in range(0, totalKeys, MAX_DELETE_BATCH_SIZE):
            batch = keys[start : start + MAX_DELETE_BATCH_SIZE]
            try:
                response = await self._send(
                    "delete_objects",
                    Bucket=self.bucket,
                    Delete={
                        "Objects": [{"Key": s3Key} for s3Key in batch],
                        "Quiet": True,
                    },
                )
            except StorageDisposedError:
                raise
            except Exception as e:
                raise StorageBackendError(f"Failed to delete objects from S3: {e}", originalError=e) from e

            for error in response.get("Errors", []):
                failureKey = f"{error.get('Key')}:{error.get('VersionId')}"
                failures[failureKey] = {
                    "key": error.get("Key"),
                    "versionId": error.get("VersionId"),
                    "code": error.get("Code"),
                    "message": error.get("Message"),
                }

        if failures:
            logger.warning(f"Failed to delete {len(failures)} of {totalKeys} objects from bucket {self.bucket}, dood!")
            raise StorageBulkDeleteError(
                f"Failed to delete {len(failures)} of {totalKeys} objects from S3", failures=failures
            )

        logger.debug(f"Cleared {totalKeys} objects from bucket {self.bucket}, dood!")

    async def dispose(self) -> None:
        """Close the S3 client. Calling it again is a no-op."""
        if self.client is None:
            return
        client = self.client
        self.client = None
        client.close()
        logger.info(f"S3StorageDriver for bucket {self.bucket} disposed, dood!")

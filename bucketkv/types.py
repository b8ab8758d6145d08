"""Type definitions for bucketkv drivers."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, TypedDict

from .exceptions import StorageConfigError


@dataclass(frozen=True)
class S3DriverOptions:
    """Immutable configuration of an S3 storage driver.

    Attributes:
        bucket: S3 bucket name (required, non-empty)
        prefix: Optional namespace root for all keys
        region: Optional AWS region (e.g., "us-east-1", "ru-central1")
        accessKeyId: Optional access key ID, must be paired with secretAccessKey
        secretAccessKey: Optional secret access key, must be paired with accessKeyId
        endpoint: Optional endpoint URL for S3-compatible services
    """

    bucket: str
    prefix: Optional[str] = None
    region: Optional[str] = None
    accessKeyId: Optional[str] = None
    secretAccessKey: Optional[str] = None
    endpoint: Optional[str] = None

    @classmethod
    def fromDict(cls, config: Mapping[str, Any]) -> "S3DriverOptions":
        """
        Build options from a config mapping, dood!

        Accepts both camelCase keys (accessKeyId) and the dashed TOML spelling
        (access-key-id). Empty strings are treated as missing values.

        Args:
            config: Mapping with driver settings

        Returns:
            S3DriverOptions built from the mapping

        Raises:
            StorageConfigError: If config is not a mapping
        """
        if not isinstance(config, Mapping):
            raise StorageConfigError(f"S3 configuration must be a mapping, got {type(config).__name__}")

        def pick(*names: str) -> Optional[str]:
            for name in names:
                value = config.get(name)
                if value:
                    return str(value)
            return None

        return cls(
            bucket=pick("bucket") or "",
            prefix=pick("prefix"),
            region=pick("region"),
            accessKeyId=pick("accessKeyId", "access-key-id", "key-id"),
            secretAccessKey=pick("secretAccessKey", "secret-access-key", "key-secret"),
            endpoint=pick("endpoint"),
        )


@dataclass(frozen=True)
class SetItemOptions:
    """Options for write operations.

    Attributes:
        meta: User-defined metadata to attach to the object
        hasBody: Attach the value as object body (False writes a zero-length marker)
    """

    meta: Optional[Dict[str, str]] = None
    hasBody: bool = True


@dataclass(frozen=True)
class RemoveItemOptions:
    """Options for remove operations.

    Attributes:
        version: Specific object version to delete (bucket versioning must be enabled)
    """

    version: Optional[str] = None


class ItemMeta(TypedDict):
    """Metadata of a stored item.

    Attributes:
        mtime: Last modification time reported by the backend
        size: Object size in bytes
        meta: User-defined metadata, without the reserved x-amz-meta- marker
    """

    mtime: Optional[datetime]
    size: Optional[int]
    meta: Dict[str, str]


class DeleteFailure(TypedDict):
    """Single object rejected by a bulk delete request."""

    key: Optional[str]
    versionId: Optional[str]
    code: Optional[str]
    message: Optional[str]


def coerceSetItemOptions(options: "SetItemOptions | Mapping[str, Any] | None") -> SetItemOptions:
    """Accept SetItemOptions, a plain mapping with the same keys, or None."""
    if options is None:
        return SetItemOptions()
    if isinstance(options, SetItemOptions):
        return options
    return SetItemOptions(meta=options.get("meta"), hasBody=bool(options.get("hasBody", True)))


def coerceRemoveItemOptions(options: "RemoveItemOptions | Mapping[str, Any] | None") -> RemoveItemOptions:
    """Accept RemoveItemOptions, a plain mapping with the same keys, or None."""
    if options is None:
        return RemoveItemOptions()
    if isinstance(options, RemoveItemOptions):
        return options
    return RemoveItemOptions(version=options.get("version"))


__all__ = [
    "S3DriverOptions",
    "SetItemOptions",
    "RemoveItemOptions",
    "ItemMeta",
    "DeleteFailure",
    "coerceSetItemOptions",
    "coerceRemoveItemOptions",
]

"""
Storage key and metadata helpers

This module maps logical keys onto physical object keys under a configured
prefix, and normalizes user metadata keys for S3 requests.
"""

from typing import Dict, Mapping, Optional

from .exceptions import StorageKeyError

# Key separator used between prefix and key
KEY_SEPARATOR = "/"

# Reserved marker of user-defined S3 metadata headers
USER_METADATA_MARKER = "x-amz-meta-"


def _stripLeadingSeparator(value: str) -> str:
    """Strip exactly one leading separator, if present."""
    return value[1:] if value.startswith(KEY_SEPARATOR) else value


def normalizeKey(prefix: Optional[str], key: str) -> str:
    """
    Build the physical object key for a logical key under a prefix.

    Exactly one leading "/" is stripped from both the key and the prefix, then
    they are joined with a single "/". An empty or missing prefix yields the
    stripped key alone, without a leading separator.

    Args:
        prefix: Configured namespace root (None is treated as empty)
        key: Logical key supplied by the caller

    Returns:
        The physical object key

    Raises:
        StorageKeyError: If the result would be an empty object key, which
            happens only for "" or "/" without a prefix

    Examples:
        >>> normalizeKey("objects", "/a/b")
        'objects/a/b'
        >>> normalizeKey("/objects", "a/b")
        'objects/a/b'
        >>> normalizeKey(None, "/a/b")
        'a/b'
    """
    key = _stripLeadingSeparator(key)
    prefix = _stripLeadingSeparator(prefix or "")
    if not prefix:
        if not key:
            raise StorageKeyError("Storage key cannot be empty without a prefix")
        return key
    return f"{prefix}{KEY_SEPARATOR}{key}"


def getListPrefix(prefix: Optional[str]) -> str:
    """
    Get the S3 listing prefix covering every key normalized under `prefix`.

    Returns an empty string (whole bucket) when there is no prefix.
    """
    prefix = _stripLeadingSeparator(prefix or "")
    if not prefix:
        return ""
    return f"{prefix}{KEY_SEPARATOR}"


def toLogicalKey(prefix: Optional[str], objectKey: str) -> str:
    """
    Strip the namespace part from a physical object key.

    Keys outside the namespace are returned unchanged. A remainder that starts
    with "/" gets one more "/" in front, because normalizeKey strips one.
    """
    listPrefix = getListPrefix(prefix)
    if listPrefix:
        if not objectKey.startswith(listPrefix):
            return objectKey
        objectKey = objectKey[len(listPrefix) :]
    if objectKey.startswith(KEY_SEPARATOR):
        return f"{KEY_SEPARATOR}{objectKey}"
    return objectKey


def normalizeMetadataKey(key: str) -> str:
    """
    Add the reserved user-metadata marker to a metadata key if missing.

    Examples:
        >>> normalizeMetadataKey("owner")
        'x-amz-meta-owner'
        >>> normalizeMetadataKey("x-amz-meta-owner")
        'x-amz-meta-owner'
    """
    if key.startswith(USER_METADATA_MARKER):
        return key
    return f"{USER_METADATA_MARKER}{key}"


def normalizeMetadata(meta: Mapping[str, str]) -> Dict[str, str]:
    """Normalize every key of a user metadata mapping with normalizeMetadataKey."""
    return {normalizeMetadataKey(key): value for key, value in meta.items()}


def toRequestMetadata(meta: Mapping[str, str]) -> Dict[str, str]:
    """
    Convert user metadata into the `Metadata` parameter of a boto3 request.

    botocore serializes each `Metadata` entry as an `x-amz-meta-<name>` header,
    so the marker is removed here after normalization. Both "owner" and
    "x-amz-meta-owner" end up stored as the `x-amz-meta-owner` header.

    Raises:
        StorageKeyError: If two keys name the same header, e.g. "owner" and
            "x-amz-meta-owner" together
    """
    markerLen = len(USER_METADATA_MARKER)
    result: Dict[str, str] = {}
    for key, value in meta.items():
        name = normalizeMetadataKey(key)[markerLen:]
        if name in result:
            raise StorageKeyError(f"Metadata key '{key}' duplicates header '{USER_METADATA_MARKER}{name}'")
        result[name] = value
    return result

"""
Storage drivers package

Concrete drivers implementing AbstractStorageDriver.
"""

from .abstract import AbstractStorageDriver
from .s3 import MAX_DELETE_BATCH_SIZE, S3StorageDriver

__all__ = ["AbstractStorageDriver", "S3StorageDriver", "MAX_DELETE_BATCH_SIZE"]

"""
Test fixtures package for bucketkv tests.

- s3_mocks: in-memory fake of the boto3 S3 client and ClientError helpers
"""

from tests.fixtures.s3_mocks import FakeS3Client, createClientError, okResponse

__all__ = [
    "FakeS3Client",
    "createClientError",
    "okResponse",
]

"""
Pytest configuration and common fixtures for bucketkv tests.

All fixtures follow camelCase naming convention.
"""

from unittest.mock import Mock

import pytest

from tests.fixtures.s3_mocks import FakeS3Client


@pytest.fixture
def fakeS3Client() -> FakeS3Client:
    """
    Provide an empty in-memory fake of the boto3 S3 client.

    Returns:
        FakeS3Client: Fake client holding no objects
    """
    return FakeS3Client()


@pytest.fixture
def mockConfigManager() -> Mock:
    """
    Create a mock ConfigManager with an empty storage section.

    Example:
        def testService(mockConfigManager):
            mockConfigManager.getStorageConfig.return_value = {"type": "s3", "s3": {"bucket": "b"}}
    """
    from bucketkv.config.manager import ConfigManager

    mock = Mock(spec=ConfigManager)
    mock.getStorageConfig.return_value = {}
    mock.getLoggingConfig.return_value = {}
    return mock

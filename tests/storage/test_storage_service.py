"""
Comprehensive tests for StorageService, dood!

This module tests the StorageService singleton to ensure proper
initialization, configuration, and operation delegation to drivers.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from bucketkv.drivers.abstract import AbstractStorageDriver
from bucketkv.drivers.s3 import S3StorageDriver
from bucketkv.exceptions import StorageConfigError
from bucketkv.service import StorageService
from tests.fixtures.s3_mocks import FakeS3Client


@pytest.fixture(autouse=True)
def resetStorageServiceSingleton():
    """Reset StorageService singleton before each test, dood!"""
    StorageService._instance = None
    yield
    StorageService._instance = None


@pytest.fixture
def configuredService(mockConfigManager):
    """Create StorageService configured with an S3 driver on a fake client, dood!"""
    mockConfigManager.getStorageConfig.return_value = {
        "type": "s3",
        "s3": {"bucket": "test-bucket", "prefix": "svc"},
    }
    with patch("bucketkv.drivers.s3.boto3.client", return_value=FakeS3Client()):
        service = StorageService.getInstance()
        service.injectConfig(mockConfigManager)
    return service


class TestStorageServiceSingleton:
    """Test StorageService singleton behavior, dood!"""

    def testGetInstanceReturnsSameInstance(self):
        """Test that getInstance returns same instance"""
        assert StorageService.getInstance() is StorageService.getInstance()

    def testNewReturnsSingleton(self):
        """Test that __new__ returns singleton"""
        assert StorageService() is StorageService()

    def testInitialState(self):
        """Test that service initializes with correct state"""
        service = StorageService.getInstance()

        assert service.driver is None
        assert service.initialized is False
        assert "s3" in service.driverFactories


class TestStorageServiceInjectConfig:
    """Test StorageService configuration, dood!"""

    def testInjectConfigS3(self, mockConfigManager):
        """Test injecting config for the S3 driver"""
        mockConfigManager.getStorageConfig.return_value = {
            "type": "s3",
            "s3": {
                "bucket": "my-bucket",
                "prefix": "objects",
                "region": "us-east-1",
                "access-key-id": "key-id",
                "secret-access-key": "key-secret",
            },
        }

        with patch("bucketkv.drivers.s3.boto3.client") as mockBoto3:
            service = StorageService.getInstance()
            service.injectConfig(mockConfigManager)

        assert service.initialized is True
        assert isinstance(service.driver, S3StorageDriver)
        assert service.driver.bucket == "my-bucket"
        assert service.driver.prefix == "objects"
        mockBoto3.assert_called_once_with(
            "s3",
            region_name="us-east-1",
            aws_access_key_id="key-id",
            aws_secret_access_key="key-secret",
        )

    def testInjectConfigMissing(self, mockConfigManager):
        """Test that missing configuration raises error"""
        mockConfigManager.getStorageConfig.return_value = {}

        with pytest.raises(StorageConfigError, match="Storage configuration is missing"):
            StorageService.getInstance().injectConfig(mockConfigManager)

    def testInjectConfigMissingType(self, mockConfigManager):
        """Test that missing type raises error"""
        mockConfigManager.getStorageConfig.return_value = {"s3": {"bucket": "b"}}

        with pytest.raises(StorageConfigError, match="Storage type is not specified"):
            StorageService.getInstance().injectConfig(mockConfigManager)

    def testInjectConfigUnknownType(self, mockConfigManager):
        """Test that unknown type raises error"""
        mockConfigManager.getStorageConfig.return_value = {"type": "floppy"}

        with pytest.raises(StorageConfigError, match="Unknown storage type: floppy"):
            StorageService.getInstance().injectConfig(mockConfigManager)

    def testInjectConfigMissingDriverSection(self, mockConfigManager):
        """Test that missing driver section raises error"""
        mockConfigManager.getStorageConfig.return_value = {"type": "s3"}

        with pytest.raises(StorageConfigError, match="Storage configuration for 's3' is missing"):
            StorageService.getInstance().injectConfig(mockConfigManager)

    def testInjectConfigMissingBucket(self, mockConfigManager):
        """Test that driver config errors propagate unchanged"""
        mockConfigManager.getStorageConfig.return_value = {"type": "s3", "s3": {"region": "us-east-1"}}

        with patch("bucketkv.drivers.s3.boto3.client") as mockBoto3:
            with pytest.raises(StorageConfigError, match="bucket"):
                StorageService.getInstance().injectConfig(mockConfigManager)

        mockBoto3.assert_not_called()

    def testInjectConfigWrapsUnexpectedErrors(self, mockConfigManager):
        """Test that unexpected errors become StorageConfigError"""
        mockConfigManager.getStorageConfig.side_effect = RuntimeError("boom")

        with pytest.raises(StorageConfigError, match="Failed to initialize storage service"):
            StorageService.getInstance().injectConfig(mockConfigManager)

    def testRegisterDriver(self, mockConfigManager):
        """Test that custom drivers can be registered by type"""
        customDriver = Mock(spec=AbstractStorageDriver)
        factory = Mock(return_value=customDriver)
        mockConfigManager.getStorageConfig.return_value = {"type": "memory", "memory": {"size": 10}}

        service = StorageService.getInstance()
        service.registerDriver("memory", factory)
        service.injectConfig(mockConfigManager)

        factory.assert_called_once_with({"size": 10})
        assert service.driver is customDriver

    def testInjectConfigTwiceRaisesError(self, configuredService, mockConfigManager):
        """Test that reconfiguring without dispose keeps the first driver open"""
        firstDriver = configuredService.driver

        with patch("bucketkv.drivers.s3.boto3.client") as mockBoto3:
            with pytest.raises(StorageConfigError, match="already configured"):
                configuredService.injectConfig(mockConfigManager)

        mockBoto3.assert_not_called()
        assert configuredService.driver is firstDriver
        assert firstDriver.client.closed is False

    @pytest.mark.asyncio
    async def testInjectConfigAfterDispose(self, configuredService, mockConfigManager):
        """Test that dispose allows configuring a new driver"""
        firstDriver = configuredService.driver
        await configuredService.dispose()

        with patch("bucketkv.drivers.s3.boto3.client", return_value=FakeS3Client()):
            configuredService.injectConfig(mockConfigManager)

        assert configuredService.initialized is True
        assert configuredService.driver is not firstDriver


class TestStorageServiceOperations:
    """Test StorageService delegation, dood!"""

    @pytest.mark.asyncio
    async def testOperationsBeforeConfigRaiseError(self):
        """Test that operations require configuration"""
        service = StorageService.getInstance()

        with pytest.raises(StorageConfigError, match="not initialized"):
            await service.getItem("key")

    @pytest.mark.asyncio
    async def testFullCycle(self, configuredService):
        """Test store, read, list, meta, remove and clear through the service"""
        await configuredService.setItem("a", "alpha")
        await configuredService.setItemRaw("b", b"beta", {"meta": {"owner": "x"}})

        assert await configuredService.hasItem("a") is True
        assert await configuredService.getItem("a") == "alpha"
        assert await configuredService.getItemRaw("b") == b"beta"
        assert sorted(await configuredService.getKeys()) == ["a", "b"]

        meta = await configuredService.getMeta("b")
        assert meta is not None
        assert meta["meta"] == {"owner": "x"}

        await configuredService.removeItem("a")
        assert await configuredService.getItem("a") is None
        assert await configuredService.getItemRaw("a") is None

        await configuredService.clear()
        assert await configuredService.getKeys() == []

    @pytest.mark.asyncio
    async def testDisposeResetsService(self, configuredService):
        """Test that dispose closes the driver and unconfigures the service"""
        client = configuredService.driver.client

        await configuredService.dispose()

        assert client.closed is True
        assert configuredService.driver is None
        assert configuredService.initialized is False
        with pytest.raises(StorageConfigError):
            await configuredService.getKeys()

    @pytest.mark.asyncio
    async def testDisposeUnconfiguredIsNoop(self):
        """Test that dispose without configuration does nothing"""
        await StorageService.getInstance().dispose()

    @pytest.mark.asyncio
    async def testDelegatesToDriver(self, mockConfigManager):
        """Test that the service passes arguments through to the driver"""
        driver = Mock(spec=AbstractStorageDriver)
        driver.removeItem = AsyncMock()
        mockConfigManager.getStorageConfig.return_value = {"type": "mock", "mock": {"x": 1}}
        service = StorageService.getInstance()
        service.registerDriver("mock", Mock(return_value=driver))
        service.injectConfig(mockConfigManager)

        await service.removeItem("key", {"version": "v1"})

        driver.removeItem.assert_awaited_once_with("key", {"version": "v1"})

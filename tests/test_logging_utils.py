"""
Tests for logging utilities, dood!
"""

import logging
from logging.handlers import TimedRotatingFileHandler

import pytest

from bucketkv.logging_utils import NOISY_LOGGERS, configureLogger, getLogLevelByStr, initLogging


@pytest.fixture
def isolatedLogger():
    """Provide a logger that is cleaned up after the test, dood!"""
    logger = logging.getLogger("bucketkv.tests.isolated")
    yield logger
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def restoreRootLogger():
    """Restore root and AWS SDK loggers after initLogging, dood!"""
    rootLogger = logging.getLogger()
    savedHandlers = rootLogger.handlers[:]
    savedLevel = rootLogger.level
    savedSdkLevels = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield rootLogger
    for handler in rootLogger.handlers[:]:
        rootLogger.removeHandler(handler)
    for handler in savedHandlers:
        rootLogger.addHandler(handler)
    rootLogger.setLevel(savedLevel)
    for name, level in savedSdkLevels.items():
        logging.getLogger(name).setLevel(level)


class TestGetLogLevelByStr:
    def testKnownLevels(self):
        assert getLogLevelByStr("debug") == logging.DEBUG
        assert getLogLevelByStr("WARNING") == logging.WARNING

    def testUnknownLevelGivesDefault(self):
        assert getLogLevelByStr("chatty") is None
        assert getLogLevelByStr("chatty", logging.INFO) == logging.INFO


class TestConfigureLogger:
    def testConsoleHandler(self, isolatedLogger):
        configureLogger(isolatedLogger, {"level": "DEBUG", "console": True, "propagate": False})

        assert isolatedLogger.level == logging.DEBUG
        assert isolatedLogger.propagate is False
        assert len(isolatedLogger.handlers) == 1
        assert isinstance(isolatedLogger.handlers[0], logging.StreamHandler)

    def testReconfigureReplacesHandlers(self, isolatedLogger):
        configureLogger(isolatedLogger, {"console": True})
        configureLogger(isolatedLogger, {"console": True})

        assert len(isolatedLogger.handlers) == 1

    def testFileHandler(self, isolatedLogger, tmp_path):
        logFile = tmp_path / "logs" / "bucketkv.log"

        configureLogger(isolatedLogger, {"level": "INFO", "file": str(logFile), "file-level": "WARNING"})
        isolatedLogger.warning("stored, dood!")
        for handler in isolatedLogger.handlers:
            handler.flush()

        assert isolatedLogger.handlers[0].level == logging.WARNING
        assert "stored, dood!" in logFile.read_text()

    def testRotatingFileHandler(self, isolatedLogger, tmp_path):
        configureLogger(isolatedLogger, {"file": str(tmp_path / "rotating.log"), "rotate": True})

        assert isinstance(isolatedLogger.handlers[0], TimedRotatingFileHandler)


class TestInitLogging:
    def testQuietensSdkLoggers(self, restoreRootLogger):
        initLogging({"level": "DEBUG"})

        assert restoreRootLogger.level == logging.DEBUG
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def testConfiguresNamedLoggers(self, restoreRootLogger, isolatedLogger):
        initLogging({"level": "INFO", "logger": {isolatedLogger.name: {"level": "ERROR"}}})

        assert isolatedLogger.level == logging.ERROR

    def testExportedFromPackage(self):
        import bucketkv
        from bucketkv import logging_utils

        assert bucketkv.initLogging is logging_utils.initLogging
        assert "initLogging" in bucketkv.__all__

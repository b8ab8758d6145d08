"""Configuration loading for bucketkv."""

from .manager import ConfigManager, substituteEnvVars

__all__ = ["ConfigManager", "substituteEnvVars"]

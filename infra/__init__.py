"""
Infrastructure module exports.

Configuration and bootstrap for all service backends.
"""

from .config import AudioConfig, get_config, TTSBackendType, StorageBackendType, DatasetBackendType
from .bootstrap import AudioBootstrap, bootstrap_infrastructure

__all__ = [
    "AudioConfig",
    "get_config",
    "TTSBackendType",
    "StorageBackendType",
    "DatasetBackendType",
    "AudioBootstrap",
    "bootstrap_infrastructure",
]

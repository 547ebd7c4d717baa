"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from infra.config import AudioConfig  # noqa: E402
from services.datasets import DatasetError, PitchDataset, AudioDataset  # noqa: E402
from services.storage import ObjectStore, StorageError  # noqa: E402


class FailingAudioDataset(AudioDataset):
    """Audio dataset whose every query fails."""

    async def query(self, term, reading, sources):
        raise DatasetError("no such table: entries")


class FailingPitchDataset(PitchDataset):
    """Pitch dataset whose every query fails."""

    async def query(self, term, reading):
        raise DatasetError("no such table: pitch_accents")


class FailingWriteObjectStore(ObjectStore):
    """Object store that reads nothing and rejects every write."""

    async def get(self, key):
        return None

    async def put(self, key, data):
        raise StorageError("bucket unavailable")


@pytest.fixture
def audio_config():
    """Default configuration: auth off, TTS on, stub/in-memory backends."""
    return AudioConfig()


@pytest.fixture
def auth_config():
    """Configuration with API-key authentication enabled."""
    return AudioConfig(authentication_enabled=True, api_keys=("key-one", "key-two"))


@pytest.fixture
def failing_audio_dataset():
    return FailingAudioDataset()


@pytest.fixture
def failing_pitch_dataset():
    return FailingPitchDataset()


@pytest.fixture
def failing_write_store():
    return FailingWriteObjectStore()

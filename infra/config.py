"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
All components default to the free, local-first stack (stub synthesizer,
in-memory stores) so the server starts without credentials.

The resulting AudioConfig is passed explicitly into pipeline calls; nothing
in the pipeline reads the environment itself.
"""

import os
from typing import Literal, Optional, Tuple
from dataclasses import dataclass, field

from services.tts import TTSBackend, StubTTSBackend, HttpTTSBackend
from services.storage import ObjectStore, InMemoryObjectStore, SQLiteObjectStore
from services.datasets import (
    AudioDataset,
    PitchDataset,
    InMemoryAudioDataset,
    InMemoryPitchDataset,
    SQLiteAudioDataset,
    SQLitePitchDataset,
)


TTSBackendType = Literal["stub", "http"]
StorageBackendType = Literal["memory", "sqlite"]
DatasetBackendType = Literal["memory", "sqlite"]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _split_keys(raw: str) -> Tuple[str, ...]:
    return tuple(key.strip() for key in raw.split(",") if key.strip())


@dataclass(frozen=True)
class AudioConfig:
    """Audio service configuration from environment."""

    # Authentication
    authentication_enabled: bool = False
    api_keys: Tuple[str, ...] = field(default_factory=tuple)

    # TTS
    tts_enabled: bool = True
    tts_backend: TTSBackendType = "stub"
    tts_endpoint_url: str = ""
    tts_api_token: Optional[str] = None
    tts_voice: str = "Tomoko"
    tts_language: str = "ja-JP"
    tts_engine: str = "neural"
    tts_output_format: str = "mp3"
    tts_timeout_s: float = 30.0

    # Object store (pre-recorded audio + TTS cache)
    storage_backend: StorageBackendType = "memory"
    storage_db_path: str = "./audio_objects.db"

    # Datasets
    dataset_backend: DatasetBackendType = "memory"
    audio_db_path: str = "./audio_entries.db"
    pitch_db_path: str = "./pitch_accents.db"

    @classmethod
    def from_env(cls) -> "AudioConfig":
        """
        Load configuration from environment variables.

        Defaults prioritize a free, local-first stack:
        - Auth: disabled
        - TTS: enabled, stub synthesizer
        - Storage and datasets: in-memory
        """
        return cls(
            # Authentication
            authentication_enabled=_env_flag("AUTHENTICATION_ENABLED", "false"),
            api_keys=_split_keys(os.getenv("API_KEYS", "")),

            # TTS Configuration
            tts_enabled=_env_flag("TTS_ENABLED", "true"),
            tts_backend=os.getenv("TTS_BACKEND", "stub"),  # type: ignore
            tts_endpoint_url=os.getenv("TTS_ENDPOINT_URL", ""),
            tts_api_token=os.getenv("TTS_API_TOKEN") or None,
            tts_voice=os.getenv("TTS_VOICE", "Tomoko"),
            tts_language=os.getenv("TTS_LANGUAGE", "ja-JP"),
            tts_engine=os.getenv("TTS_ENGINE", "neural"),
            tts_output_format=os.getenv("TTS_OUTPUT_FORMAT", "mp3"),
            tts_timeout_s=float(os.getenv("TTS_TIMEOUT_S", "30")),

            # Storage Configuration
            storage_backend=os.getenv("STORAGE_BACKEND", "memory"),  # type: ignore
            storage_db_path=os.getenv("STORAGE_DB_PATH", "./audio_objects.db"),

            # Dataset Configuration
            dataset_backend=os.getenv("DATASET_BACKEND", "memory"),  # type: ignore
            audio_db_path=os.getenv("AUDIO_DB_PATH", "./audio_entries.db"),
            pitch_db_path=os.getenv("PITCH_DB_PATH", "./pitch_accents.db"),
        )

    def create_tts_backend(self) -> Optional[TTSBackend]:
        """Create TTS backend instance based on configuration."""
        if not self.tts_enabled:
            return None

        if self.tts_backend == "http":
            return HttpTTSBackend(
                endpoint_url=self.tts_endpoint_url,
                api_token=self.tts_api_token,
                timeout_s=self.tts_timeout_s,
            )
        elif self.tts_backend == "stub":
            return StubTTSBackend()
        else:
            raise ValueError(f"Unknown TTS_BACKEND: {self.tts_backend}")

    def create_object_store(self) -> ObjectStore:
        """Create object store instance based on configuration."""
        if self.storage_backend == "sqlite":
            return SQLiteObjectStore(db_path=self.storage_db_path)
        elif self.storage_backend == "memory":
            return InMemoryObjectStore()
        else:
            raise ValueError(f"Unknown STORAGE_BACKEND: {self.storage_backend}")

    def create_audio_dataset(self) -> AudioDataset:
        """Create audio-record dataset based on configuration."""
        if self.dataset_backend == "sqlite":
            return SQLiteAudioDataset(db_path=self.audio_db_path)
        elif self.dataset_backend == "memory":
            return InMemoryAudioDataset()
        else:
            raise ValueError(f"Unknown DATASET_BACKEND: {self.dataset_backend}")

    def create_pitch_dataset(self) -> PitchDataset:
        """Create pitch-accent dataset based on configuration."""
        if self.dataset_backend == "sqlite":
            return SQLitePitchDataset(db_path=self.pitch_db_path)
        elif self.dataset_backend == "memory":
            return InMemoryPitchDataset()
        else:
            raise ValueError(f"Unknown DATASET_BACKEND: {self.dataset_backend}")


def get_config() -> AudioConfig:
    """Get audio service configuration from the environment."""
    return AudioConfig.from_env()

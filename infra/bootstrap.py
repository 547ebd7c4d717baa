"""
Infrastructure initialization and bootstrap.

Singleton pattern for creating all service backends from configuration.
"""

from typing import Optional

from services.tts import TTSBackend
from services.storage import ObjectStore
from services.datasets import AudioDataset, PitchDataset

from .config import AudioConfig, get_config


class AudioBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["AudioBootstrap"] = None

    def __init__(
        self,
        config: Optional[AudioConfig] = None,
        *,
        tts_backend: Optional[TTSBackend] = None,
        object_store: Optional[ObjectStore] = None,
        audio_dataset: Optional[AudioDataset] = None,
        pitch_dataset: Optional[PitchDataset] = None,
    ):
        """
        Initialize bootstrap with configuration.

        Explicit backends override the ones the configuration would create.
        """
        self.config = config or get_config()
        self.tts_backend = tts_backend if tts_backend is not None else self.config.create_tts_backend()
        self.object_store = object_store if object_store is not None else self.config.create_object_store()
        self.audio_dataset = audio_dataset if audio_dataset is not None else self.config.create_audio_dataset()
        self.pitch_dataset = pitch_dataset if pitch_dataset is not None else self.config.create_pitch_dataset()

    @classmethod
    def get_instance(cls, config: Optional[AudioConfig] = None) -> "AudioBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton AudioBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def set_instance(cls, instance: "AudioBootstrap") -> None:
        """Install a prebuilt instance (for testing)."""
        cls._instance = instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def __repr__(self) -> str:
        """String representation showing configured backends."""
        return (
            f"AudioBootstrap(tts={self.config.tts_backend if self.config.tts_enabled else 'disabled'}, "
            f"storage={self.config.storage_backend}, "
            f"datasets={self.config.dataset_backend}, "
            f"auth={'on' if self.config.authentication_enabled else 'off'})"
        )


def bootstrap_infrastructure(config: Optional[AudioConfig] = None) -> AudioBootstrap:
    """
    Bootstrap all infrastructure backends.

    Args:
        config: Optional custom configuration

    Returns:
        AudioBootstrap instance with all backends initialized
    """
    return AudioBootstrap.get_instance(config)

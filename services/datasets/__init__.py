"""
Dataset service exports.

Audio-record and pitch-accent dataset boundaries with in-memory and SQLite
backends.
"""

from .types import AudioEntry, PitchEntry, PitchOrigin
from .base import AudioDataset, PitchDataset, DatasetError
from .memory import InMemoryAudioDataset, InMemoryPitchDataset
from .sqlite import SQLiteAudioDataset, SQLitePitchDataset

__all__ = [
    "AudioEntry",
    "PitchEntry",
    "PitchOrigin",
    "AudioDataset",
    "PitchDataset",
    "DatasetError",
    "InMemoryAudioDataset",
    "InMemoryPitchDataset",
    "SQLiteAudioDataset",
    "SQLitePitchDataset",
]

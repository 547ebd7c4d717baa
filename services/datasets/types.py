"""
Dataset record types.

Rows read from the audio and pitch-accent datasets. Records are immutable;
derived values (display labels) are produced as new records.
"""

from dataclasses import dataclass
from typing import Optional, Literal


PitchOrigin = Literal["dataset", "forced", "sentinel"]


@dataclass(frozen=True)
class AudioEntry:
    """One pre-recorded audio clip from the audio dataset."""

    expression: str
    reading: str
    source: str
    file: str  # object reference, optionally "<folder>/<file>"
    display: Optional[str] = None
    sentence: Optional[str] = None  # original display field after ranking


@dataclass(frozen=True)
class PitchEntry:
    """One pitch-accent pronunciation of an expression."""

    id: str
    expression: str
    reading: str
    pitch: str  # katakana with ' after the mora where pitch drops
    count: int = 0
    origin: PitchOrigin = "dataset"

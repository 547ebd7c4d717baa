"""
In-memory datasets for testing and offline development.

Same matching semantics as the SQLite backends, over plain lists.
"""

from typing import Iterable, List, Optional, Sequence

from .base import AudioDataset, PitchDataset
from .types import AudioEntry, PitchEntry


class InMemoryAudioDataset(AudioDataset):
    """Audio records held in a list, queried in insertion order."""

    def __init__(self, entries: Optional[Iterable[AudioEntry]] = None):
        self.entries: List[AudioEntry] = list(entries or [])

    def add(self, entry: AudioEntry) -> None:
        self.entries.append(entry)

    async def query(self, term: str, reading: str, sources: Sequence[str]) -> List[AudioEntry]:
        restrict = len(sources) > 0 and "all" not in sources

        results = []
        for entry in self.entries:
            if reading:
                matched = entry.expression == term or entry.reading == reading
            else:
                matched = entry.expression == term

            if matched and (not restrict or entry.source in sources):
                results.append(entry)
        return results


class InMemoryPitchDataset(PitchDataset):
    """Pitch-accent rows held in a list, queried in insertion order."""

    def __init__(self, entries: Optional[Iterable[PitchEntry]] = None):
        self.entries: List[PitchEntry] = list(entries or [])

    def add(self, entry: PitchEntry) -> None:
        self.entries.append(entry)

    async def query(self, term: str, reading: str) -> List[PitchEntry]:
        if reading:
            return [e for e in self.entries if e.expression == term and e.reading == reading]
        return [e for e in self.entries if e.expression == term]

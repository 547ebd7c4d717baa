"""
Dataset abstract interfaces.

Read-only query boundaries for the audio-record dataset and the pitch-accent
dataset. Pipeline code depends ONLY on these interfaces.

Rules:
- Queries never mutate the dataset
- Result order is the dataset's order (callers rely on it for ranking ties)
- Failures raise DatasetError; there are no retries at this layer
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from .types import AudioEntry, PitchEntry


class DatasetError(Exception):
    """A dataset query could not be completed."""
    pass


class AudioDataset(ABC):
    """Abstract audio-record dataset."""

    @abstractmethod
    async def query(self, term: str, reading: str, sources: Sequence[str]) -> List[AudioEntry]:
        """
        Find audio records for a term.

        Args:
            term: Expression to match exactly
            reading: Hiragana reading; when non-empty, records whose reading
                matches are returned as well
            sources: Source tags to restrict to; containing "all" disables
                the restriction

        Returns:
            Matching AudioEntry rows in dataset order

        Raises:
            DatasetError: If the query fails
        """
        raise NotImplementedError


class PitchDataset(ABC):
    """Abstract pitch-accent dataset."""

    @abstractmethod
    async def query(self, term: str, reading: str) -> List[PitchEntry]:
        """
        Find pitch-accent rows for a term.

        Matches on expression, or on expression AND reading when the
        reading is non-empty. Rows are returned in dataset order.

        Raises:
            DatasetError: If the query fails
        """
        raise NotImplementedError

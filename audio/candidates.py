"""
Pre-recorded audio candidate aggregation.

Queries the audio dataset, labels each record with its source, display
text and match quality, and ranks the result.

Match quality tags:
    (E+R)  expression and reading both match the query
    (E)    expression only
    (R)    reading only

Ranking is a stable sort on (match quality, source priority), so records
that tie keep the dataset's order.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from audio.errors import UpstreamFailure
from audio.params import AudioSource, source_values
from pronunciation.kana import to_hiragana
from services.datasets import AudioDataset, AudioEntry, DatasetError

logger = logging.getLogger(__name__)

MATCH_BOTH = " (E+R)"
MATCH_EXPRESSION = " (E)"
MATCH_READING = " (R)"

_MATCH_PRIORITY = (
    ("(E+R)", 0),
    ("(E)", 1),
    ("(R)", 2),
)
UNLABELED_PRIORITY = 3

SOURCE_PRIORITY: Dict[str, int] = {
    "core": 0,
    "alt": 1,
}
UNRANKED_SOURCE = len(SOURCE_PRIORITY)


async def query_candidates(
    term: str,
    reading: str,
    sources: Sequence[AudioSource],
    audio_dataset: AudioDataset,
) -> List[AudioEntry]:
    """
    Fetch audio records matching the term (or the reading, when given).

    Raises:
        UpstreamFailure: If the dataset query fails
    """
    hiragana_reading = to_hiragana(reading) if reading and reading.strip() else ""

    try:
        entries = await audio_dataset.query(term, hiragana_reading, source_values(list(sources)))
    except DatasetError as e:
        logger.error(f"Audio dataset query failed for term={term!r}, reading={reading!r}: {e}")
        raise UpstreamFailure("Database query failed") from e

    logger.info(
        f"Searched for {term} + {hiragana_reading} in "
        f"{[s.value for s in sources]} and got {len(entries)} results"
    )
    return entries


def display_name(entry: AudioEntry, term: str, reading: str) -> str:
    """Label a record as <source>[: <display>] plus its match-quality tag."""
    name = entry.source
    if entry.display:
        name += f": {entry.display}"

    if term == entry.expression and reading == entry.reading:
        name += MATCH_BOTH
    elif term == entry.expression:
        name += MATCH_EXPRESSION
    elif reading == entry.reading:
        name += MATCH_READING

    return name


def generate_display_names(entries: Sequence[AudioEntry], term: str, reading: str) -> List[str]:
    return [display_name(entry, term, reading) for entry in entries]


def match_priority(name: Optional[str]) -> int:
    if not name:
        return UNLABELED_PRIORITY
    for tag, priority in _MATCH_PRIORITY:
        if tag in name:
            return priority
    return UNLABELED_PRIORITY


def source_priority(source: str) -> int:
    return SOURCE_PRIORITY.get(source, UNRANKED_SOURCE)


def sort_results(entries: Sequence[AudioEntry], names: Sequence[str]) -> List[AudioEntry]:
    """
    Attach display names and rank the records.

    The computed name replaces `display`; the dataset's display text moves
    to `sentence`. Entries without a name are ranked last.
    """
    labeled = []
    for index, entry in enumerate(entries):
        if index < len(names):
            labeled.append(replace(entry, sentence=entry.display, display=names[index]))
        else:
            labeled.append(replace(entry, display=None))

    # sorted() is stable: ties keep dataset order
    return sorted(
        labeled,
        key=lambda entry: (match_priority(entry.display), source_priority(entry.source)),
    )


async def rank_candidates(
    term: str,
    reading: str,
    sources: Sequence[AudioSource],
    audio_dataset: AudioDataset,
) -> List[AudioEntry]:
    """Query, label and rank pre-recorded audio for a term."""
    entries = await query_candidates(term, reading, sources, audio_dataset)
    names = generate_display_names(entries, term, reading)
    return sort_results(entries, names)

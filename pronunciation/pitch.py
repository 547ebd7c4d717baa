"""
Pitch catalog resolution.

Builds the ordered list of pitch-accent pronunciations offered for TTS:
known dataset rows first (most used first), then generated ("forced")
variants the dataset doesn't already cover.
"""

import logging
from typing import Iterable, List

from audio.errors import UpstreamFailure
from pronunciation.variants import generate_variants
from services.datasets import DatasetError, PitchDataset, PitchEntry

logger = logging.getLogger(__name__)

NO_DB_ENTRY_ID = "Default - No DB"
FORCED_ENTRY_ID = "Forced"


def sort_by_usage(entries: Iterable[PitchEntry]) -> List[PitchEntry]:
    """Most used first; equal counts keep dataset order."""
    return sorted(entries, key=lambda entry: entry.count, reverse=True)


def create_no_db_entry(term: str, reading: str) -> PitchEntry:
    """Sentinel standing in for an empty dataset result."""
    return PitchEntry(
        id=NO_DB_ENTRY_ID,
        expression=term,
        reading=reading,
        pitch="",
        count=0,
        origin="sentinel",
    )


def create_forced_entries(term: str, reading: str) -> List[PitchEntry]:
    """Wrap every generated variant of the reading as a forced entry."""
    return [
        PitchEntry(
            id=FORCED_ENTRY_ID,
            expression=term,
            reading=reading,
            pitch=variant,
            count=0,
            origin="forced",
        )
        for variant in generate_variants(reading)
    ]


def merge_pitch_catalog(term: str, reading: str, dataset_entries: List[PitchEntry]) -> List[PitchEntry]:
    """
    Combine dataset rows with generated variants.

    Args:
        term: Expression the catalog is for
        reading: Hiragana reading used for variant generation
        dataset_entries: Rows from the pitch dataset, in dataset order

    Returns:
        Dataset rows sorted by usage (or the no-DB sentinel when there are
        none), followed by forced entries whose pitch string no dataset row
        already has, in generation order
    """
    known_pitches = {entry.pitch for entry in dataset_entries}

    catalog = sort_by_usage(dataset_entries)
    if not catalog:
        catalog = [create_no_db_entry(term, reading)]

    novel = [
        entry for entry in create_forced_entries(term, reading)
        if entry.pitch not in known_pitches
    ]
    return catalog + novel


async def resolve_pitch_catalog(term: str, reading: str, pitch_dataset: PitchDataset) -> List[PitchEntry]:
    """
    Query the pitch dataset and merge in generated variants.

    Raises:
        UpstreamFailure: If the dataset query fails
    """
    try:
        dataset_entries = await pitch_dataset.query(term, reading)
    except DatasetError as e:
        logger.error(f"Pitch dataset query failed for term={term!r}, reading={reading!r}: {e}")
        raise UpstreamFailure("Database query failed.") from e

    catalog = merge_pitch_catalog(term, reading, dataset_entries)
    logger.info(
        f"Pitch catalog for {term} ({reading}): {len(dataset_entries)} from dataset, "
        f"{len(catalog)} total"
    )
    return catalog

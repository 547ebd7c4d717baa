"""
Request parameter extraction and validation.

Every value is validated once here; the rest of the pipeline receives
normalized strings and AudioSource members only.

Rules:
- A multi-valued parameter collapses to its first value
- HTML tags are stripped and whitespace trimmed
- Readings are converted to hiragana
- Unknown source tags are dropped; an empty filter means "all"
"""

import logging
import re
from enum import Enum
from typing import Any, List, Optional, Tuple

from audio.errors import BadRequest
from pronunciation.kana import to_hiragana

logger = logging.getLogger(__name__)

MAX_TERM_LENGTH = 120
MAX_READING_LENGTH = 120
MAX_PITCH_LENGTH = 160

_HTML_TAG_RE = re.compile(r"<[^>]*>+")

# Placeholder values some clients send for a missing reading
_EMPTY_READING_VALUES = ("null", "undefined")


class AudioSource(str, Enum):
    """Closed set of audio source tags accepted in the source filter."""

    ALL = "all"
    NHK16 = "nhk16"
    DAIJISEN = "daijisen"
    SHINMEIKAI8 = "shinmeikai8"
    JPOD = "jpod"
    TAAS = "taas"
    OZK5 = "ozk5"
    FORVO = "forvo"
    FORVO_EXT = "forvo_ext"
    FORVO_EXT2 = "forvo_ext2"
    TTS = "tts"

    @classmethod
    def parse(cls, value: str) -> Optional["AudioSource"]:
        try:
            return cls(value.strip())
        except ValueError:
            return None


def query_values(query: Any, name: str) -> Optional[List[str]]:
    """All values of a query parameter, or None when it is absent."""
    if hasattr(query, "getlist"):
        values = query.getlist(name)
        return [str(v) for v in values] if values else None

    value = query.get(name)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def extract_query_param(query: Any, name: str) -> Optional[str]:
    """First value of a parameter, "" for an empty list, None when absent."""
    values = query_values(query, name)
    if values is None:
        return None
    return values[0] if values else ""


def strip_html_tags(text: str) -> str:
    return _HTML_TAG_RE.sub("", text)


def unpack_term_reading(query: Any) -> Tuple[str, str]:
    """
    Extract and validate the term and reading parameters.

    The reading stands in for the term when only a reading is given.

    Returns:
        (term, hiragana reading); the reading may be ""

    Raises:
        BadRequest: Missing, empty or oversized parameters
    """
    raw_term = extract_query_param(query, "term")
    raw_reading = extract_query_param(query, "reading")

    if raw_term is None and raw_reading is None:
        raise BadRequest("Missing required parameters: term or reading")

    if raw_term:
        term = strip_html_tags(raw_term).strip()
    elif raw_reading:
        term = strip_html_tags(raw_reading).strip()
    else:
        term = ""

    if raw_reading and raw_reading not in _EMPTY_READING_VALUES:
        reading = strip_html_tags(raw_reading).strip()
    else:
        reading = ""

    if term == "":
        raise BadRequest("Empty parameters: term cannot be empty")

    if len(term) > MAX_TERM_LENGTH:
        raise BadRequest(f"Term parameter is too long (max {MAX_TERM_LENGTH} characters)")

    if len(reading) > MAX_READING_LENGTH:
        raise BadRequest(f"Reading parameter is too long (max {MAX_READING_LENGTH} characters)")

    hiragana_reading = to_hiragana(reading)

    logger.info(f"Unpacked term: {term!r} and reading: {hiragana_reading!r}")
    return term, hiragana_reading


def unpack_sources(query: Any) -> List[AudioSource]:
    """
    Extract the source filter.

    Accepts repeated parameters and comma-separated values. Unknown tags
    are dropped silently.
    """
    raw_values = query_values(query, "sources")
    if raw_values is None:
        return [AudioSource.ALL]

    sources: List[AudioSource] = []
    for raw in raw_values:
        for part in raw.split(","):
            source = AudioSource.parse(part)
            if source is not None and source not in sources:
                sources.append(source)

    if not sources:
        return [AudioSource.ALL]

    logger.info(f"Unpacked audio sources: {', '.join(s.value for s in sources)}")
    return sources


def unpack_pitch(query: Any) -> str:
    """Pitch annotation parameter, "" when absent or empty."""
    pitch = extract_query_param(query, "pitch")
    if not pitch:
        return ""

    pitch = pitch.strip()
    if len(pitch) > MAX_PITCH_LENGTH:
        raise BadRequest(f"Pitch parameter is too long (max {MAX_PITCH_LENGTH} characters)")
    return pitch


def source_values(sources: List[AudioSource]) -> List[str]:
    """Plain tag strings for dataset queries."""
    return [source.value for source in sources]

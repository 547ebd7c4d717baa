"""
Response assembly.

Turns ranked audio records and TTS candidates into the audio source list
returned by /audio/list. Pre-recorded audio always precedes TTS; no further
sorting happens here.
"""

from typing import Dict, List, Literal, Optional, Sequence
from urllib.parse import quote, urlencode

from pydantic import BaseModel

from infra.config import AudioConfig
from services.datasets import AudioEntry


class YomitanAudioSource(BaseModel):
    """One playable candidate."""
    name: str
    url: str


class YomitanResponse(BaseModel):
    """Audio source list response."""
    type: Literal["audioSourceList"] = "audioSourceList"
    audioSources: List[YomitanAudioSource]


def build_url(
    base_url: str,
    path: str,
    params: Optional[Dict[str, str]] = None,
    api_key: Optional[str] = None,
    config: Optional[AudioConfig] = None,
) -> str:
    """
    Absolute URL for a path on this service.

    The apiKey parameter is appended when authentication is enabled.
    """
    query: Dict[str, str] = dict(params or {})
    if config is not None and config.authentication_enabled and api_key:
        query["apiKey"] = api_key

    url = base_url.rstrip("/") + path
    if query:
        url += "?" + urlencode(query, quote_via=quote)
    return url


def audio_entry_path(entry: AudioEntry) -> str:
    """
    /audio/get path for a record.

    A file reference containing "/" is split at the first "/" into a
    folder and a file segment. Further "/" stay unescaped in the file
    segment, which the folder route accepts as a path.
    """
    source = quote(entry.source, safe="")
    if "/" in entry.file:
        folder, file = entry.file.split("/", 1)
        return f"/audio/get/{source}/{quote(folder, safe='')}/{quote(file, safe='/')}"
    return f"/audio/get/{source}/{quote(entry.file, safe='')}"


def audio_entry_url(entry: AudioEntry, base_url: str, api_key: Optional[str], config: AudioConfig) -> str:
    return build_url(base_url, audio_entry_path(entry), api_key=api_key, config=config)


def assemble_response(
    entries: Sequence[AudioEntry],
    tts_candidates: Sequence[YomitanAudioSource],
    base_url: str,
    api_key: Optional[str],
    config: AudioConfig,
) -> YomitanResponse:
    """
    Merge ranked pre-recorded records with TTS candidates.

    Args:
        entries: Ranked audio records (display already computed)
        tts_candidates: TTS candidates in catalog order
        base_url: Service origin used for playback URLs
        api_key: Credential to propagate when authentication is enabled
        config: Audio service configuration

    Returns:
        YomitanResponse with pre-recorded candidates first
    """
    audio_sources = [
        YomitanAudioSource(
            name=entry.display or entry.source,
            url=audio_entry_url(entry, base_url, api_key, config),
        )
        for entry in entries
    ]
    return YomitanResponse(audioSources=audio_sources + list(tts_candidates))

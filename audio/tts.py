"""
TTS orchestration.

Cache-or-synthesize flow for generated pronunciation audio, and the list of
TTS candidates offered alongside pre-recorded audio.

Flow for one /audio/tts request:
    key = tts_cache_key(term, reading, pitch)
    cache hit  -> cached bytes, synthesizer not called
    cache miss -> synthesize once, return bytes immediately, hand back a
                  detached persist task for the caller to schedule

Concurrency:
- Two concurrent misses for the same key both synthesize and both write;
  the last write wins. Object stores replace whole objects, so a reader
  never sees a partial write.
- Persist failures are logged and never reach the client, which already
  has valid audio.
"""

import base64
import functools
import json
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence
from xml.sax.saxutils import escape, quoteattr

from audio.errors import UpstreamFailure
from audio.params import AudioSource
from audio.response import YomitanAudioSource, build_url
from infra.config import AudioConfig
from pronunciation.kana import to_hiragana
from pronunciation.pitch import resolve_pitch_catalog
from services.datasets import PitchDataset, PitchEntry
from services.storage import ObjectStore, StorageError
from services.tts import TTSBackend, TTSRequest

logger = logging.getLogger(__name__)

TTS_OBJECT_PREFIX = "tts_files/"
TTS_OBJECT_SUFFIX = ".mp3"

PersistHook = Callable[[str, bool], None]


def tts_cache_key(term: str, reading: str, pitch: str) -> str:
    """
    Deterministic, URL-safe cache key for a (term, reading, pitch) triple.

    The fields are serialized as a JSON array before encoding, so no field
    content can shift a boundary: distinct triples give distinct keys.
    """
    payload = json.dumps(
        [term, to_hiragana(reading), pitch],
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def tts_object_key(cache_key: str) -> str:
    return f"{TTS_OBJECT_PREFIX}{cache_key}{TTS_OBJECT_SUFFIX}"


def build_synthesis_request(term: str, reading: str, pitch: str, config: AudioConfig) -> TTSRequest:
    """
    Choose the synthesis input for a term.

    - pitch given            -> SSML phoneme with the kana pitch annotation
    - reading equals term    -> plain text
    - reading given          -> SSML ruby reading
    - otherwise              -> plain text
    """
    text_type = "text"
    text = term

    if term and pitch:
        text_type = "ssml"
        text = (
            f'<speak><phoneme alphabet="x-amazon-pron-kana" ph={quoteattr(pitch)}>'
            f"{escape(term)}</phoneme></speak>"
        )
    elif term == reading:
        text_type = "text"
        text = term
    elif term and reading:
        text_type = "ssml"
        text = f'<speak><phoneme type="ruby" ph={quoteattr(reading)}>{escape(term)}</phoneme></speak>'

    return TTSRequest(
        text=text,
        text_type=text_type,
        language=config.tts_language,
        voice=config.tts_voice,
        engine=config.tts_engine,
        audio_format=config.tts_output_format,
        timeout_s=config.tts_timeout_s,
    )


@dataclass
class TTSResolution:
    """Audio for a TTS request plus the detached cache write, if any."""

    key: str
    audio: bytes
    cache_hit: bool
    persist: Optional[Callable[[], Awaitable[bool]]] = None


class TTSOrchestrator:
    """
    Cache-or-synthesize for TTS audio.

    The response path never awaits persistence: resolve() returns the audio
    together with a persist callable the caller schedules (FastAPI
    BackgroundTasks in production, awaited directly in tests).
    """

    def __init__(
        self,
        object_store: ObjectStore,
        tts_backend: Optional[TTSBackend],
        config: AudioConfig,
        on_persisted: Optional[PersistHook] = None,
    ):
        """
        Args:
            object_store: Cache store for synthesized audio
            tts_backend: Synthesizer, or None when TTS is disabled
            config: Audio service configuration
            on_persisted: Optional hook called with (key, ok) after each
                cache write attempt
        """
        self.object_store = object_store
        self.tts_backend = tts_backend
        self.config = config
        self.on_persisted = on_persisted

    async def fetch_cached(self, key: str) -> Optional[bytes]:
        try:
            return await self.object_store.get(tts_object_key(key))
        except StorageError as e:
            raise UpstreamFailure("Audio cache read failed") from e

    async def synthesize(self, term: str, reading: str, pitch: str) -> bytes:
        """
        Call the synthesizer once.

        Raises:
            UpstreamFailure: TTS disabled or the synthesizer did not succeed
        """
        if self.tts_backend is None:
            raise UpstreamFailure("TTS is disabled", status_code=503)

        request = build_synthesis_request(term, reading, pitch, self.config)
        response = await self.tts_backend.synthesize(request)

        logger.info(
            f"Generated new TTS audio for term: {term}, reading: {reading}, pitch: {pitch} "
            f"({request.text_type}: {request.text})"
        )

        if response.status != "success" or not response.audio_data:
            logger.error(
                f"TTS synthesis failed for term: {term}, reading: {reading}: "
                f"status={response.status}, error_type={response.error_type}, "
                f"upstream_status={response.status_code}, metadata={response.metadata}"
            )
            raise UpstreamFailure("TTS request failed.")

        return response.audio_data

    async def persist(self, key: str, audio: bytes) -> bool:
        """
        Write synthesized audio to the cache.

        Never raises: the client already has its audio.
        """
        ok = False
        try:
            await self.object_store.put(tts_object_key(key), audio)
            ok = True
            logger.info(f"Saved TTS audio to cache: {key}")
        except Exception as e:
            logger.error(f"Failed to save TTS audio {key} to cache: {e}", exc_info=True)

        if self.on_persisted is not None:
            self.on_persisted(key, ok)
        return ok

    async def resolve(self, term: str, reading: str, pitch: str) -> TTSResolution:
        """
        Cached audio for the triple, or freshly synthesized audio.

        Returns:
            TTSResolution; on a miss `persist` is set and must be scheduled
            by the caller without awaiting it on the response path
        """
        key = tts_cache_key(term, reading, pitch)

        cached = await self.fetch_cached(key)
        if cached is not None:
            logger.info(f"Using cached TTS data: {term}, {reading}, {pitch}")
            return TTSResolution(key=key, audio=cached, cache_hit=True)

        audio = await self.synthesize(term, reading, pitch)
        return TTSResolution(
            key=key,
            audio=audio,
            cache_hit=False,
            persist=functools.partial(self.persist, key, audio),
        )


def tts_candidate_name(entry: PitchEntry) -> str:
    if entry.origin == "dataset":
        return f"TTS ({entry.pitch} Pitch DB)"
    if entry.pitch:
        return f"TTS ({entry.pitch} {entry.id})"
    return f"TTS ({entry.id})"


def tts_enabled_for(sources: Sequence[AudioSource], config: AudioConfig) -> bool:
    """TTS candidates are offered only when enabled and not filtered out."""
    if not config.tts_enabled:
        return False
    return AudioSource.ALL in sources or AudioSource.TTS in sources


def list_tts_candidates(
    sources: Sequence[AudioSource],
    catalog: Sequence[PitchEntry],
    base_url: str,
    api_key: Optional[str],
    config: AudioConfig,
) -> List[YomitanAudioSource]:
    """
    One /audio/tts candidate per pitch catalog entry.

    Returns an empty list when TTS is disabled or excluded by the source
    filter.
    """
    if not tts_enabled_for(sources, config):
        return []

    return [
        YomitanAudioSource(
            name=tts_candidate_name(entry),
            url=build_url(
                base_url,
                "/audio/tts",
                {"term": entry.expression, "reading": entry.reading, "pitch": entry.pitch},
                api_key=api_key,
                config=config,
            ),
        )
        for entry in catalog
    ]


async def resolve_tts_candidates(
    term: str,
    reading: str,
    sources: Sequence[AudioSource],
    pitch_dataset: PitchDataset,
    base_url: str,
    api_key: Optional[str],
    config: AudioConfig,
) -> List[YomitanAudioSource]:
    """
    Resolve the pitch catalog and list its TTS candidates.

    The pitch dataset is not queried when TTS is disabled or filtered out.
    """
    if not tts_enabled_for(sources, config):
        return []

    catalog = await resolve_pitch_catalog(term, reading, pitch_dataset)
    return list_tts_candidates(sources, catalog, base_url, api_key, config)

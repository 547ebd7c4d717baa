"""
Audio Routes

GET /audio/list                          candidate list (pre-recorded + TTS)
GET /audio/get/{source}/{file}           pre-recorded audio bytes
GET /audio/get/{source}/{folder}/{file:path}  pre-recorded audio bytes
GET /audio/tts                           cache-or-synthesize TTS audio

Every route checks the API key first (no-op when authentication is off).
Errors are raised as AudioServiceError and mapped to status codes in main.

TTS cache writes are scheduled as background tasks and run after the
response is sent.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response

from api.security import verify_api_key
from audio.candidates import rank_candidates
from audio.params import unpack_pitch, unpack_sources, unpack_term_reading
from audio.recordings import fetch_recording
from audio.response import YomitanResponse, assemble_response
from audio.tts import TTSOrchestrator, resolve_tts_candidates
from infra.bootstrap import AudioBootstrap

# Setup logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/audio", tags=["audio"])

MP3_MEDIA_TYPE = "audio/mpeg"


def get_bootstrap() -> AudioBootstrap:
    """Process-wide backends and configuration."""
    return AudioBootstrap.get_instance()


def get_tts_orchestrator(bootstrap: AudioBootstrap = Depends(get_bootstrap)) -> TTSOrchestrator:
    return TTSOrchestrator(
        object_store=bootstrap.object_store,
        tts_backend=bootstrap.tts_backend,
        config=bootstrap.config,
    )


def _loggable_query(request: Request) -> dict:
    return {k: v for k, v in request.query_params.items() if k != "apiKey"}


@router.get("/list", response_model=YomitanResponse)
async def list_audio(request: Request, bootstrap: AudioBootstrap = Depends(get_bootstrap)):
    """Ranked pre-recorded candidates followed by TTS candidates."""
    config = bootstrap.config
    api_key = verify_api_key(request.query_params, config)

    logger.info(f"Searching for audio with: {_loggable_query(request)}")

    term, reading = unpack_term_reading(request.query_params)
    sources = unpack_sources(request.query_params)
    base_url = str(request.base_url)

    entries = await rank_candidates(term, reading, sources, bootstrap.audio_dataset)
    tts_candidates = await resolve_tts_candidates(
        term, reading, sources, bootstrap.pitch_dataset, base_url, api_key, config
    )

    return assemble_response(entries, tts_candidates, base_url, api_key, config)


@router.get("/get/{source}/{file}")
async def get_audio(
    source: str,
    file: str,
    request: Request,
    bootstrap: AudioBootstrap = Depends(get_bootstrap),
):
    """Pre-recorded audio stored directly under the source."""
    verify_api_key(request.query_params, bootstrap.config)

    audio = await fetch_recording(source, file, bootstrap.object_store)
    return Response(content=audio, media_type=MP3_MEDIA_TYPE)


@router.get("/get/{source}/{folder}/{file:path}")
async def get_audio_in_folder(
    source: str,
    folder: str,
    file: str,
    request: Request,
    bootstrap: AudioBootstrap = Depends(get_bootstrap),
):
    """Pre-recorded audio stored in a folder under the source."""
    verify_api_key(request.query_params, bootstrap.config)

    audio = await fetch_recording(source, f"{folder}/{file}", bootstrap.object_store)
    return Response(content=audio, media_type=MP3_MEDIA_TYPE)


@router.get("/tts")
async def tts_audio(
    request: Request,
    background_tasks: BackgroundTasks,
    bootstrap: AudioBootstrap = Depends(get_bootstrap),
    orchestrator: TTSOrchestrator = Depends(get_tts_orchestrator),
):
    """Cached TTS audio, or freshly synthesized audio cached after the response."""
    verify_api_key(request.query_params, bootstrap.config)

    term, reading = unpack_term_reading(request.query_params)
    pitch = unpack_pitch(request.query_params)

    resolution = await orchestrator.resolve(term, reading, pitch)

    if resolution.persist is not None:
        background_tasks.add_task(resolution.persist)

    return Response(content=resolution.audio, media_type=MP3_MEDIA_TYPE)

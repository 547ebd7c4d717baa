"""
Pre-recorded audio retrieval.

Recordings are stored in the object store under "<source>_files/<file>",
where <file> may itself be "<folder>/<file>".
"""

import logging

from audio.errors import BadRequest, NotFound, UpstreamFailure
from services.storage import ObjectStore, StorageError

logger = logging.getLogger(__name__)


def _check_segment(segment: str) -> None:
    if not segment or segment in (".", "..") or "\\" in segment:
        raise BadRequest("Invalid audio path")


def recording_object_key(source: str, file: str) -> str:
    """
    Object key for a recording.

    Raises:
        BadRequest: Empty or relative ("..") path segments
    """
    _check_segment(source)
    if "/" in source:
        raise BadRequest("Invalid audio path")
    for segment in file.split("/"):
        _check_segment(segment)
    return f"{source}_files/{file}"


async def fetch_recording(source: str, file: str, object_store: ObjectStore) -> bytes:
    """
    Read a recording's bytes.

    Raises:
        NotFound: No object under the key
        UpstreamFailure: The object store failed
    """
    key = recording_object_key(source, file)
    logger.info(f"Fetching audio: {source}/{file}")

    try:
        audio = await object_store.get(key)
    except StorageError as e:
        raise UpstreamFailure("Audio storage read failed") from e

    if audio is None:
        raise NotFound("File not found")
    return audio

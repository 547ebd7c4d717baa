"""
Text-to-Speech (TTS) abstract interface.

Role: synthesis input (plain text or SSML) -> audio bytes only.

Rules:
- Output-only (no state mutation, no caching)
- No dataset or object store access
- All failures are explicit and typed; backends return a status instead
  of raising
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any, Literal


TTSStatus = Literal["success", "recoverable_error", "fatal_error"]
TextType = Literal["text", "ssml"]


@dataclass
class TTSRequest:
    """Text-to-Speech request."""

    text: str
    text_type: TextType = "text"
    language: str = "ja-JP"
    voice: str = "Tomoko"
    engine: str = "neural"
    audio_format: str = "mp3"
    timeout_s: Optional[float] = 30


@dataclass
class TTSResponse:
    """Text-to-Speech response."""

    status: TTSStatus
    audio_data: Optional[bytes] = None  # Raw audio bytes
    audio_format: str = "mp3"
    error_type: Optional[str] = None  # timeout | invalid_text | backend_unavailable | upstream_status
    status_code: Optional[int] = None  # upstream HTTP status, when there is one
    metadata: Optional[Dict[str, Any]] = None


class TTSBackend(ABC):
    """
    Abstract TTS boundary.
    Pipeline code must depend ONLY on this interface.
    """

    @abstractmethod
    async def synthesize(self, request: TTSRequest) -> TTSResponse:
        """
        Synthesize text to audio.

        Args:
            request: TTSRequest with text, text type and voice parameters

        Returns:
            TTSResponse with audio data or explicit error status
        """
        raise NotImplementedError

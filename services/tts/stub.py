"""
Stub TTS backend for testing and offline development.

Returns hash-derived bytes so identical synthesis input gives identical audio.
"""

import hashlib

from .base import TTSBackend, TTSRequest, TTSResponse


class StubTTSBackend(TTSBackend):
    """
    Deterministic fake TTS for testing and CI.

    Same request text -> same bytes; different text -> different bytes.
    Counts calls so tests can assert how often synthesis happened.
    """

    def __init__(self):
        self.calls = 0

    async def synthesize(self, request: TTSRequest) -> TTSResponse:
        self.calls += 1

        if not request.text:
            return TTSResponse(
                status="recoverable_error",
                error_type="invalid_text",
                metadata={"backend": "stub_tts"},
            )

        digest = hashlib.sha256(f"{request.text_type}:{request.text}".encode("utf-8")).digest()
        audio_data = b"ID3" + digest

        return TTSResponse(
            status="success",
            audio_data=audio_data,
            audio_format=request.audio_format,
            metadata={
                "backend": "stub_tts",
                "text_length": len(request.text),
            },
        )

"""
Text-to-Speech service exports.

Clean interface for the pipeline to import TTS components.
"""

from .base import TTSBackend, TTSRequest, TTSResponse, TTSStatus, TextType
from .stub import StubTTSBackend
from .speech_endpoint import HttpTTSBackend

__all__ = [
    "TTSBackend",
    "TTSRequest",
    "TTSResponse",
    "TTSStatus",
    "TextType",
    "StubTTSBackend",
    "HttpTTSBackend",
]

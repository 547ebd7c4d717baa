"""
HTTP speech endpoint TTS backend.

POSTs a Polly SynthesizeSpeech-shaped JSON body to a configured endpoint
(a Polly-compatible gateway or signing proxy) and returns the audio body:

    {
        "Engine": "neural",
        "LanguageCode": "ja-JP",
        "OutputFormat": "mp3",
        "Text": "<speak>...</speak>",
        "TextType": "ssml",
        "VoiceId": "Tomoko"
    }

Environment variables (read by infra.config):
  TTS_ENDPOINT_URL  Full URL of the speech endpoint
  TTS_API_TOKEN     Bearer token sent in the Authorization header (optional)
"""

import logging
from typing import Optional

import httpx

from .base import TTSBackend, TTSRequest, TTSResponse

logger = logging.getLogger(__name__)


class HttpTTSBackend(TTSBackend):
    """
    Speech synthesis over HTTP.

    The async client is created lazily and reused across requests.
    """

    def __init__(
        self,
        endpoint_url: str,
        api_token: Optional[str] = None,
        timeout_s: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            endpoint_url: Speech endpoint URL
            api_token: Optional bearer token
            timeout_s: Default request timeout
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        if not endpoint_url:
            raise ValueError("TTS_ENDPOINT_URL not set")

        self.endpoint_url = endpoint_url
        self.api_token = api_token
        self.timeout_s = timeout_s
        self._transport = transport
        self.http_client: Optional[httpx.AsyncClient] = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self.http_client is None:
            headers = {"Content-Type": "application/json"}
            if self.api_token:
                headers["Authorization"] = f"Bearer {self.api_token}"
            self.http_client = httpx.AsyncClient(
                timeout=self.timeout_s,
                headers=headers,
                transport=self._transport,
            )
        return self.http_client

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None

    async def synthesize(self, request: TTSRequest) -> TTSResponse:
        metadata = {"backend": "http_tts", "endpoint": self.endpoint_url}

        if not request.text:
            return TTSResponse(status="recoverable_error", error_type="invalid_text", metadata=metadata)

        payload = {
            "Engine": request.engine,
            "LanguageCode": request.language,
            "OutputFormat": request.audio_format,
            "Text": request.text,
            "TextType": request.text_type,
            "VoiceId": request.voice,
        }

        try:
            client = await self._get_http_client()
            response = await client.post(
                self.endpoint_url,
                json=payload,
                timeout=request.timeout_s or self.timeout_s,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Speech endpoint timed out: {e}")
            return TTSResponse(status="recoverable_error", error_type="timeout", metadata=metadata)
        except httpx.HTTPError as e:
            logger.error(f"Speech endpoint unreachable: {e}")
            return TTSResponse(status="fatal_error", error_type="backend_unavailable", metadata=metadata)

        if response.status_code != 200:
            logger.error(
                f"Speech endpoint returned {response.status_code}: {response.text[:500]}"
            )
            return TTSResponse(
                status="recoverable_error" if response.status_code >= 500 else "fatal_error",
                error_type="upstream_status",
                status_code=response.status_code,
                metadata=metadata,
            )

        return TTSResponse(
            status="success",
            audio_data=response.content,
            audio_format=request.audio_format,
            status_code=response.status_code,
            metadata={**metadata, "bytes": len(response.content)},
        )

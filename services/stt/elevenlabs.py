"""
ElevenLabs speech-to-text backend.

Posts the prepared multipart payload to the ElevenLabs batch
transcription endpoint. No retries. No reply interpretation.
"""

import logging
from typing import Dict, List, Optional, Union

import httpx

from .base import OutboundPayload, TranscriptionBackend, TranscriptionBackendError, UpstreamReply

logger = logging.getLogger(__name__)

ELEVENLABS_API_URL = "https://api.elevenlabs.io/v1/speech-to-text"


class ElevenLabsSTTBackend(TranscriptionBackend):
    """
    ElevenLabs STT over HTTPS.

    The credential travels in the ``xi-api-key`` header. Any transport-level
    failure is raised as TranscriptionBackendError; HTTP error statuses are
    returned as-is for the caller to map.
    """

    def __init__(
        self,
        api_url: str = ELEVENLABS_API_URL,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            api_url: Transcription endpoint
            timeout_s: Transport timeout in seconds, None waits indefinitely
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.api_url = api_url
        self.timeout_s = timeout_s
        self._transport = transport

    @staticmethod
    def _form_data(payload: OutboundPayload) -> Dict[str, Union[str, List[str]]]:
        data: Dict[str, Union[str, List[str]]] = {}
        for name, value in payload.form_fields():
            if name == "keyterms":
                data.setdefault(name, [])
                data[name].append(value)  # type: ignore[union-attr]
            else:
                data[name] = value
        return data

    async def send(self, payload: OutboundPayload, api_key: str) -> UpstreamReply:
        headers = {"xi-api-key": api_key}
        files = {"file": (payload.filename, payload.file_data, payload.content_type)}

        logger.info(
            f"Sending request to ElevenLabs API",
            extra={
                "url": self.api_url,
                "file_size": len(payload.file_data),
                "api_key_prefix": api_key[:10] + "...",
            }
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.post(
                    self.api_url,
                    data=self._form_data(payload),
                    files=files,
                    headers=headers,
                )
        except httpx.RequestError as e:
            logger.error(f"Fetch error: {e}", exc_info=True)
            raise TranscriptionBackendError(f"Network error: {e}") from e

        logger.info(
            f"Response status: {response.status_code} {response.reason_phrase}",
            extra={"status_code": response.status_code}
        )

        return UpstreamReply(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            text=response.text,
        )

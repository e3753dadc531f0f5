"""
Speech-to-Text (STT) abstract interface.

Role: deliver one prepared multipart payload to a transcription service
and hand back the raw reply.

Rules:
- One call per request (no retries)
- No interpretation of the reply body (mapping lives in the transport layer)
- Network failures are explicit and typed
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class OutboundPayload:
    """Multipart body sent to the transcription service."""

    file_data: bytes
    filename: str
    content_type: Optional[str]
    model_id: str
    entity_detection: Optional[str] = None  # JSON-encoded array
    keyterms: Tuple[str, ...] = field(default_factory=tuple)
    language_code: Optional[str] = None
    diarize: Optional[str] = None  # "true" or absent
    tag_audio_events: Optional[str] = None  # "true" or absent

    def form_fields(self) -> List[Tuple[str, str]]:
        """
        Non-file form fields in wire order.

        Keyterms appear once per term so the service receives them as a
        repeated field rather than a single JSON array.
        """
        fields = [("model_id", self.model_id)]
        if self.entity_detection is not None:
            fields.append(("entity_detection", self.entity_detection))
        fields.extend(("keyterms", term) for term in self.keyterms)
        if self.language_code is not None:
            fields.append(("language_code", self.language_code))
        if self.diarize is not None:
            fields.append(("diarize", self.diarize))
        if self.tag_audio_events is not None:
            fields.append(("tag_audio_events", self.tag_audio_events))
        return fields


@dataclass(frozen=True)
class UpstreamReply:
    """Raw reply from the transcription service, body read exactly once."""

    status_code: int
    reason_phrase: str = ""
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class TranscriptionBackendError(Exception):
    """Transcription service could not be reached."""
    pass


class TranscriptionBackend(ABC):
    """
    Abstract STT boundary.
    Transport code must depend ONLY on this interface.
    """

    @abstractmethod
    async def send(self, payload: OutboundPayload, api_key: str) -> UpstreamReply:
        """
        Deliver the payload to the transcription service.

        Args:
            payload: Fully normalized multipart payload
            api_key: Credential for the service

        Returns:
            UpstreamReply with status and raw body text

        Raises:
            TranscriptionBackendError: The service could not be reached
        """
        raise NotImplementedError

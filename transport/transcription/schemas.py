"""
Transcription Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Only defines the contract between the HTTP caller and the proxy core.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# INBOUND (CALLER -> PROXY)
# ============================================================================

# Multipart field names as sent by the browser client
AUDIO_FIELD = "audio"
OPTION_FIELDS = (
    "entityDetection",
    "keyterms",
    "languageCode",
    "diarize",
    "tagAudioEvents",
)


class Upload(BaseModel):
    """Audio file submitted by the caller. Lives for one request only."""

    data: bytes = Field(..., description="Raw file bytes")
    filename: Optional[str] = Field(None, description="Original file name, if any")
    content_type: Optional[str] = Field(None, description="Declared MIME type, if any")

    class Config:
        """Pydantic config."""
        frozen = True

    @property
    def size(self) -> int:
        return len(self.data)


class TranscriptionOptions(BaseModel):
    """
    Optional transcription parameters after validation.

    None / False means "omit from the outbound request".
    """

    entity_detection: Optional[List[Any]] = Field(
        None,
        description="Entity categories to detect (non-empty when set)"
    )
    keyterms: Optional[List[str]] = Field(
        None,
        description="Trimmed keyterms, each 1-50 chars (non-empty when set)"
    )
    language_code: Optional[str] = None
    diarize: bool = False
    tag_audio_events: bool = False

    class Config:
        """Pydantic config."""
        frozen = True


# ============================================================================
# OUTBOUND (PROXY -> CALLER)
# ============================================================================

class ProxyError(BaseModel):
    """Normalized error body returned to the caller."""

    error: str = Field(..., description="Human-readable message")
    message: Optional[str] = Field(None, description="Exception text for internal errors")
    details: Optional[Any] = Field(None, description="Upstream error object or debug info")

    def to_body(self) -> dict:
        return self.model_dump(exclude_none=True)


class ProxyResponse(BaseModel):
    """Status code plus JSON body, independent of the hosting framework."""

    status_code: int
    body: Any

    @classmethod
    def from_error(cls, status_code: int, error: ProxyError) -> "ProxyResponse":
        return cls(status_code=status_code, body=error.to_body())

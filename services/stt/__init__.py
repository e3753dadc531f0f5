"""
Speech-to-Text service exports.

Clean interface for the transport layer to import STT components.
"""

from typing import Dict, Optional, Tuple

from fastapi import Depends

from config import Config, get_config

from .base import (
    OutboundPayload,
    TranscriptionBackend,
    TranscriptionBackendError,
    UpstreamReply,
)
from .elevenlabs import ELEVENLABS_API_URL, ElevenLabsSTTBackend
from .stub import StubSTTBackend

# One backend per (url, timeout) pair
_backends: Dict[Tuple[str, Optional[float]], TranscriptionBackend] = {}


def get_transcription_backend(config: Config = Depends(get_config)) -> TranscriptionBackend:
    """Get or create the ElevenLabs backend for the given configuration."""
    key = (config.elevenlabs_api_url, config.upstream_timeout_s)

    if key not in _backends:
        _backends[key] = ElevenLabsSTTBackend(
            api_url=config.elevenlabs_api_url,
            timeout_s=config.upstream_timeout_s,
        )

    return _backends[key]


__all__ = [
    "OutboundPayload",
    "TranscriptionBackend",
    "TranscriptionBackendError",
    "UpstreamReply",
    "ELEVENLABS_API_URL",
    "ElevenLabsSTTBackend",
    "StubSTTBackend",
    "get_transcription_backend",
]

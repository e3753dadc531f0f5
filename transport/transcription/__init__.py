"""Transcription Transport Layer - Module Exports"""

from .errors import (
    ConfigurationError,
    InvalidUploadError,
    KeytermLimitError,
    TranscriptionError,
    UploadTooLargeError,
)
from .handler import handle_transcription
from .normalize import (
    build_options,
    build_payload,
    parse_entity_detection,
    parse_keyterms,
    resolve_file_identity,
)
from .router import create_transcription_router, router
from .schemas import ProxyError, ProxyResponse, TranscriptionOptions, Upload
from .upstream import map_upstream_reply

__all__ = [
    # Schemas
    "Upload",
    "TranscriptionOptions",
    "ProxyError",
    "ProxyResponse",
    # Errors
    "TranscriptionError",
    "ConfigurationError",
    "InvalidUploadError",
    "KeytermLimitError",
    "UploadTooLargeError",
    # Normalization
    "resolve_file_identity",
    "parse_entity_detection",
    "parse_keyterms",
    "build_options",
    "build_payload",
    # Upstream
    "map_upstream_reply",
    # Handler
    "handle_transcription",
    # Router
    "create_transcription_router",
    "router",
]

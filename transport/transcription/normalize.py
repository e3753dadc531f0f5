"""
Transcription Input Normalization

PURE CONVERSION - NO NETWORK, NO FRAMEWORK

Turns the caller's multipart upload into the payload the transcription
service expects:
- FILE: resolve a usable file name and content type
- ENTITY DETECTION: JSON array -> compact JSON string
- KEYTERMS: JSON array -> trimmed, length-checked repeated fields
- FLAGS: only literal true is forwarded

Malformed optional fields are dropped with a warning, never an error.
"""

import json
import logging
from typing import Any, List, Mapping, Optional, Tuple

from services.stt import OutboundPayload

from .errors import KeytermLimitError
from .schemas import TranscriptionOptions, Upload

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "audio.webm"
DEFAULT_CONTENT_TYPE = "audio/webm"

MAX_KEYTERMS = 100
MAX_KEYTERM_LENGTH = 50

# Declared MIME type -> (file name, content type) for extensionless uploads
_MIME_FILE_IDENTITY = {
    "audio/mpeg": ("audio.mp3", "audio/mpeg"),
    "audio/mp3": ("audio.mp3", "audio/mpeg"),
    "audio/wav": ("audio.wav", "audio/wav"),
    "audio/wave": ("audio.wav", "audio/wav"),
    "audio/mp4": ("audio.m4a", "audio/mp4"),
    "audio/m4a": ("audio.m4a", "audio/mp4"),
}


def resolve_file_identity(
    filename: Optional[str],
    content_type: Optional[str],
) -> Tuple[str, Optional[str]]:
    """
    Pick the file name and content type sent upstream.

    The service infers the format from the extension, so a name without
    one is replaced based on the declared MIME type.

    Args:
        filename: Original file name (may be None or empty)
        content_type: Declared MIME type (may be None or empty)

    Returns:
        (filename, content_type)
    """
    name = filename or DEFAULT_FILENAME

    if "." in name:
        return name, content_type or None

    if content_type in _MIME_FILE_IDENTITY:
        return _MIME_FILE_IDENTITY[content_type]

    return DEFAULT_FILENAME, content_type or DEFAULT_CONTENT_TYPE


def _utf16_length(text: str) -> int:
    """Length in UTF-16 code units, so characters outside the BMP count twice."""
    return len(text.encode("utf-16-le")) // 2


def _js_string(value: Any) -> str:
    """Stringify a decoded JSON value the way a browser client would."""
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, list):
        return ",".join("" if item is None else _js_string(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def parse_entity_detection(raw: Optional[str]) -> Optional[List[Any]]:
    """
    Parse the entityDetection field.

    Returns:
        The decoded list if it is a non-empty JSON array, else None
    """
    if not raw:
        return None

    try:
        entity_types = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid entity_detection format: {e}")
        return None

    if not isinstance(entity_types, list) or not entity_types:
        logger.warning(
            f"Ignoring entity_detection: expected a non-empty array",
            extra={"entity_detection": raw}
        )
        return None

    return entity_types


def parse_keyterms(raw: Optional[str]) -> Optional[List[str]]:
    """
    Parse and filter the keyterms field.

    The count limit applies to the decoded array before filtering.

    Returns:
        Trimmed keyterms (1-50 UTF-16 units each), or None if nothing survives

    Raises:
        KeytermLimitError: More than MAX_KEYTERMS entries
    """
    if not raw:
        return None

    try:
        keyterms = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid keyterms format: {e}")
        return None

    if not isinstance(keyterms, list) or not keyterms:
        logger.warning(
            f"Ignoring keyterms: expected a non-empty array",
            extra={"keyterms": raw}
        )
        return None

    if len(keyterms) > MAX_KEYTERMS:
        raise KeytermLimitError(f"Maximum {MAX_KEYTERMS} keyterms allowed")

    valid_keyterms = []
    for term in keyterms:
        trimmed = _js_string(term).strip()
        if not trimmed:
            continue
        if _utf16_length(trimmed) > MAX_KEYTERM_LENGTH:
            logger.warning(
                f'Keyterm "{trimmed}" exceeds {MAX_KEYTERM_LENGTH} characters, skipping'
            )
            continue
        valid_keyterms.append(trimmed)

    return valid_keyterms or None


def is_enabled_flag(value: Any) -> bool:
    """True only for boolean True or the literal string "true"."""
    return value is True or value == "true"


def build_options(fields: Mapping[str, Any]) -> TranscriptionOptions:
    """
    Validate the optional multipart fields.

    Args:
        fields: Caller fields keyed by their wire names
            (entityDetection, keyterms, languageCode, diarize, tagAudioEvents)

    Returns:
        TranscriptionOptions

    Raises:
        KeytermLimitError: Too many keyterms
    """
    language_code = fields.get("languageCode")

    return TranscriptionOptions(
        entity_detection=parse_entity_detection(fields.get("entityDetection")),
        keyterms=parse_keyterms(fields.get("keyterms")),
        language_code=language_code if language_code else None,
        diarize=is_enabled_flag(fields.get("diarize")),
        tag_audio_events=is_enabled_flag(fields.get("tagAudioEvents")),
    )


def build_payload(
    upload: Upload,
    options: TranscriptionOptions,
    model_id: str,
) -> OutboundPayload:
    """
    Assemble the outbound multipart payload.

    Args:
        upload: Caller's audio file
        options: Validated options
        model_id: Fixed model identifier

    Returns:
        OutboundPayload ready for a TranscriptionBackend
    """
    filename, content_type = resolve_file_identity(upload.filename, upload.content_type)

    entity_detection = None
    if options.entity_detection:
        entity_detection = json.dumps(options.entity_detection, separators=(",", ":"))

    return OutboundPayload(
        file_data=upload.data,
        filename=filename,
        content_type=content_type,
        model_id=model_id,
        entity_detection=entity_detection,
        keyterms=tuple(options.keyterms or ()),
        language_code=options.language_code,
        diarize="true" if options.diarize else None,
        tag_audio_events="true" if options.tag_audio_events else None,
    )

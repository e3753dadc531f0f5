"""
Transcription Request Handler

The single core every entry point calls:
1. Check configuration (500 if the credential is missing)
2. Check the upload (400 if absent, 413 if over the cap)
3. Normalize options and build the outbound payload
4. Make exactly one call to the transcription backend
5. Map the reply to the caller response

Framework-free: takes plain values, returns a ProxyResponse.
Nothing raised here escapes to the server.
"""

import logging
import traceback
from typing import Any, Mapping, Optional

from config import Config
from services.stt import TranscriptionBackend

from .errors import ConfigurationError, InvalidUploadError, TranscriptionError, UploadTooLargeError
from .normalize import build_options, build_payload
from .schemas import ProxyError, ProxyResponse, Upload
from .upstream import map_upstream_reply

logger = logging.getLogger(__name__)


def check_upload_size(size: int, config: Config) -> None:
    """Raise UploadTooLargeError if size exceeds the configured cap."""
    if size > config.max_upload_bytes:
        raise UploadTooLargeError(
            f"File too large. Maximum size is {config.max_upload_mb}MB"
        )


def internal_error(exc: Exception, config: Config, expose_traceback: bool = True) -> ProxyResponse:
    """500 body for unexpected failures; development adds the traceback unless disabled."""
    details = None
    if expose_traceback and config.is_development:
        details = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return ProxyResponse.from_error(
        500,
        ProxyError(error="Internal server error", message=str(exc), details=details),
    )


async def handle_transcription(
    config: Config,
    backend: TranscriptionBackend,
    upload: Optional[Upload],
    fields: Mapping[str, Any],
    expose_traceback: bool = True,
) -> ProxyResponse:
    """
    Validate, translate and forward one transcription request.

    Args:
        config: Proxy configuration (credential, model, limits)
        backend: Transcription service client
        upload: Caller's audio file, None if the part was missing
        fields: Optional caller fields keyed by wire name
        expose_traceback: Allow the development traceback in 500 bodies

    Returns:
        ProxyResponse with the upstream JSON or a normalized error
    """
    try:
        if not config.api_key_set:
            raise ConfigurationError("Server configuration error: ELEVENLABS_API_KEY not set")

        if upload is None:
            raise InvalidUploadError("No audio file provided")

        check_upload_size(upload.size, config)

        options = build_options(fields)
        payload = build_payload(upload, options, config.model_id)

        logger.info(
            f"Forwarding transcription request",
            extra={
                "upload_filename": payload.filename,
                "content_type": payload.content_type,
                "file_size": upload.size,
                "declared_type": upload.content_type,
                "entity_detection": payload.entity_detection or "none",
                "keyterm_count": len(payload.keyterms),
                "language_code": payload.language_code,
            }
        )

        reply = await backend.send(payload, config.elevenlabs_api_key)

        if not reply.ok:
            logger.error(
                f"Transcription API error: {reply.status_code} - {reply.text}",
                extra={
                    "status_code": reply.status_code,
                    "error_body": reply.text,
                }
            )

        return map_upstream_reply(reply)

    except TranscriptionError as e:
        logger.warning(f"Transcription request rejected: {e.message}")
        return ProxyResponse.from_error(e.status_code, ProxyError(error=e.message))

    except Exception as e:
        logger.error(f"Transcription error: {e}", exc_info=True)
        return internal_error(e, config, expose_traceback)

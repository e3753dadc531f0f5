"""
Transcription HTTP Receiver

FastAPI router that parses the caller's multipart body and hands it to
handle_transcription(). No translation logic lives here.
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from config import Config, get_config
from services.stt import TranscriptionBackend, get_transcription_backend

from .errors import UploadTooLargeError
from .handler import check_upload_size, handle_transcription
from .schemas import AUDIO_FIELD, OPTION_FIELDS, ProxyError, Upload

logger = logging.getLogger(__name__)

# Allowance for multipart boundaries and the small option fields
MULTIPART_OVERHEAD_BYTES = 1024 * 1024
READ_CHUNK_BYTES = 1024 * 1024


def cors_headers(request: Request, config: Config) -> Dict[str, str]:
    """CORS headers for a standalone function fronting a browser client."""
    origin = request.headers.get("origin")
    if "*" in config.cors_origins:
        allow_origin = "*"
    elif origin in config.cors_origins:
        allow_origin = origin
    else:
        allow_origin = config.cors_origins[0]

    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


def _error(status_code: int, message: str, details: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ProxyError(error=message, details=details).to_body(),
    )


async def _read_upload(part: UploadFile, config: Config) -> Upload:
    """Buffer one uploaded file, stopping as soon as it passes the cap."""
    chunks = []
    size = 0
    while True:
        chunk = await part.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        size += len(chunk)
        check_upload_size(size, config)
        chunks.append(chunk)

    return Upload(
        data=b"".join(chunks),
        filename=part.filename,
        content_type=part.content_type,
    )


def _declared_length(request: Request) -> Optional[int]:
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def create_transcription_router(path: str, expose_traceback: bool = True) -> APIRouter:
    """
    Build the transcription routes at ``path``.

    The standalone server mounts this at /api/transcribe, the serverless
    function at / with expose_traceback=False so its 500 bodies never
    carry a traceback.
    """
    router = APIRouter(tags=["Transcription"])

    @router.options(path)
    async def transcribe_preflight(
        request: Request,
        config: Config = Depends(get_config),
    ) -> Response:
        """Answer CORS preflight with headers and no body."""
        return Response(status_code=status.HTTP_200_OK, headers=cors_headers(request, config))

    @router.post(path)
    async def transcribe(
        request: Request,
        config: Config = Depends(get_config),
        backend: TranscriptionBackend = Depends(get_transcription_backend),
    ) -> JSONResponse:
        """
        Receive an audio upload and relay the transcription.

        Multipart fields:
            audio (file, required)
            entityDetection, keyterms (JSON arrays, optional)
            languageCode, diarize, tagAudioEvents (optional)

        Returns:
            200 with the service JSON, or {error, details?} with
            400 / 413 / 500 / the service's own status
        """
        # Without a credential there is nothing to forward; skip the body
        if not config.api_key_set:
            result = await handle_transcription(config, backend, None, {}, expose_traceback)
            return JSONResponse(status_code=result.status_code, content=result.body)

        declared = _declared_length(request)
        if declared is not None and declared > config.max_upload_bytes + MULTIPART_OVERHEAD_BYTES:
            logger.warning(
                f"Rejecting upload before reading body",
                extra={"content_length": declared, "max_bytes": config.max_upload_bytes}
            )
            return _error(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                f"File too large. Maximum size is {config.max_upload_mb}MB",
            )

        try:
            form = await request.form()
        except (MultiPartException, StarletteHTTPException) as e:
            detail = getattr(e, "message", None) or getattr(e, "detail", None) or str(e)
            logger.warning(f"Failed to parse multipart body: {detail}")
            return _error(status.HTTP_400_BAD_REQUEST, "Invalid multipart body", str(detail))

        try:
            upload = None
            part = form.get(AUDIO_FIELD)
            if isinstance(part, UploadFile):
                upload = await _read_upload(part, config)

            fields = {}
            for name in OPTION_FIELDS:
                value = form.get(name)
                if isinstance(value, str):
                    fields[name] = value
        except UploadTooLargeError as e:
            logger.warning(f"Upload rejected: {e.message}")
            return _error(e.status_code, e.message)
        finally:
            await form.close()

        result = await handle_transcription(config, backend, upload, fields, expose_traceback)
        return JSONResponse(status_code=result.status_code, content=result.body)

    return router


router = create_transcription_router("/api/transcribe")

"""
Transcription proxy error taxonomy.

Each error carries the HTTP status it maps to; the handler turns them
into JSON bodies.
"""


class TranscriptionError(Exception):
    """Request could not be forwarded."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(TranscriptionError):
    """Server is missing required configuration."""

    status_code = 500


class InvalidUploadError(TranscriptionError):
    """Caller sent an unusable request."""

    status_code = 400


class KeytermLimitError(InvalidUploadError):
    """More keyterms than the service accepts."""

    pass


class UploadTooLargeError(TranscriptionError):
    """Upload exceeds the configured size cap."""

    status_code = 413

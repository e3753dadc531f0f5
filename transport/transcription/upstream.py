"""
Upstream Reply Mapping

PURE CONVERSION - (status, reason, body) -> caller response

Success bodies are relayed verbatim. Error bodies are reduced to a
human-readable message plus the service's own error object.
"""

import json
from typing import Any

from services.stt import UpstreamReply

from .schemas import ProxyError, ProxyResponse


def _truthy(value: Any) -> bool:
    """Truthiness as the service's JSON clients see it ({} and [] count)."""
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True


def _field(container: Any, key: str) -> Any:
    if isinstance(container, dict):
        return container.get(key)
    return None


def parse_error_body(reply: UpstreamReply) -> Any:
    """Decode an error body, wrapping plain text as {"message": ...}."""
    try:
        return json.loads(reply.text)
    except ValueError:
        fallback = f"HTTP {reply.status_code}: {reply.reason_phrase}"
        return {"message": reply.text or fallback}


def extract_error_message(error_data: Any, status_code: int, reason_phrase: str) -> str:
    """
    First usable message out of detail.message, message, error.message.

    Falls back to "API Error: <status> <reason>".
    """
    candidates = (
        _field(_field(error_data, "detail"), "message"),
        _field(error_data, "message"),
        _field(_field(error_data, "error"), "message"),
    )
    for candidate in candidates:
        if _truthy(candidate):
            return candidate if isinstance(candidate, str) else json.dumps(candidate)

    return f"API Error: {status_code} {reason_phrase}"


def map_upstream_reply(reply: UpstreamReply) -> ProxyResponse:
    """
    Map the service reply to the caller response.

    Args:
        reply: Raw service reply

    Returns:
        ProxyResponse (200 on success, the service status on error)

    Raises:
        ValueError: A success body is not valid JSON
    """
    if reply.ok:
        return ProxyResponse(status_code=200, body=json.loads(reply.text))

    error_data = parse_error_body(reply)
    detail = _field(error_data, "detail")

    error = ProxyError(
        error=extract_error_message(error_data, reply.status_code, reply.reason_phrase),
        details=detail if _truthy(detail) else error_data,
    )
    return ProxyResponse.from_error(reply.status_code, error)

"""
Stub STT backend for testing and offline development.

Deterministic, fast, and never touches the network.
"""

import json
from typing import List, Optional

from .base import OutboundPayload, TranscriptionBackend, UpstreamReply


class StubSTTBackend(TranscriptionBackend):
    """
    Deterministic fake transcription service for testing and CI.

    Records every payload it receives and answers with a canned reply.
    Without a canned reply it returns a fixed transcript whose length
    depends on the audio size.
    """

    def __init__(self, reply: Optional[UpstreamReply] = None, error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[OutboundPayload] = []
        self.api_keys: List[str] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_payload(self) -> Optional[OutboundPayload]:
        return self.calls[-1] if self.calls else None

    async def send(self, payload: OutboundPayload, api_key: str) -> UpstreamReply:
        self.calls.append(payload)
        self.api_keys.append(api_key)

        if self.error is not None:
            raise self.error

        if self.reply is not None:
            return self.reply

        word_count = max(1, len(payload.file_data) // 100)
        words = [f"word_{i}" for i in range(word_count)]
        body = {
            "language_code": payload.language_code or "eng",
            "language_probability": 0.99,
            "text": " ".join(words),
            "words": [{"text": w, "type": "word"} for w in words],
        }
        return UpstreamReply(status_code=200, reason_phrase="OK", text=json.dumps(body))

"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Config  # noqa: E402
from services.stt import (  # noqa: E402
    OutboundPayload,
    StubSTTBackend,
    TranscriptionBackend,
    TranscriptionBackendError,
    UpstreamReply,
)

TEST_API_KEY = "xi-test-key-0123456789"


class UnreachableSTTBackend(TranscriptionBackend):
    """Backend that always fails at the network level."""

    async def send(self, payload: OutboundPayload, api_key: str) -> UpstreamReply:
        raise TranscriptionBackendError("Network error: transcription service unreachable")


@pytest.fixture
def config():
    """Config with a credential and development tracebacks off."""
    return Config(elevenlabs_api_key=TEST_API_KEY, environment="test")


@pytest.fixture
def unconfigured():
    """Config without a credential."""
    return Config(elevenlabs_api_key="", environment="test")


@pytest.fixture
def stub_backend():
    """Fake transcription service recording every payload."""
    return StubSTTBackend()


@pytest.fixture
def unreachable_backend():
    """Transcription service that cannot be reached."""
    return UnreachableSTTBackend()

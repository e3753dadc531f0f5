"""
Transcription Handler Tests

Core request flow against a fake transcription service:
  - Configuration and upload checks
  - Exactly one outbound call
  - Error taxonomy (400 / 413 / 500 / upstream status)
"""

import json

import pytest

from config import Config
from services.stt import StubSTTBackend, UpstreamReply
from transport.transcription.handler import handle_transcription
from transport.transcription.schemas import Upload


def wav_upload(data=b"0" * 400):
    return Upload(data=data, filename="clip", content_type="audio/wav")


class TestPreconditions:
    """Checks that happen before any outbound call."""

    @pytest.mark.asyncio
    async def test_missing_credential_returns_500(self, unconfigured, stub_backend):
        result = await handle_transcription(unconfigured, stub_backend, wav_upload(), {})

        assert result.status_code == 500
        assert result.body == {"error": "Server configuration error: ELEVENLABS_API_KEY not set"}
        assert stub_backend.call_count == 0

    @pytest.mark.asyncio
    async def test_missing_credential_checked_before_upload(self, unconfigured, stub_backend):
        result = await handle_transcription(unconfigured, stub_backend, None, {})

        assert result.status_code == 500

    @pytest.mark.asyncio
    async def test_missing_audio_returns_400(self, config, stub_backend):
        result = await handle_transcription(config, stub_backend, None, {})

        assert result.status_code == 400
        assert result.body == {"error": "No audio file provided"}
        assert stub_backend.call_count == 0

    @pytest.mark.asyncio
    async def test_too_many_keyterms_returns_400(self, config, stub_backend):
        fields = {"keyterms": json.dumps(["k"] * 101)}
        result = await handle_transcription(config, stub_backend, wav_upload(), fields)

        assert result.status_code == 400
        assert result.body == {"error": "Maximum 100 keyterms allowed"}
        assert stub_backend.call_count == 0

    @pytest.mark.asyncio
    async def test_oversize_upload_returns_413(self, stub_backend):
        small = Config(elevenlabs_api_key="xi-test-key", max_upload_bytes=10, environment="test")
        result = await handle_transcription(small, stub_backend, wav_upload(b"x" * 11), {})

        assert result.status_code == 413
        assert stub_backend.call_count == 0


class TestForwarding:
    """Outbound call and reply relay."""

    @pytest.mark.asyncio
    async def test_success_relays_json(self, config, stub_backend):
        result = await handle_transcription(config, stub_backend, wav_upload(), {})

        assert result.status_code == 200
        assert result.body["text"].startswith("word_0")
        assert stub_backend.call_count == 1
        assert stub_backend.api_keys == [config.elevenlabs_api_key]

    @pytest.mark.asyncio
    async def test_minimal_request_sends_only_file_and_model(self, config, stub_backend):
        await handle_transcription(config, stub_backend, wav_upload(), {})

        payload = stub_backend.last_payload
        assert payload.filename == "audio.wav"
        assert payload.content_type == "audio/wav"
        assert payload.form_fields() == [("model_id", "scribe_v2")]

    @pytest.mark.asyncio
    async def test_boolean_flags(self, config, stub_backend):
        fields = {"diarize": True, "tagAudioEvents": "false"}
        await handle_transcription(config, stub_backend, wav_upload(), fields)

        payload = stub_backend.last_payload
        assert payload.diarize == "true"
        assert payload.tag_audio_events is None

    @pytest.mark.asyncio
    async def test_malformed_optional_fields_do_not_fail(self, config, stub_backend):
        fields = {"entityDetection": "{oops", "keyterms": "[broken"}
        result = await handle_transcription(config, stub_backend, wav_upload(), fields)

        assert result.status_code == 200
        assert stub_backend.last_payload.form_fields() == [("model_id", "scribe_v2")]

    @pytest.mark.asyncio
    async def test_upstream_error_status_is_mirrored(self, config):
        backend = StubSTTBackend(reply=UpstreamReply(
            status_code=404,
            reason_phrase="Not Found",
            text='{"detail":{"message":"not found"}}',
        ))
        result = await handle_transcription(config, backend, wav_upload(), {})

        assert result.status_code == 404
        assert result.body == {"error": "not found", "details": {"message": "not found"}}
        assert backend.call_count == 1


class TestInternalErrors:
    """Unexpected failures become 500 JSON bodies."""

    @pytest.mark.asyncio
    async def test_network_error(self, config, unreachable_backend):
        result = await handle_transcription(config, unreachable_backend, wav_upload(), {})

        assert result.status_code == 500
        assert result.body["error"] == "Internal server error"
        assert "Network error" in result.body["message"]
        assert "details" not in result.body

    @pytest.mark.asyncio
    async def test_unparseable_success_body(self, config):
        backend = StubSTTBackend(reply=UpstreamReply(status_code=200, reason_phrase="OK", text="nope"))
        result = await handle_transcription(config, backend, wav_upload(), {})

        assert result.status_code == 500
        assert result.body["error"] == "Internal server error"

    @pytest.mark.asyncio
    async def test_development_includes_traceback(self):
        dev = Config(elevenlabs_api_key="xi-test-key", environment="development")
        backend = StubSTTBackend(error=RuntimeError("boom"))
        result = await handle_transcription(dev, backend, wav_upload(), {})

        assert result.status_code == 500
        assert result.body["message"] == "boom"
        assert "RuntimeError" in result.body["details"]

    @pytest.mark.asyncio
    async def test_default_config_hides_traceback(self):
        backend = StubSTTBackend(reply=UpstreamReply(status_code=200, reason_phrase="OK", text="not json"))
        result = await handle_transcription(Config(elevenlabs_api_key="xi-test-key"), backend, wav_upload(), {})

        assert result.status_code == 500
        assert result.body["error"] == "Internal server error"
        assert "details" not in result.body

    @pytest.mark.asyncio
    async def test_traceback_can_be_disabled_in_development(self):
        dev = Config(elevenlabs_api_key="xi-test-key", environment="development")
        backend = StubSTTBackend(error=RuntimeError("boom"))
        result = await handle_transcription(dev, backend, wav_upload(), {}, expose_traceback=False)

        assert result.status_code == 500
        assert result.body == {"error": "Internal server error", "message": "boom"}

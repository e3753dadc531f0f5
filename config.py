"""
Configuration management for the transcription proxy.

Loads environment variables from .env file and provides typed access to configuration.
The Config object is built once by the entry points and passed into the handler.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"

DEFAULT_API_URL = "https://api.elevenlabs.io/v1/speech-to-text"
DEFAULT_MODEL_ID = "scribe_v2"
DEFAULT_MAX_UPLOAD_MB = 100


def _optional_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


@dataclass(frozen=True)
class Config:
    """Configuration for the transcription proxy."""

    # ElevenLabs
    elevenlabs_api_key: str = ""
    elevenlabs_api_url: str = DEFAULT_API_URL
    model_id: str = DEFAULT_MODEL_ID
    upstream_timeout_s: Optional[float] = None

    # Uploads
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024

    # HTTP
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))
    port: int = 3000

    # Environment
    environment: str = "production"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables (and .env if present)."""
        load_dotenv(env_path)

        raw_origins = os.getenv("CORS_ORIGINS", "*")
        origins = tuple(o.strip() for o in raw_origins.split(",") if o.strip())

        return cls(
            elevenlabs_api_key=os.getenv("ELEVENLABS_API_KEY", ""),
            elevenlabs_api_url=os.getenv("ELEVENLABS_API_URL", DEFAULT_API_URL),
            model_id=os.getenv("ELEVENLABS_MODEL_ID", DEFAULT_MODEL_ID),
            upstream_timeout_s=_optional_float(os.getenv("ELEVENLABS_TIMEOUT_S")),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_MB", str(DEFAULT_MAX_UPLOAD_MB))) * 1024 * 1024,
            cors_origins=origins or ("*",),
            port=int(os.getenv("PORT", "3000")),
            environment=os.getenv("ENVIRONMENT", "production"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def api_key_set(self) -> bool:
        return bool(self.elevenlabs_api_key)

    @property
    def api_key_prefix(self) -> str:
        """First 10 characters of the key, safe to log."""
        if not self.elevenlabs_api_key:
            return "not set"
        return self.elevenlabs_api_key[:10] + "..."

    @property
    def max_upload_mb(self) -> int:
        return self.max_upload_bytes // (1024 * 1024)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def validate(self) -> bool:
        """Validate that required configuration is set."""
        required = ["elevenlabs_api_key"]
        missing = [key for key in required if not getattr(self, key)]
        return not missing


_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the process-wide Config (singleton)."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


if __name__ == "__main__":
    # Test configuration loading
    cfg = Config.from_env()
    print("Configuration loaded:")
    print(f"  ElevenLabs API Key: {'✓ Set' if cfg.api_key_set else '✗ Missing'}")
    print(f"  ElevenLabs API URL: {cfg.elevenlabs_api_url}")
    print(f"  Model: {cfg.model_id}")
    print(f"  Max upload: {cfg.max_upload_mb}MB")
    print(f"  Environment: {cfg.environment}")

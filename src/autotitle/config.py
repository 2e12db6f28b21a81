"""Configuration settings for the autotitle sidecar."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings

from .host.models import ModelRef

DEFAULT_MAX_LENGTH = 60
DEFAULT_PROVIDER = "anthropic"


class DebugMode(str, Enum):
    """Where verbose logging goes."""

    OFF = "off"
    STDERR = "stderr"
    FILE = "file"


class Settings(BaseSettings):
    """Plugin settings loaded from OPENCODE_AUTOTITLE_* environment variables."""

    # Title pipeline
    model: str | None = None
    provider: str | None = None
    max_length: int = DEFAULT_MAX_LENGTH
    disabled: bool = False
    debug: str | None = None
    max_idle_retries: int = 5

    # Host runtime
    host_url: str = "http://127.0.0.1:4096"
    directory: str | None = None
    request_timeout: float = 30.0
    event_stream: bool = True

    # Sidecar server
    host: str = "127.0.0.1"
    port: int = 4097
    auth_token: str | None = None

    model_config = {
        "env_prefix": "OPENCODE_AUTOTITLE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("max_length", mode="before")
    @classmethod
    def _default_max_length(cls, value: Any) -> int:
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            return DEFAULT_MAX_LENGTH
        return parsed if parsed > 0 else DEFAULT_MAX_LENGTH

    @field_validator("model", "provider", "debug", "directory", "auth_token", mode="before")
    @classmethod
    def _empty_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def debug_mode(self) -> DebugMode:
        """Normalise the raw debug value: 1/true, 0/false, or a file path."""
        if self.debug is None or self.debug.lower() in ("0", "false"):
            return DebugMode.OFF
        if self.debug.lower() in ("1", "true"):
            return DebugMode.STDERR
        return DebugMode.FILE

    @property
    def debug_file(self) -> Path | None:
        """Absolute path of the debug log file, if logging to a file."""
        if self.debug_mode != DebugMode.FILE:
            return None
        return Path(self.debug).expanduser().resolve()

    @property
    def model_override(self) -> ModelRef | None:
        """The configured model as a provider/model pair."""
        if not self.model:
            return None
        return parse_model_override(self.model)


def parse_model_override(value: str) -> ModelRef:
    """Parse "provider/model", defaulting the provider when no slash is given."""
    if "/" in value:
        provider_id, model_id = value.split("/", 1)
    else:
        provider_id, model_id = DEFAULT_PROVIDER, value
    return ModelRef(provider_id=provider_id, model_id=model_id)


def load_settings(**overrides: Any) -> Settings:
    """Build a settings snapshot from the environment."""
    return Settings(**overrides)

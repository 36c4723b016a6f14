"""Process-wide relay configuration, read from the environment once at startup."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_BASE = "https://api.telegram.org"
DEFAULT_TEXT_PREFIX = "ElevenLabs says: "

_REQUIRED = ("TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID")


class ConfigurationError(Exception):
    """Raised when required settings are missing or malformed."""


class RelayConfig(BaseModel):
    """Immutable settings shared by the client, forwarder and app."""

    model_config = ConfigDict(frozen=True)

    bot_token: str = Field(min_length=1, repr=False)
    chat_id: str = Field(min_length=1)
    elevenlabs_api_key: str = Field(default="", repr=False)  # reserved
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    api_base: str = DEFAULT_API_BASE
    text_timeout: float = Field(default=10.0, gt=0)
    audio_timeout: float = Field(default=20.0, gt=0)
    text_prefix: str = DEFAULT_TEXT_PREFIX
    audit_log_path: str | None = None
    audit_log_max_bytes: int = Field(default=10_485_760, gt=0)
    audit_log_backup_count: int = Field(default=5, ge=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RelayConfig:
        """Build the config from environment variables.

        Raises ConfigurationError naming every missing or malformed variable.
        """
        env = os.environ if environ is None else environ

        missing = [name for name in _REQUIRED if not env.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        errors: list[str] = []

        def _number(name: str, default: str, cast: type) -> float | int | None:
            raw = env.get(name, default)
            try:
                return cast(raw)
            except ValueError:
                errors.append(f"{name}={raw!r}")
                return None

        port = _number("PORT", "3000", int)
        text_timeout = _number("TEXT_TIMEOUT", "10", float)
        audio_timeout = _number("AUDIO_TIMEOUT", "20", float)
        max_bytes = _number("AUDIT_LOG_MAX_BYTES", "10485760", int)
        backup_count = _number("AUDIT_LOG_BACKUP_COUNT", "5", int)
        if errors:
            raise ConfigurationError(
                f"Invalid numeric environment variables: {', '.join(errors)}"
            )

        try:
            return cls(
                bot_token=env["TELEGRAM_BOT_TOKEN"],
                chat_id=env["TELEGRAM_CHAT_ID"],
                elevenlabs_api_key=env.get("ELEVENLABS_API_KEY", ""),
                host=env.get("HOST", "0.0.0.0"),
                port=port,
                api_base=env.get("TELEGRAM_API_BASE", DEFAULT_API_BASE),
                text_timeout=text_timeout,
                audio_timeout=audio_timeout,
                text_prefix=env.get("TEXT_PREFIX", DEFAULT_TEXT_PREFIX),
                audit_log_path=env.get("AUDIT_LOG_PATH") or None,
                audit_log_max_bytes=max_bytes,
                audit_log_backup_count=backup_count,
                log_level=env.get("LOG_LEVEL", "INFO").upper(),
            )
        except ValueError as exc:
            # pydantic.ValidationError subclasses ValueError
            raise ConfigurationError(str(exc)) from exc

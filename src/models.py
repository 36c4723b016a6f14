"""Shared Pydantic data models for the ElevenLabs to Telegram relay."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class OutboundKind(str, Enum):
    TEXT = "text"
    AUDIO = "audio"


class AuditEventType(str, Enum):
    WEBHOOK_RECEIVED = "webhook_received"
    RELAY_TEXT = "relay_text"
    RELAY_AUDIO = "relay_audio"
    TEST_RELAY = "test_relay"


# --- Extraction Models ---


class ExtractedMessage(BaseModel):
    """Best-effort text/audio pair pulled out of an inbound webhook body."""

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    audio_url: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.text is None and self.audio_url is None


# --- Outbound Models ---


class OutboundRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    chat_id: str
    kind: OutboundKind
    payload: str

    def to_json(self) -> dict[str, str]:
        """Render the Telegram Bot API request body."""
        field = "text" if self.kind == OutboundKind.TEXT else "audio"
        return {"chat_id": self.chat_id, field: self.payload}


class DeliveryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: OutboundKind
    chat_id: str
    response: Any = None


class RelayAttempt(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: OutboundKind
    success: bool
    error: str | None = None
    response: Any = None


class ForwardOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: ExtractedMessage
    attempts: list[RelayAttempt] = Field(default_factory=list)

    @property
    def delivered(self) -> list[RelayAttempt]:
        return [a for a in self.attempts if a.success]

    @property
    def failed(self) -> list[RelayAttempt]:
        return [a for a in self.attempts if not a.success]


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    action: str
    result: str
    details: dict[str, Any] = Field(default_factory=dict)

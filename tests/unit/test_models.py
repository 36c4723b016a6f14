"""Tests for shared Pydantic data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.models import (
    AuditEvent,
    AuditEventType,
    ExtractedMessage,
    ForwardOutcome,
    OutboundKind,
    OutboundRequest,
    RelayAttempt,
)


class TestExtractedMessage:
    def test_empty_by_default(self):
        assert ExtractedMessage().is_empty is True

    def test_not_empty_with_audio(self):
        assert ExtractedMessage(audio_url="http://x/a.mp3").is_empty is False

    def test_frozen(self):
        msg = ExtractedMessage(text="hi")
        with pytest.raises(ValidationError):
            msg.text = "other"


class TestOutboundRequest:
    def test_text_body(self):
        req = OutboundRequest(chat_id="42", kind=OutboundKind.TEXT, payload="hi")
        assert req.to_json() == {"chat_id": "42", "text": "hi"}

    def test_audio_body(self):
        req = OutboundRequest(chat_id="42", kind=OutboundKind.AUDIO, payload="http://x/a.mp3")
        assert req.to_json() == {"chat_id": "42", "audio": "http://x/a.mp3"}


class TestForwardOutcome:
    def test_partial_success_split(self):
        outcome = ForwardOutcome(
            message=ExtractedMessage(text="hi", audio_url="http://x/a.mp3"),
            attempts=[
                RelayAttempt(kind=OutboundKind.TEXT, success=True),
                RelayAttempt(kind=OutboundKind.AUDIO, success=False, error="down"),
            ],
        )
        assert [a.kind for a in outcome.delivered] == [OutboundKind.TEXT]
        assert [a.kind for a in outcome.failed] == [OutboundKind.AUDIO]


class TestAuditEvent:
    def test_timestamp_defaults_to_utc_iso(self):
        event = AuditEvent(
            event_type=AuditEventType.TEST_RELAY, action="test_relay", result="success",
        )
        assert event.timestamp.endswith("+00:00")

    def test_event_type_serializes_lowercase(self):
        event = AuditEvent(
            event_type=AuditEventType.RELAY_AUDIO, action="relay", result="error",
        )
        assert event.model_dump(mode="json")["event_type"] == "relay_audio"

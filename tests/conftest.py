"""Shared test fixtures for the ElevenLabs to Telegram relay."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.audit.logger import AuditLogger
from src.config import RelayConfig
from src.models import DeliveryResult, OutboundKind
from src.relay.telegram import TelegramClient

TEST_BOT_TOKEN = "123:ABC"
TEST_CHAT_ID = "6668840327"


def make_config(**kwargs: Any) -> RelayConfig:
    """Factory for RelayConfig with sensible defaults."""
    defaults: dict[str, Any] = {
        "bot_token": TEST_BOT_TOKEN,
        "chat_id": TEST_CHAT_ID,
        "text_prefix": "",
    }
    defaults.update(kwargs)
    return RelayConfig(**defaults)


def make_delivery(kind: OutboundKind = OutboundKind.TEXT, **kwargs: Any) -> DeliveryResult:
    """Factory for DeliveryResult echoing a Telegram ok response."""
    defaults: dict[str, Any] = {
        "kind": kind,
        "chat_id": TEST_CHAT_ID,
        "response": {"ok": True, "result": {"message_id": 1}},
    }
    defaults.update(kwargs)
    return DeliveryResult(**defaults)


def make_http_client_mock(mock_client_cls: MagicMock) -> AsyncMock:
    """Wire a patched ``httpx.AsyncClient`` class to an async context manager mock."""
    mock_client = AsyncMock()
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client_cls.return_value = mock_client
    return mock_client


@pytest.fixture
def config() -> RelayConfig:
    return make_config()


@pytest.fixture
def mock_client() -> MagicMock:
    """TelegramClient stand-in whose sends succeed."""
    client = MagicMock(spec=TelegramClient)
    client.chat_id = TEST_CHAT_ID
    client.send_text = AsyncMock(return_value=make_delivery(OutboundKind.TEXT))
    client.send_audio_reference = AsyncMock(
        return_value=make_delivery(OutboundKind.AUDIO),
    )
    return client


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)

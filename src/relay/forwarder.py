"""Webhook forwarder — normalize an ElevenLabs callback and relay it to Telegram.

Stages:
1. Normalize the raw body into an ExtractedMessage
2. Relay text and audio concurrently, each under its own timeout
3. Record every outcome in the log and the audit trail

Relay failures are caught here and never propagate: a partially or fully
failed relay is still a completed forward.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from src.audit.logger import record_event
from src.models import (
    AuditEvent,
    AuditEventType,
    DeliveryResult,
    ExtractedMessage,
    ForwardOutcome,
    OutboundKind,
    RelayAttempt,
)
from src.relay.normalizer import FALLBACK_TEXT, normalize
from src.relay.telegram import RelayError

if TYPE_CHECKING:
    from src.audit.logger import AuditLogger
    from src.relay.telegram import TelegramClient

logger = logging.getLogger(__name__)

_AUDIT_TYPES = {
    OutboundKind.TEXT: AuditEventType.RELAY_TEXT,
    OutboundKind.AUDIO: AuditEventType.RELAY_AUDIO,
}


class WebhookForwarder:
    """Relays normalized webhook content through a TelegramClient."""

    def __init__(
        self,
        client: TelegramClient,
        text_prefix: str = "",
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._client = client
        self._text_prefix = text_prefix
        self._audit = audit_logger

    async def forward(self, raw: Any) -> ForwardOutcome:
        """Normalize ``raw`` and relay whatever it contains."""
        message = normalize(raw)
        self._audit_received(message)

        relays: list[Awaitable[RelayAttempt]] = []
        if message.text is not None:
            relays.append(self._attempt(
                OutboundKind.TEXT,
                self._client.send_text,
                f"{self._text_prefix}{message.text}",
            ))
        if message.audio_url is not None:
            relays.append(self._attempt(
                OutboundKind.AUDIO,
                self._client.send_audio_reference,
                message.audio_url,
            ))

        # Let both relays finish before surfacing an unexpected error
        results = await asyncio.gather(*relays, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return ForwardOutcome(message=message, attempts=list(results))

    async def _attempt(
        self,
        kind: OutboundKind,
        send: Callable[[str], Awaitable[DeliveryResult]],
        payload: str,
    ) -> RelayAttempt:
        try:
            result = await send(payload)
        except RelayError as exc:
            logger.warning("Relay of %s to Telegram failed: %s", kind.value, exc)
            attempt = RelayAttempt(kind=kind, success=False, error=str(exc))
        else:
            attempt = RelayAttempt(kind=kind, success=True, response=result.response)

        record_event(self._audit, AuditEvent(
            event_type=_AUDIT_TYPES[kind],
            action="relay",
            result="success" if attempt.success else "error",
            details={
                "chat_id": self._client.chat_id,
                "error": attempt.error,
            },
        ))
        return attempt

    def _audit_received(self, message: ExtractedMessage) -> None:
        record_event(self._audit, AuditEvent(
            event_type=AuditEventType.WEBHOOK_RECEIVED,
            action="normalize",
            result="fallback" if message.text == FALLBACK_TEXT else "extracted",
            details={
                "has_text": message.text is not None,
                "has_audio": message.audio_url is not None,
            },
        ))

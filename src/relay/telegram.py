"""Outbound Telegram Bot API client for relayed ElevenLabs content.

Each send issues exactly one POST to the configured chat with a bounded
wait. There is no retry: failures surface as ``RelayError`` subclasses and
the caller decides whether to log-and-continue or report them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from src.config import RelayConfig
from src.models import DeliveryResult, OutboundKind, OutboundRequest

logger = logging.getLogger(__name__)

_METHODS = {
    OutboundKind.TEXT: "sendMessage",
    OutboundKind.AUDIO: "sendAudio",
}


class RelayError(Exception):
    """Base class for outbound relay failures."""

    def __init__(self, kind: OutboundKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class RelayTimeoutError(RelayError):
    """The platform did not answer within the call's bound."""


class DeliveryFailedError(RelayError):
    """Transport failure or a response body that is not JSON."""


class TelegramClient:
    """Sends text and audio references to a fixed Telegram chat."""

    def __init__(self, config: RelayConfig) -> None:
        self._bot_token = config.bot_token
        self._chat_id = config.chat_id
        self._api_base = config.api_base.rstrip("/")
        self._timeouts = {
            OutboundKind.TEXT: config.text_timeout,
            OutboundKind.AUDIO: config.audio_timeout,
        }

    @property
    def chat_id(self) -> str:
        return self._chat_id

    async def send_text(self, message: str) -> DeliveryResult:
        """Send a text message via ``sendMessage``."""
        return await self._send(
            OutboundRequest(chat_id=self._chat_id, kind=OutboundKind.TEXT, payload=message)
        )

    async def send_audio_reference(self, url: str) -> DeliveryResult:
        """Send an audio file by URL via ``sendAudio``."""
        return await self._send(
            OutboundRequest(chat_id=self._chat_id, kind=OutboundKind.AUDIO, payload=url)
        )

    def _url(self, kind: OutboundKind) -> str:
        return f"{self._api_base}/bot{self._bot_token}/{_METHODS[kind]}"

    async def _send(self, request: OutboundRequest) -> DeliveryResult:
        timeout = self._timeouts[request.kind]
        try:
            body = await asyncio.wait_for(self._post(request, timeout), timeout=timeout)
        except (httpx.TimeoutException, TimeoutError) as exc:
            raise RelayTimeoutError(
                request.kind,
                f"Telegram {_METHODS[request.kind]} timed out after {timeout:g}s",
            ) from exc
        except httpx.HTTPError as exc:
            raise DeliveryFailedError(
                request.kind,
                f"Telegram {_METHODS[request.kind]} failed: {exc!r}",
            ) from exc

        if isinstance(body, dict) and body.get("ok") is False:
            # Telegram reported a failure; still a delivered response here
            logger.warning(
                "Telegram %s returned ok=false: %s",
                _METHODS[request.kind], body.get("description", ""),
            )
        logger.info("Relayed %s to chat %s", request.kind.value, request.chat_id)
        return DeliveryResult(kind=request.kind, chat_id=request.chat_id, response=body)

    async def _post(self, request: OutboundRequest, timeout: float) -> Any:
        async with httpx.AsyncClient(verify=True) as client:
            resp = await client.post(
                self._url(request.kind), json=request.to_json(), timeout=timeout,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise DeliveryFailedError(
                request.kind,
                f"Telegram {_METHODS[request.kind]} returned a non-JSON response "
                f"(HTTP {resp.status_code})",
            ) from exc

"""FastAPI application receiving ElevenLabs webhooks and relaying them to Telegram."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from src.audit.logger import AuditLogger, record_event
from src.config import RelayConfig
from src.models import AuditEvent, AuditEventType
from src.relay.forwarder import WebhookForwarder
from src.relay.telegram import RelayError, TelegramClient

logger = logging.getLogger(__name__)

# Primary path first; the rest are alternate spellings served by the same handler
WEBHOOK_PATHS = ("/elevenlabs-webhook", "/elevenlabs_webhook")

HEALTH_TEXT = "ElevenLabs to Telegram relay is running"
WEBHOOK_ACK_TEXT = "Webhook received"
TEST_MESSAGE = "Test message from ElevenLabs relay"


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    return create_app(RelayConfig.from_env())


def create_app(
    config: RelayConfig,
    client: TelegramClient | None = None,
    audit_logger: AuditLogger | None = None,
) -> FastAPI:
    """Create the relay app.

    ``client`` and ``audit_logger`` default to ones built from ``config``.
    """
    client = client or TelegramClient(config)
    if audit_logger is None:
        audit_logger = AuditLogger.from_config(config)
    forwarder = WebhookForwarder(
        client, text_prefix=config.text_prefix, audit_logger=audit_logger,
    )

    app = FastAPI(docs_url=None, redoc_url=None)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return HEALTH_TEXT

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    async def elevenlabs_webhook(request: Request) -> Response:
        try:
            body = await request.body()
            outcome = await forwarder.forward(body)
            logger.info(
                "Webhook on %s relayed: %d delivered, %d failed",
                request.url.path, len(outcome.delivered), len(outcome.failed),
            )
        except Exception:
            # Always acknowledge so the sender does not retry and duplicate sends
            logger.exception("Error processing webhook on %s", request.url.path)
        return PlainTextResponse(WEBHOOK_ACK_TEXT, status_code=200)

    for path in WEBHOOK_PATHS:
        app.add_api_route(path, elevenlabs_webhook, methods=["POST"])

    @app.get("/test-relay")
    async def test_relay() -> JSONResponse:
        try:
            result = await client.send_text(TEST_MESSAGE)
        except RelayError as exc:
            logger.error("Test relay failed: %s", exc)
            _audit_test(audit_logger, "error", str(exc))
            return JSONResponse(
                {
                    "success": False,
                    "message": "Failed to send test message",
                    "error": str(exc),
                },
                status_code=500,
            )
        _audit_test(audit_logger, "success", None)
        return JSONResponse({
            "success": True,
            "message": "Test message sent to Telegram",
            "relayResponse": result.response,
        })

    return app


def _audit_test(
    audit_logger: AuditLogger | None, result: str, error: str | None,
) -> None:
    record_event(audit_logger, AuditEvent(
        event_type=AuditEventType.TEST_RELAY,
        action="test_relay",
        result=result,
        details={"error": error},
    ))

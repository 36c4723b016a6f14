"""Click CLI for running and exercising the ElevenLabs to Telegram relay."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import BinaryIO

import click

from src.config import ConfigurationError, RelayConfig
from src.models import DeliveryResult
from src.relay.normalizer import normalize
from src.relay.telegram import RelayError, TelegramClient

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Set the root log level and format for the process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
    # httpx logs request lines, which embed the bot token in the URL
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _load_config() -> RelayConfig:
    try:
        return RelayConfig.from_env()
    except ConfigurationError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)


def _report(send_result: DeliveryResult) -> None:
    click.echo(send_result.model_dump_json(indent=2))


@click.group()
def cli() -> None:
    """ElevenLabs to Telegram webhook relay."""


@cli.command()
@click.option("--host", default=None, help="Interface to bind (default: HOST or 0.0.0.0).")
@click.option("--port", type=int, default=None, help="Port to listen on (default: PORT or 3000).")
@click.option("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO).")
def serve(host: str | None, port: int | None, log_level: str | None) -> None:
    """Run the webhook server."""
    import uvicorn

    config = _load_config()
    level = log_level or config.log_level
    configure_logging(level)
    uvicorn.run(
        "src.server.app:create_app_from_env",
        factory=True,
        host=host or config.host,
        port=port or config.port,
        log_level=level.lower(),
    )


@cli.command("send-text")
@click.argument("message")
def send_text(message: str) -> None:
    """Send MESSAGE to the configured chat."""
    config = _load_config()
    configure_logging(config.log_level)
    try:
        result = asyncio.run(TelegramClient(config).send_text(message))
    except RelayError as exc:
        click.echo(f"Relay failed: {exc}", err=True)
        sys.exit(1)
    _report(result)


@cli.command("send-audio")
@click.argument("url")
def send_audio(url: str) -> None:
    """Send the audio file at URL to the configured chat."""
    config = _load_config()
    configure_logging(config.log_level)
    try:
        result = asyncio.run(TelegramClient(config).send_audio_reference(url))
    except RelayError as exc:
        click.echo(f"Relay failed: {exc}", err=True)
        sys.exit(1)
    _report(result)


@cli.command("normalize")
@click.argument("payload", type=click.File("rb"), default="-")
def normalize_cmd(payload: BinaryIO) -> None:
    """Show what would be relayed for a webhook body read from PAYLOAD."""
    message = normalize(payload.read())
    click.echo(message.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()

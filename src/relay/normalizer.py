"""Best-effort extraction of text and audio URL from ElevenLabs webhook bodies.

The upstream sender does not commit to a schema, so extraction walks an
ordered list of ``(path, field)`` probes and keeps the first non-empty string
found for each field. Bodies that are not JSON objects degrade to raw text,
and a body with nothing usable degrades to a fixed fallback text so every
webhook produces at least one relay attempt.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from src.models import ExtractedMessage

logger = logging.getLogger(__name__)

FALLBACK_TEXT = "New content generated"

Probe = tuple[tuple[str, ...], str]

TEXT_PROBES: tuple[Probe, ...] = (
    ((), "text"),
    ((), "message"),
    ((), "content"),
    (("data",), "text"),
)

_AUDIO_FIELDS = ("audioUrl", "audio_url", "url")

AUDIO_PROBES: tuple[Probe, ...] = tuple(
    [((), name) for name in _AUDIO_FIELDS]
    + [(("data",), name) for name in _AUDIO_FIELDS]
)


def _probe(payload: Mapping[str, Any], probes: tuple[Probe, ...]) -> str | None:
    """Return the first probe value that is a non-empty string."""
    for path, name in probes:
        node: Any = payload
        for key in path:
            node = node.get(key) if isinstance(node, Mapping) else None
        if not isinstance(node, Mapping):
            continue
        value = node.get(name)
        if isinstance(value, str) and value:
            return value
    return None


def _from_text(raw: str) -> ExtractedMessage:
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, RecursionError):
        logger.debug("Webhook body is not parseable JSON, relaying it as raw text")
        return _raw_text(raw)

    if isinstance(parsed, dict):
        return _from_mapping(parsed)
    if isinstance(parsed, str):
        return _raw_text(parsed)
    if parsed is None:
        return _fallback()
    # Arrays and scalars carry no fields to probe
    return _raw_text(raw)


def _from_mapping(payload: Mapping[str, Any]) -> ExtractedMessage:
    text = _probe(payload, TEXT_PROBES)
    audio_url = _probe(payload, AUDIO_PROBES)
    logger.debug("Extracted text=%r audio_url=%r", text, audio_url)
    if text is None and audio_url is None:
        return _fallback()
    return ExtractedMessage(text=text, audio_url=audio_url)


def _raw_text(raw: str) -> ExtractedMessage:
    text = raw.strip()
    if not text:
        return _fallback()
    return ExtractedMessage(text=text)


def _fallback() -> ExtractedMessage:
    logger.info("No text or audio found in webhook body, using fallback text")
    return ExtractedMessage(text=FALLBACK_TEXT)


def normalize(raw: Any) -> ExtractedMessage:
    """Extract an ``ExtractedMessage`` from a webhook body of unknown shape.

    Accepts raw request bytes, a string, or an already-parsed JSON value.
    Bytes may carry a UTF-8 byte order mark.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8-sig", errors="replace")
    if isinstance(raw, str):
        return _from_text(raw)
    if isinstance(raw, Mapping):
        return _from_mapping(raw)
    if raw is None:
        return _fallback()
    return _raw_text(json.dumps(raw))

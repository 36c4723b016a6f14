"""Audit logger — append-only JSON Lines record of webhook relays with rotation."""

from __future__ import annotations

import fcntl
import logging
from pathlib import Path

from src.config import RelayConfig
from src.models import AuditEvent

logger = logging.getLogger(__name__)


def read_audit_events(log_path: Path) -> list[AuditEvent]:
    """Load every event from an audit log file, oldest first."""
    if not log_path.exists():
        return []
    return [
        AuditEvent.model_validate_json(line)
        for line in log_path.read_text().splitlines()
        if line.strip()
    ]


def record_event(audit_logger: AuditLogger | None, event: AuditEvent) -> None:
    """Write ``event`` if auditing is enabled; write failures are only logged."""
    if audit_logger is None:
        return
    try:
        audit_logger.log(event)
    except OSError as exc:
        logger.warning("Audit write failed: %s", exc)


class AuditLogger:
    """Writes one JSON object per relay event, rotating by file size."""

    def __init__(
        self,
        log_path: str,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
    ) -> None:
        self.log_path = Path(log_path)
        self._max_bytes = max_bytes
        self._backup_count = backup_count

    @classmethod
    def from_config(cls, config: RelayConfig) -> AuditLogger | None:
        """Return a logger when the config enables auditing, else None."""
        if not config.audit_log_path:
            return None
        return cls(
            log_path=config.audit_log_path,
            max_bytes=config.audit_log_max_bytes,
            backup_count=config.audit_log_backup_count,
        )

    def _backup(self, index: int) -> Path:
        return self.log_path.with_name(f"{self.log_path.name}.{index}")

    def _maybe_rotate(self) -> None:
        if not self.log_path.exists():
            return
        if self.log_path.stat().st_size < self._max_bytes:
            return
        if self._backup_count == 0:
            self.log_path.unlink()
            return

        self._backup(self._backup_count).unlink(missing_ok=True)
        for i in range(self._backup_count - 1, 0, -1):
            if self._backup(i).exists():
                self._backup(i).rename(self._backup(i + 1))
        self.log_path.rename(self._backup(1))

    def log(self, event: AuditEvent) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        line = event.model_dump_json()

        # Rotation and append happen under one lock so concurrent
        # requests never interleave partial lines.
        lock_file = self.log_path.parent / f".{self.log_path.name}.lock"
        with open(lock_file, "w") as lf:
            fcntl.flock(lf, fcntl.LOCK_EX)
            try:
                self._maybe_rotate()
                with open(self.log_path, "a") as f:
                    f.write(line + "\n")
            finally:
                fcntl.flock(lf, fcntl.LOCK_UN)

"""Destinations for the audit trail of a bootstrap run."""

from __future__ import annotations

import json
import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, TextIO

from secrets_bootstrap.core.audit.filters import SecretRedactor
from secrets_bootstrap.core.audit.types import AuditEvent, AuditStatus
from secrets_bootstrap.core.utils import safe_call

logger = logging.getLogger(__name__)

AUDIT_LOGGER = "secrets_bootstrap.audit"

_LOG_LEVELS: dict[AuditStatus, int] = {
    AuditStatus.SUCCESS: logging.DEBUG,
    AuditStatus.SKIPPED: logging.DEBUG,
    AuditStatus.WARNING: logging.INFO,
    AuditStatus.FAILURE: logging.WARNING,
}


class AuditSink(ABC):
    """Receives the events of a run as they happen."""

    @abstractmethod
    def emit(self, event: AuditEvent) -> None:
        """Record a single event."""
        ...

    def close(self) -> None:  # noqa: B027
        """Flush and release anything held by the sink."""


class LoggingAuditSink(AuditSink):
    """Write events to the ``secrets_bootstrap.audit`` logger.

    Successful and skipped steps log at DEBUG, so a normal run shows
    only the events that need attention: warnings at INFO and failures
    at WARNING. Metadata is appended as ``key=value`` pairs after
    redaction.

    Args:
        logger_name: Logger to write to.
        redactor: Masks metadata whose keys look sensitive.
    """

    def __init__(self, logger_name: str = AUDIT_LOGGER, redactor: SecretRedactor | None = None) -> None:
        self._logger = logging.getLogger(logger_name)
        self._redactor = redactor or SecretRedactor()

    def emit(self, event: AuditEvent) -> None:
        metadata = self._redactor.redact(event.metadata)
        details = "".join(f" {key}={metadata[key]}" for key in sorted(metadata))
        self._logger.log(
            _LOG_LEVELS[event.status],
            "[AUDIT] %s %s: %s%s",
            event.to_dict()["action"],
            event.resource,
            event.status.value,
            details,
            extra={"audit_event": event.to_dict()},
        )


class FileAuditSink(AuditSink):
    """Append events to a JSON-lines file, one object per line.

    Every line carries the ``run_id`` of the sink that wrote it, so
    several runs can share one file and still be told apart. Metadata
    is redacted before it is written. The file is opened on the first
    event; a run that emits nothing leaves no file behind.

    Args:
        path: Audit file location. Missing parent directories are created.
        run_id: Identifier stamped on every line (default: a new UUID4).
        redactor: Masks metadata whose keys look sensitive.
    """

    def __init__(
        self,
        path: str | Path,
        run_id: str | None = None,
        redactor: SecretRedactor | None = None,
    ) -> None:
        self._path = Path(path)
        self.run_id = run_id or str(uuid.uuid4())
        self._redactor = redactor or SecretRedactor()
        self._file: TextIO | None = None

    def emit(self, event: AuditEvent) -> None:
        if self._file is None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._file = self._path.open("a", encoding="utf-8")
        record: dict[str, Any] = {"run_id": self.run_id, **event.to_dict()}
        record["metadata"] = self._redactor.redact(event.metadata)
        self._file.write(json.dumps(record) + "\n")
        self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


class CompositeAuditSink(AuditSink):
    """Forward every event to each of *sinks*.

    A sink that raises is logged and skipped; the others still receive
    the event.
    """

    def __init__(self, *sinks: AuditSink) -> None:
        self._sinks: tuple[AuditSink, ...] = sinks

    def emit(self, event: AuditEvent) -> None:
        for sink in self._sinks:
            safe_call(lambda s=sink: s.emit(event), logger, "Audit sink %s failed to emit", type(sink).__name__)

    def close(self) -> None:
        for sink in self._sinks:
            safe_call(sink.close, logger, "Audit sink %s failed to close", type(sink).__name__)

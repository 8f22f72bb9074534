"""Audit event types and models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditAction(str, Enum):
    """Standard audit actions."""

    RUN_STARTED = "run_started"
    RUN_COMPLETED = "run_completed"
    SOURCE_LOADED = "source_loaded"
    SECRET_ACCESSED = "secret_accessed"
    BUNDLE_FETCHED = "bundle_fetched"
    ENV_VAR_SET = "env_var_set"
    ENV_FILE_WRITTEN = "env_file_written"


class AuditStatus(str, Enum):
    """Audit event status."""

    SUCCESS = "success"
    FAILURE = "failure"
    WARNING = "warning"
    SKIPPED = "skipped"


@dataclass
class AuditEvent:
    """A single audit event.

    Secret values must never be placed in any field of an event.

    Args:
        action: The action that occurred (enum or custom string).
        actor: Who performed the action (e.g. ``"secrets_bootstrap"``).
        resource: What was acted upon (secret id, variable name, file path).
        status: Outcome of the action.
        timestamp: When the event occurred.
        metadata: Additional key-value data.
    """

    action: AuditAction | str
    actor: str
    resource: str
    status: AuditStatus
    timestamp: datetime = field(default_factory=_utcnow)
    metadata: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "action": self.action.value
            if isinstance(self.action, AuditAction)
            else self.action,
            "actor": self.actor,
            "resource": self.resource,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }

"""Audit event types, sinks, and redaction."""

from secrets_bootstrap.core.audit.filters import SecretRedactor
from secrets_bootstrap.core.audit.sinks import (
    AuditSink,
    CompositeAuditSink,
    FileAuditSink,
    LoggingAuditSink,
)
from secrets_bootstrap.core.audit.types import (
    AuditAction,
    AuditEvent,
    AuditStatus,
)

__all__ = [
    "AuditAction",
    "AuditEvent",
    "AuditSink",
    "AuditStatus",
    "CompositeAuditSink",
    "FileAuditSink",
    "LoggingAuditSink",
    "SecretRedactor",
]

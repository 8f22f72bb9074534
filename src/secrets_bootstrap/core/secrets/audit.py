"""Audit-aware wrapper for secret backends."""

from __future__ import annotations

import logging

from secrets_bootstrap.core.audit.sinks import AuditSink
from secrets_bootstrap.core.audit.types import AuditAction, AuditEvent, AuditStatus
from secrets_bootstrap.core.errors import SecretBackendError, SecretsBootstrapError
from secrets_bootstrap.core.secrets.base import SecretBackend
from secrets_bootstrap.core.utils import safe_call

logger = logging.getLogger(__name__)


class SecretsAuditLogger(SecretBackend):
    """Decorator that emits audit events for secret access.

    Wraps a :class:`SecretBackend` and emits
    :attr:`AuditAction.SECRET_ACCESSED` for every :meth:`fetch_value` and
    :attr:`AuditAction.BUNDLE_FETCHED` for every :meth:`fetch_named_bundle`.
    The secret **value is never included** in the audit trail. Errors from
    the wrapped backend are re-raised unchanged after the event is emitted.

    Args:
        backend: The underlying backend to delegate to.
        sink: Audit sink that receives the events.
        actor: Actor name recorded in audit events.
            Defaults to ``"secrets_bootstrap"``.
    """

    def __init__(
        self,
        backend: SecretBackend,
        sink: AuditSink,
        actor: str = "secrets_bootstrap",
    ) -> None:
        self._backend = backend
        self._sink = sink
        self._actor = actor

    @property
    def backend_name(self) -> str:
        return self._backend.backend_name

    def fetch_value(self, secret_id: str) -> str:
        try:
            value = self._backend.fetch_value(secret_id)
        except SecretsBootstrapError as exc:
            self._emit(AuditAction.SECRET_ACCESSED, secret_id, exc)
            raise
        self._emit(AuditAction.SECRET_ACCESSED, secret_id, None)
        return value

    def fetch_named_bundle(self, name: str) -> dict[str, str]:
        try:
            bundle = self._backend.fetch_named_bundle(name)
        except SecretsBootstrapError as exc:
            self._emit(AuditAction.BUNDLE_FETCHED, name, exc)
            raise
        self._emit(AuditAction.BUNDLE_FETCHED, name, None, fields=len(bundle))
        return bundle

    def _emit(
        self,
        action: AuditAction,
        secret_id: str,
        error: SecretsBootstrapError | None,
        fields: int | None = None,
    ) -> None:
        metadata: dict[str, str] = {"backend": self._backend.backend_name}
        if error is None:
            status = AuditStatus.SUCCESS
        else:
            status = AuditStatus.FAILURE
            metadata["error"] = str(error)
            if isinstance(error, SecretBackendError):
                metadata["kind"] = error.kind.value
        if fields is not None:
            metadata["fields"] = str(fields)

        event = AuditEvent(
            action=action,
            actor=self._actor,
            resource=secret_id,
            status=status,
            metadata=metadata,
        )
        safe_call(
            lambda: self._sink.emit(event),
            logger,
            "Failed to emit audit event for secret %s",
            secret_id,
        )

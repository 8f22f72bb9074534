"""Secret backend abstraction and resolution result models."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from secrets_bootstrap.core.errors import BackendErrorKind, BundleDecodeError
from secrets_bootstrap.core.references.pattern import SecretReference


class SecretResolutionStatus(str, Enum):
    """Outcome of resolving one reference."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    TRANSIENT = "transient"
    MALFORMED = "malformed"
    EXTRACTION_FAILED = "extraction_failed"
    ERROR = "error"

    @classmethod
    def from_error_kind(cls, kind: BackendErrorKind) -> SecretResolutionStatus:
        return cls(kind.value)


@dataclass
class SecretResolutionResult:
    """Result of resolving the reference stored under one configuration key.

    The ``value`` field is masked in ``__repr__`` to prevent accidental
    leakage in logs or tracebacks.

    Args:
        key: Configuration key the reference was found under.
        reference: The parsed reference.
        status: Outcome of the resolution.
        secret_id: Identifier sent to the backend (``None`` if extraction failed).
        value: The secret value (only set on success).
        error: Error description (only set on failure).
    """

    key: str
    reference: SecretReference
    status: SecretResolutionStatus
    secret_id: str | None = None
    value: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is SecretResolutionStatus.SUCCESS

    def __repr__(self) -> str:
        masked = "***" if self.value is not None else "None"
        return (
            f"SecretResolutionResult("
            f"key={self.key!r}, "
            f"secret_id={self.secret_id!r}, "
            f"status={self.status!r}, "
            f"value={masked}, "
            f"error={self.error!r})"
        )


class SecretBackend(ABC):
    """Base class for secret backends.

    Subclasses implement :meth:`fetch_value` against a specific store
    (AWS Secrets Manager, an in-memory map, ...). Each call is a single
    attempt: no retries and no caching.
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short name for this backend (e.g. ``"aws"``)."""
        ...

    @abstractmethod
    def fetch_value(self, secret_id: str) -> str:
        """Return the plaintext value of *secret_id*.

        Raises:
            SecretNotFoundError: The secret does not exist.
            SecretAccessDeniedError: The caller may not read it.
            BackendTransientError: Network or service failure.
            MalformedRequestError: The identifier was rejected.
        """
        ...

    def fetch_named_bundle(self, name: str) -> dict[str, str]:
        """Fetch *name* and decode its JSON payload into a flat string map.

        Raises:
            BundleDecodeError: The payload is not a JSON object whose
                values are all strings.
            SecretBackendError: Any failure from :meth:`fetch_value`.
        """
        payload = self.fetch_value(name)
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise BundleDecodeError(name, f"invalid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise BundleDecodeError(name, f"expected a JSON object, got {type(data).__name__}")

        bad_fields = sorted(k for k, v in data.items() if not isinstance(v, str))
        if bad_fields:
            raise BundleDecodeError(name, f"non-string values for fields: {', '.join(bad_fields)}")
        return dict(data)

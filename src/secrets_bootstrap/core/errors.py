"""Exception hierarchy for secret resolution."""

from __future__ import annotations

from enum import Enum


class BackendErrorKind(str, Enum):
    """Distinguishable classes of backend failure."""

    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    TRANSIENT = "transient"
    MALFORMED = "malformed"


class SecretsBootstrapError(Exception):
    """Base exception for all secrets-bootstrap errors."""

    pass


class ConfigurationError(SecretsBootstrapError):
    """The tool configuration is invalid or could not be loaded."""

    pass


class IdentifierExtractionError(SecretsBootstrapError):
    """A reference matched the grammar but no usable identifier could be extracted.

    Args:
        arn: The ARN the extraction was attempted on.
        reason: Human-readable failure description.
    """

    def __init__(self, arn: str, reason: str) -> None:
        self.arn = arn
        self.reason = reason
        super().__init__(f"Cannot extract secret id from '{arn}': {reason}")


class SecretBackendError(SecretsBootstrapError):
    """A call to the secret backend failed.

    Subclasses fix :attr:`kind`; callers that only need to report the
    failure can rely on ``kind`` without matching on the subclass.

    Args:
        secret_id: Identifier passed to the backend.
        message: Backend-provided or synthesized description.
        code: Backend error code, when one is available.
    """

    kind: BackendErrorKind = BackendErrorKind.TRANSIENT

    def __init__(self, secret_id: str, message: str, code: str | None = None) -> None:
        self.secret_id = secret_id
        self.message = message
        self.code = code
        super().__init__(f"{self.kind.value}: '{secret_id}': {message}")


class SecretNotFoundError(SecretBackendError):
    """The secret does not exist."""

    kind = BackendErrorKind.NOT_FOUND


class SecretAccessDeniedError(SecretBackendError):
    """The caller is not allowed to read the secret, or has no credentials."""

    kind = BackendErrorKind.ACCESS_DENIED


class BackendTransientError(SecretBackendError):
    """Network, throttling, or internal service failure."""

    kind = BackendErrorKind.TRANSIENT


class MalformedRequestError(SecretBackendError):
    """The backend rejected the identifier or request syntactically."""

    kind = BackendErrorKind.MALFORMED


class BundleDecodeError(SecretsBootstrapError):
    """The named bundle's payload is not a flat JSON string-to-string object.

    Args:
        name: Name of the bundle secret.
        reason: What was wrong with the payload.
    """

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Cannot decode secret bundle '{name}': {reason}")


class ConfigSourceUnreadableError(SecretsBootstrapError):
    """A devcontainer descriptor or env template could not be read or parsed.

    Args:
        path: Path of the source.
        reason: Human-readable failure description.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read config source '{path}': {reason}")

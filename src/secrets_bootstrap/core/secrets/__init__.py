"""Secret backends, reference resolution, and auditing."""

from secrets_bootstrap.core.secrets.audit import SecretsAuditLogger
from secrets_bootstrap.core.secrets.base import (
    SecretBackend,
    SecretResolutionResult,
    SecretResolutionStatus,
)
from secrets_bootstrap.core.secrets.providers import AwsSecretsBackend, StaticSecretsBackend
from secrets_bootstrap.core.secrets.resolver import ReferenceResolver, ResolvedSecretSet

__all__ = [
    "AwsSecretsBackend",
    "ReferenceResolver",
    "ResolvedSecretSet",
    "SecretBackend",
    "SecretResolutionResult",
    "SecretResolutionStatus",
    "SecretsAuditLogger",
    "StaticSecretsBackend",
]

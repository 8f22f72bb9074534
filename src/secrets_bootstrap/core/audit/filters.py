"""Redaction of secret values for console output."""

from __future__ import annotations

from collections.abc import Mapping

from secrets_bootstrap.core.utils import mask_secret

SENSITIVE_PATTERNS: list[str] = [
    "password",
    "secret",
    "token",
    "key",
    "credential",
    "auth",
]


class SecretRedactor:
    """Mask values whose keys look sensitive.

    Uses substring matching against :data:`SENSITIVE_PATTERNS`. Keys
    listed in ``always_mask`` are masked regardless of their name.
    """

    def __init__(self, always_mask: set[str] | None = None) -> None:
        self._always_mask = {k.upper() for k in always_mask or set()}

    def is_sensitive(self, key: str) -> bool:
        return key.upper() in self._always_mask or any(p in key.lower() for p in SENSITIVE_PATTERNS)

    def redact(self, data: Mapping[str, str]) -> dict[str, str]:
        """Return a copy of *data* with sensitive values masked."""
        return {k: mask_secret(v) if self.is_sensitive(k) else v for k, v in data.items()}

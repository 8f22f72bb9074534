"""Recognize ``${arn:aws:secretsmanager:...}`` references in configuration values.

A reference is a string of the exact form::

    ${arn:aws:secretsmanager:<region>:<account>:secret:<name>}

The whole string must match; the literal tokens are matched
case-insensitively while region, account, and name keep their case.

Examples::

    DATABASE_URL=${arn:aws:secretsmanager:us-east-1:123456789012:secret:db-url-abc123}
    "containerEnv": {"API_KEY": "${arn:aws:secretsmanager:eu-west-1:987654321098:secret:api-key}"}
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from secrets_bootstrap.core.errors import IdentifierExtractionError

SECRET_ARN_PATTERN = re.compile(
    r"\$\{(arn:aws:secretsmanager:[^:]+:[^:]+:secret:[^}]+)\}",
    re.IGNORECASE,
)
"""Regex matching a complete ``${arn:...}`` reference (use with ``fullmatch``)."""

_MIN_ARN_SEGMENTS = 7


class ExtractionPolicy(str, Enum):
    """How a resource identifier is derived from a reference.

    ``ARN_STRIPPING`` yields the friendly name (everything after
    ``:secret:``); ``BRACE_STRIPPING`` yields the full ARN.
    """

    ARN_STRIPPING = "arn_stripping"
    BRACE_STRIPPING = "brace_stripping"


@dataclass(frozen=True)
class SecretReference:
    """A secret reference found in a configuration value.

    Args:
        raw_value: The value exactly as it appeared in the source.
        arn: The ARN between ``${`` and the final ``}``.
    """

    raw_value: str
    arn: str


def is_secret_reference(value: Any) -> bool:
    """Return ``True`` if *value* is a complete secret reference.

    Never raises: ``None``, non-strings, empty strings, and near misses
    all return ``False``.
    """
    if not isinstance(value, str) or not value.strip():
        return False
    return SECRET_ARN_PATTERN.fullmatch(value) is not None


def parse_secret_reference(value: Any) -> SecretReference | None:
    """Parse *value* into a :class:`SecretReference`.

    Args:
        value: A configuration value that may be a reference.

    Returns:
        The reference, or ``None`` if *value* does not match the grammar.
    """
    if not isinstance(value, str):
        return None
    match = SECRET_ARN_PATTERN.fullmatch(value)
    if match is None:
        return None
    return SecretReference(raw_value=value, arn=match.group(1))


def extract_identifier(reference: SecretReference, policy: ExtractionPolicy) -> str:
    """Derive the backend resource identifier for *reference*.

    Args:
        reference: A parsed reference.
        policy: Extraction policy of the calling resolution path.

    Returns:
        The friendly name (``ARN_STRIPPING``) or the full ARN
        (``BRACE_STRIPPING``).

    Raises:
        IdentifierExtractionError: If the ARN has fewer than seven
            colon-delimited segments under ``ARN_STRIPPING``, or is empty.
    """
    if policy is ExtractionPolicy.BRACE_STRIPPING:
        if not reference.arn:
            raise IdentifierExtractionError(reference.arn, "empty ARN")
        return reference.arn

    parts = reference.arn.split(":")
    if len(parts) < _MIN_ARN_SEGMENTS:
        raise IdentifierExtractionError(
            reference.arn,
            f"expected at least {_MIN_ARN_SEGMENTS} ':'-separated segments, got {len(parts)}",
        )
    identifier = ":".join(parts[_MIN_ARN_SEGMENTS - 1 :])
    if not identifier:
        raise IdentifierExtractionError(reference.arn, "empty secret name")
    return identifier


def find_references(mapping: Mapping[str, Any]) -> dict[str, SecretReference]:
    """Return the entries of *mapping* whose values are secret references."""
    found: dict[str, SecretReference] = {}
    for key, value in mapping.items():
        ref = parse_secret_reference(value)
        if ref is not None:
            found[key] = ref
    return found

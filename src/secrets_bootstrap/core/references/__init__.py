"""Secret reference grammar and identifier extraction."""

from secrets_bootstrap.core.references.pattern import (
    SECRET_ARN_PATTERN,
    ExtractionPolicy,
    SecretReference,
    extract_identifier,
    find_references,
    is_secret_reference,
    parse_secret_reference,
)

__all__ = [
    "ExtractionPolicy",
    "SECRET_ARN_PATTERN",
    "SecretReference",
    "extract_identifier",
    "find_references",
    "is_secret_reference",
    "parse_secret_reference",
]

"""Aggregation result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from secrets_bootstrap.core.errors import SecretsBootstrapError
from secrets_bootstrap.core.references.pattern import SecretReference
from secrets_bootstrap.core.secrets.base import SecretResolutionResult
from secrets_bootstrap.core.secrets.resolver import ResolvedSecretSet


class RunStatus(str, Enum):
    """Overall outcome of a run."""

    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    FAILURE = "failure"


@dataclass
class AggregationResult:
    """Outcome of one :class:`SecretAggregator` run.

    ``bundle_error`` is set when the primary bundle could not be fetched
    or decoded. Side effects already performed (environment variables,
    ``.env`` file) are still reported in that case. ``rejected_env_vars``
    maps keys the environment refused (e.g. names containing ``=``) to
    the reason.
    """

    status: RunStatus
    merged: dict[str, str] = field(default_factory=dict)
    source_sets: list[ResolvedSecretSet] = field(default_factory=list)
    bundle: dict[str, str] | None = None
    bundle_error: SecretsBootstrapError | None = None
    env_vars_set: list[str] = field(default_factory=list)
    env_file: Path | None = None
    output_error: str | None = None
    rejected_env_vars: dict[str, str] = field(default_factory=dict)
    dry_run: bool = False
    planned_references: dict[str, dict[str, SecretReference]] = field(default_factory=dict)

    @property
    def unresolved(self) -> list[SecretResolutionResult]:
        """Return every reference that kept its placeholder."""
        return [r for s in self.source_sets for r in s.failed]

    @property
    def resolved_count(self) -> int:
        return sum(len(s.resolved_keys) for s in self.source_sets)

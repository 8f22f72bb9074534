"""Combine resolved configuration sources and the primary bundle."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from secrets_bootstrap.core.audit.sinks import AuditSink
from secrets_bootstrap.core.audit.types import AuditAction, AuditEvent, AuditStatus
from secrets_bootstrap.core.config.secrets import SecretsManagerConfig
from secrets_bootstrap.core.errors import (
    ConfigSourceUnreadableError,
    ConfigurationError,
    SecretsBootstrapError,
)
from secrets_bootstrap.core.output.env_file import EnvFileWriter
from secrets_bootstrap.core.output.environment import Environment, ProcessEnvironment
from secrets_bootstrap.core.references.pattern import ExtractionPolicy, find_references
from secrets_bootstrap.core.secrets.audit import SecretsAuditLogger
from secrets_bootstrap.core.secrets.base import SecretBackend
from secrets_bootstrap.core.secrets.resolver import ReferenceResolver, ResolvedSecretSet
from secrets_bootstrap.core.sources.base import ConfigSource
from secrets_bootstrap.core.sources.devcontainer import DevContainerSource
from secrets_bootstrap.core.sources.env_template import EnvTemplateSource
from secrets_bootstrap.core.utils import safe_call
from secrets_bootstrap.runner.result import AggregationResult, RunStatus

logger = logging.getLogger(__name__)

ACTOR = "SecretAggregator"

_RUN_AUDIT_STATUS = {
    RunStatus.SUCCESS: AuditStatus.SUCCESS,
    RunStatus.PARTIAL_SUCCESS: AuditStatus.WARNING,
    RunStatus.FAILURE: AuditStatus.FAILURE,
}


def merge_secret_sets(*sets: Mapping[str, str]) -> dict[str, str]:
    """Merge mappings in order with uppercased keys.

    A later mapping overwrites an earlier one on a key collision, and
    within one mapping a later key overwrites an earlier key that
    differs only in case.
    """
    merged: dict[str, str] = {}
    for values in sets:
        for key, value in values.items():
            merged[key.upper()] = value
    return merged


class SecretAggregator:
    """Run one full bootstrap pass.

    1. Resolve references in the devcontainer descriptor (if present).
    2. Resolve references in the ``.env`` template (if present).
    3. Merge both with uppercased keys; the template wins on collision.
    4. Route the merged set to the process environment, the ``.env``
       file, or both, according to ``settings.output_mode``.
    5. Fetch the primary bundle named by ``settings.secret_name``.

    Per-reference failures leave the placeholder in place and make the
    run a partial success, as does a key the environment rejects. A
    bundle failure makes the run a failure but does not undo the side
    effects of step 4.

    Args:
        backend: Backend used for every fetch.
        settings: Run configuration.
        environment: Destination for environment variables
            (default: :class:`ProcessEnvironment`).
        writer: ``.env`` writer (default: one targeting
            ``settings.env_file_path``).
        audit_sink: Optional sink. When given, backend calls are audited
            through :class:`SecretsAuditLogger` and the run emits its own
            lifecycle events.
    """

    def __init__(
        self,
        backend: SecretBackend,
        settings: SecretsManagerConfig,
        environment: Environment | None = None,
        writer: EnvFileWriter | None = None,
        audit_sink: AuditSink | None = None,
    ) -> None:
        self._settings = settings
        self._audit_sink = audit_sink
        self._backend: SecretBackend = SecretsAuditLogger(backend, audit_sink) if audit_sink else backend
        self._environment: Environment = environment or ProcessEnvironment()
        self._writer = writer or EnvFileWriter(settings.env_file_path)

    def _sources(self) -> list[tuple[ConfigSource, ExtractionPolicy]]:
        return [
            (DevContainerSource(self._settings.devcontainer_path), self._settings.devcontainer_policy),
            (EnvTemplateSource(self._settings.env_example_path), self._settings.env_template_policy),
        ]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, dry_run: bool = False) -> AggregationResult:
        """Execute the run.

        Args:
            dry_run: Read sources and list their references without
                fetching anything, setting variables or writing files.

        Returns:
            :class:`AggregationResult` describing every step.
        """
        self._emit(AuditAction.RUN_STARTED, self._settings.secret_name, AuditStatus.SUCCESS, {"dry_run": str(dry_run)})

        loaded: list[tuple[ConfigSource, ExtractionPolicy, dict[str, str]]] = []
        for source, policy in self._sources():
            mapping = self._load_source(source)
            if mapping is not None:
                loaded.append((source, policy, mapping))

        if dry_run:
            return self._plan(loaded)

        source_sets: list[ResolvedSecretSet] = []
        for source, policy, mapping in loaded:
            resolver = ReferenceResolver(self._backend, policy=policy, max_workers=self._settings.max_workers)
            source_sets.append(resolver.resolve(mapping, source=source.source_name))

        result = AggregationResult(
            status=RunStatus.SUCCESS,
            merged=merge_secret_sets(*(s.values for s in source_sets)),
            source_sets=source_sets,
        )

        if self._settings.export_bundle:
            self._fetch_bundle(result)
            if result.bundle:
                result.merged = merge_secret_sets(result.merged, result.bundle)
            self._route(result)
        else:
            self._route(result)
            self._fetch_bundle(result)

        if result.bundle_error is not None or result.output_error is not None:
            result.status = RunStatus.FAILURE
        elif result.unresolved or result.rejected_env_vars:
            result.status = RunStatus.PARTIAL_SUCCESS

        logger.info(
            "Run finished with status %s: %d references resolved, %d unresolved",
            result.status.value,
            result.resolved_count,
            len(result.unresolved),
        )
        self._emit(
            AuditAction.RUN_COMPLETED,
            self._settings.secret_name,
            _RUN_AUDIT_STATUS[result.status],
            {"status": result.status.value, "unresolved": str(len(result.unresolved))},
        )
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load_source(self, source: ConfigSource) -> dict[str, str] | None:
        try:
            mapping = source.load()
        except ConfigSourceUnreadableError as exc:
            logger.warning("Ignoring %s source: %s", source.source_name, exc)
            self._emit(AuditAction.SOURCE_LOADED, str(source.path), AuditStatus.WARNING, {"error": exc.reason})
            return None

        if mapping is None:
            self._emit(AuditAction.SOURCE_LOADED, str(source.path), AuditStatus.SKIPPED)
            return None

        logger.debug("Loaded %d entries from %s", len(mapping), source.path)
        self._emit(
            AuditAction.SOURCE_LOADED,
            str(source.path),
            AuditStatus.SUCCESS,
            {"source": source.source_name, "entries": str(len(mapping))},
        )
        return mapping

    def _plan(self, loaded: list[tuple[ConfigSource, ExtractionPolicy, dict[str, str]]]) -> AggregationResult:
        planned = {source.source_name: find_references(mapping) for source, _, mapping in loaded}
        for name, refs in planned.items():
            for key, ref in refs.items():
                logger.info("[DRY RUN] Would resolve %s from %s (%s)", key, ref.arn, name)
        return AggregationResult(
            status=RunStatus.SUCCESS,
            merged=merge_secret_sets(*(mapping for _, _, mapping in loaded)),
            dry_run=True,
            planned_references=planned,
        )

    def _route(self, result: AggregationResult) -> None:
        mode = self._settings.output_mode
        if mode.sets_environment:
            for key, value in result.merged.items():
                try:
                    self._environment.set(key, value)
                except ValueError as exc:
                    logger.warning("Cannot set environment variable %r: %s", key, exc)
                    result.rejected_env_vars[key] = str(exc)
                    self._emit(AuditAction.ENV_VAR_SET, key, AuditStatus.FAILURE, {"error": str(exc)})
                    continue
                result.env_vars_set.append(key)
                self._emit(AuditAction.ENV_VAR_SET, key, AuditStatus.SUCCESS)

        if mode.writes_file:
            if not result.merged:
                logger.info("No variables to write; skipping %s", self._writer.path)
                return
            try:
                result.env_file = self._writer.write(result.merged)
            except OSError as exc:
                logger.error("Failed to write %s: %s", self._writer.path, exc)
                result.output_error = f"{self._writer.path}: {exc}"
                self._emit(AuditAction.ENV_FILE_WRITTEN, str(self._writer.path), AuditStatus.FAILURE, {"error": str(exc)})
                return
            self._emit(
                AuditAction.ENV_FILE_WRITTEN,
                str(Path(result.env_file)),
                AuditStatus.SUCCESS,
                {"variables": str(len(result.merged))},
            )

    def _fetch_bundle(self, result: AggregationResult) -> None:
        name = self._settings.secret_name
        if not name:
            result.bundle_error = ConfigurationError("secret_name is required")
            logger.error("Cannot fetch primary bundle: %s", result.bundle_error)
            return
        try:
            result.bundle = self._backend.fetch_named_bundle(name)
        except SecretsBootstrapError as exc:
            logger.error("Failed to fetch primary bundle %s: %s", name, exc)
            result.bundle_error = exc
            return
        logger.info("Retrieved primary bundle %s with %d fields", name, len(result.bundle))

    def _emit(
        self,
        action: AuditAction,
        resource: str,
        status: AuditStatus,
        metadata: dict[str, str] | None = None,
    ) -> None:
        sink = self._audit_sink
        if sink is None:
            return
        event = AuditEvent(action=action, actor=ACTOR, resource=resource, status=status, metadata=metadata or {})
        safe_call(lambda: sink.emit(event), logger, "Failed to emit audit event %s", action.value)

"""Resolve secret references in flat configuration mappings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from secrets_bootstrap.core.errors import IdentifierExtractionError, SecretBackendError, SecretsBootstrapError
from secrets_bootstrap.core.references.pattern import (
    ExtractionPolicy,
    SecretReference,
    extract_identifier,
    find_references,
)
from secrets_bootstrap.core.secrets.base import (
    SecretBackend,
    SecretResolutionResult,
    SecretResolutionStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class ResolvedSecretSet:
    """Output of resolving one configuration mapping.

    ``values`` has exactly the keys of the input mapping. Resolved
    references carry the fetched value, failed ones keep their raw
    placeholder, and everything else is copied unchanged.

    Args:
        values: Resolved key/value mapping.
        results: One entry per reference found, in input order.
        source: Label of the configuration source, for diagnostics.
    """

    values: dict[str, str] = field(default_factory=dict)
    results: list[SecretResolutionResult] = field(default_factory=list)
    source: str = ""

    @property
    def resolved_keys(self) -> list[str]:
        return [r.key for r in self.results if r.succeeded]

    @property
    def failed(self) -> list[SecretResolutionResult]:
        return [r for r in self.results if not r.succeeded]


class ReferenceResolver:
    """Replace secret references in a mapping with values from a backend.

    Failures are isolated per key: a reference that cannot be resolved
    keeps its original placeholder, is logged with its failure kind, and
    never stops the remaining keys from being processed.

    References within one mapping are fetched concurrently on a thread
    pool; the output mapping is assembled only after every fetch has
    completed.

    Args:
        backend: Backend used to fetch secret values.
        policy: Identifier extraction policy for this resolution path.
        max_workers: Upper bound on concurrent backend calls.
    """

    def __init__(
        self,
        backend: SecretBackend,
        policy: ExtractionPolicy = ExtractionPolicy.ARN_STRIPPING,
        max_workers: int = 8,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._backend = backend
        self._policy = policy
        self._max_workers = max_workers

    @property
    def policy(self) -> ExtractionPolicy:
        return self._policy

    def resolve(self, mapping: Mapping[str, str], source: str = "") -> ResolvedSecretSet:
        """Resolve every reference in *mapping*.

        Args:
            mapping: Flat key/value configuration.
            source: Label used in log messages.

        Returns:
            A :class:`ResolvedSecretSet` with the same key set as *mapping*.
        """
        references = find_references(mapping)
        if not references:
            return ResolvedSecretSet(values=dict(mapping), source=source)

        if len(references) == 1 or self._max_workers == 1:
            results = [self.resolve_reference(key, ref) for key, ref in references.items()]
        else:
            workers = min(self._max_workers, len(references))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="secret-fetch") as pool:
                futures = [pool.submit(self.resolve_reference, key, ref) for key, ref in references.items()]
                results = [f.result() for f in futures]

        values = dict(mapping)
        for result in results:
            if result.succeeded and result.value is not None:
                values[result.key] = result.value

        failed = sum(1 for r in results if not r.succeeded)
        logger.info(
            "Resolved %d of %d secret references%s",
            len(results) - failed,
            len(results),
            f" from {source}" if source else "",
        )
        return ResolvedSecretSet(values=values, results=results, source=source)

    def resolve_reference(self, key: str, reference: SecretReference) -> SecretResolutionResult:
        """Resolve a single reference, never raising."""
        try:
            secret_id = extract_identifier(reference, self._policy)
        except IdentifierExtractionError as exc:
            logger.warning("Cannot resolve %s: %s", key, exc)
            return SecretResolutionResult(
                key=key,
                reference=reference,
                status=SecretResolutionStatus.EXTRACTION_FAILED,
                error=str(exc),
            )

        try:
            value = self._backend.fetch_value(secret_id)
        except SecretBackendError as exc:
            logger.warning(
                "Failed to resolve %s from %s (%s): %s",
                key,
                reference.arn,
                exc.kind.value,
                exc.message,
            )
            return SecretResolutionResult(
                key=key,
                reference=reference,
                status=SecretResolutionStatus.from_error_kind(exc.kind),
                secret_id=secret_id,
                error=str(exc),
            )
        except SecretsBootstrapError as exc:
            logger.warning("Failed to resolve %s from %s: %s", key, reference.arn, exc)
            return SecretResolutionResult(
                key=key,
                reference=reference,
                status=SecretResolutionStatus.ERROR,
                secret_id=secret_id,
                error=str(exc),
            )
        except Exception as exc:
            logger.warning("Unexpected error resolving %s from %s", key, reference.arn, exc_info=True)
            return SecretResolutionResult(
                key=key,
                reference=reference,
                status=SecretResolutionStatus.ERROR,
                secret_id=secret_id,
                error=f"{type(exc).__name__}: {exc}",
            )

        if not value:
            logger.warning("Secret value is empty for %s (%s)", key, reference.arn)
        else:
            logger.debug("Resolved %s from %s", key, reference.arn)
        return SecretResolutionResult(
            key=key,
            reference=reference,
            status=SecretResolutionStatus.SUCCESS,
            secret_id=secret_id,
            value=value,
        )

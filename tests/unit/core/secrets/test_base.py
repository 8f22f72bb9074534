"""Tests for secret backend base classes and result models."""

from __future__ import annotations

import json

import pytest

from secrets_bootstrap.core.errors import BackendErrorKind, BundleDecodeError, SecretNotFoundError
from secrets_bootstrap.core.references import parse_secret_reference
from secrets_bootstrap.core.secrets.base import (
    SecretResolutionResult,
    SecretResolutionStatus,
)
from secrets_bootstrap.core.secrets.providers import StaticSecretsBackend
from tests.factories import make_ref


class TestSecretResolutionStatus:
    @pytest.mark.parametrize("kind", list(BackendErrorKind))
    def test_from_error_kind(self, kind: BackendErrorKind) -> None:
        assert SecretResolutionStatus.from_error_kind(kind).value == kind.value


class TestSecretResolutionResult:
    def test_repr_masks_value(self) -> None:
        ref = parse_secret_reference(make_ref())
        assert ref is not None
        result = SecretResolutionResult(
            key="DB",
            reference=ref,
            status=SecretResolutionStatus.SUCCESS,
            secret_id="db-abc123",
            value="hunter2",
        )
        assert "hunter2" not in repr(result)
        assert "***" in repr(result)
        assert result.succeeded

    def test_failure_not_succeeded(self) -> None:
        ref = parse_secret_reference(make_ref())
        assert ref is not None
        result = SecretResolutionResult(key="DB", reference=ref, status=SecretResolutionStatus.NOT_FOUND)
        assert not result.succeeded
        assert "value=None" in repr(result)


class TestFetchNamedBundle:
    def test_decodes_flat_object(self) -> None:
        payload = {"DatabaseUrl": "postgres://db", "ApiKey": "k-123", "JwtSecret": "j", "RedisUrl": "redis://r"}
        backend = StaticSecretsBackend({"app": json.dumps(payload)})
        assert backend.fetch_named_bundle("app") == payload

    def test_invalid_json(self) -> None:
        backend = StaticSecretsBackend({"app": "{not json"})
        with pytest.raises(BundleDecodeError, match="invalid JSON"):
            backend.fetch_named_bundle("app")

    def test_non_object(self) -> None:
        backend = StaticSecretsBackend({"app": "[1, 2]"})
        with pytest.raises(BundleDecodeError, match="expected a JSON object"):
            backend.fetch_named_bundle("app")

    def test_non_string_values(self) -> None:
        backend = StaticSecretsBackend({"app": json.dumps({"A": "x", "PORT": 5432, "NESTED": {"b": "c"}})})
        with pytest.raises(BundleDecodeError) as exc_info:
            backend.fetch_named_bundle("app")
        assert "NESTED" in exc_info.value.reason
        assert "PORT" in exc_info.value.reason

    def test_missing_bundle_propagates_backend_error(self) -> None:
        with pytest.raises(SecretNotFoundError):
            StaticSecretsBackend().fetch_named_bundle("app")

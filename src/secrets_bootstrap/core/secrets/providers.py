"""Built-in secret backend implementations."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    PartialCredentialsError,
)

from secrets_bootstrap.core.config.aws import AwsConfig
from secrets_bootstrap.core.errors import (
    BackendTransientError,
    ConfigurationError,
    MalformedRequestError,
    SecretAccessDeniedError,
    SecretBackendError,
    SecretNotFoundError,
)
from secrets_bootstrap.core.secrets.base import SecretBackend

logger = logging.getLogger(__name__)

_ERROR_CODES: dict[str, type[SecretBackendError]] = {
    "ResourceNotFoundException": SecretNotFoundError,
    "AccessDeniedException": SecretAccessDeniedError,
    "UnrecognizedClientException": SecretAccessDeniedError,
    "InvalidSignatureException": SecretAccessDeniedError,
    "ExpiredTokenException": SecretAccessDeniedError,
    "DecryptionFailure": SecretAccessDeniedError,
    "InvalidRequestException": MalformedRequestError,
    "InvalidParameterException": MalformedRequestError,
    "ValidationException": MalformedRequestError,
    "InternalServiceError": BackendTransientError,
    "ThrottlingException": BackendTransientError,
}


def translate_client_error(secret_id: str, exc: ClientError) -> SecretBackendError:
    """Map a botocore ``ClientError`` onto the backend error taxonomy.

    Unknown error codes are treated as transient.
    """
    error = exc.response.get("Error", {})
    code = error.get("Code", "Unknown")
    message = error.get("Message") or str(exc)
    error_class = _ERROR_CODES.get(code, BackendTransientError)
    return error_class(secret_id, message, code=code)


class AwsSecretsBackend(SecretBackend):
    """Fetch secrets from AWS Secrets Manager.

    The boto3 client is created lazily on the first fetch. Every call is
    a single attempt (botocore retries are disabled) bounded by
    ``config.timeout_seconds`` for both connect and read.

    Args:
        config: AWS connection settings. Call
            :meth:`AwsConfig.with_environment_fallback` first to pick up
            ``AWS_*`` variables.
    """

    def __init__(self, config: AwsConfig) -> None:
        self._config = config
        self._client: Any = None

    @property
    def backend_name(self) -> str:
        return "aws"

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                self._config.validate()
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc
            session_kwargs: dict[str, Any] = {"region_name": self._config.region}
            if self._config.has_explicit_credentials():
                logger.info("Using explicit AWS credentials")
                session_kwargs["aws_access_key_id"] = self._config.access_key
                session_kwargs["aws_secret_access_key"] = self._config.secret_key
            else:
                logger.info("Using AWS SDK credential chain (environment, profiles, IAM roles)")

            botocore_config = Config(
                connect_timeout=self._config.timeout_seconds,
                read_timeout=self._config.timeout_seconds,
                retries={"total_max_attempts": 1},
            )
            session = boto3.Session(**session_kwargs)
            self._client = session.client(
                "secretsmanager",
                endpoint_url=self._config.endpoint_url or None,
                config=botocore_config,
            )
        return self._client

    def fetch_value(self, secret_id: str) -> str:
        if not secret_id:
            raise MalformedRequestError(secret_id, "secret id must not be empty")
        try:
            response = self._get_client().get_secret_value(SecretId=secret_id)
        except ClientError as exc:
            raise translate_client_error(secret_id, exc) from exc
        except (NoCredentialsError, PartialCredentialsError) as exc:
            raise SecretAccessDeniedError(secret_id, str(exc)) from exc
        except BotoCoreError as exc:
            raise BackendTransientError(secret_id, str(exc)) from exc

        if response.get("SecretString") is not None:
            return str(response["SecretString"])
        binary = response.get("SecretBinary")
        if binary is not None:
            try:
                return bytes(binary).decode("utf-8")
            except UnicodeDecodeError as exc:
                raise MalformedRequestError(secret_id, "binary secret is not valid UTF-8") from exc
        raise SecretNotFoundError(secret_id, "secret has no current value")


class StaticSecretsBackend(SecretBackend):
    """Serve secrets from an in-memory mapping.

    Useful for tests and for running against a fixed set of values
    without network access. Unknown identifiers raise
    :class:`SecretNotFoundError`.

    Args:
        secrets: Mapping of secret id to value.
    """

    def __init__(self, secrets: Mapping[str, str] | None = None) -> None:
        self._secrets: dict[str, str] = dict(secrets or {})

    @property
    def backend_name(self) -> str:
        return "static"

    def fetch_value(self, secret_id: str) -> str:
        try:
            return self._secrets[secret_id]
        except KeyError:
            raise SecretNotFoundError(secret_id, "no such secret") from None

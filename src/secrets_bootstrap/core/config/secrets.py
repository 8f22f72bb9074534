"""Secrets-bootstrap run configuration model."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from secrets_bootstrap.core.config.aws import AwsConfig
from secrets_bootstrap.core.config.base import OutputMode
from secrets_bootstrap.core.references.pattern import ExtractionPolicy

ENV_PREFIX = "SECRETS_BOOTSTRAP_"

_ENV_OVERRIDES: dict[str, str] = {
    "SECRET_NAME": "secret_name",
    "OUTPUT_MODE": "output_mode",
    "ENV_FILE_PATH": "env_file_path",
    "ENV_EXAMPLE_PATH": "env_example_path",
    "DEVCONTAINER_PATH": "devcontainer_path",
}


@dataclass
class SecretsManagerConfig:
    """Configuration for one secrets-bootstrap run."""

    secret_name: str = ""
    """Name of the primary bundle secret fetched on every run"""

    output_mode: OutputMode = OutputMode.BOTH
    """Destination of merged secrets: env, file, or both (default: both)"""

    env_file_path: str = ".env"
    """Path of the generated .env file (default: .env)"""

    env_example_path: str = ".env.example"
    """Path of the .env template to scan for references (default: .env.example)"""

    devcontainer_path: str = ".devcontainer/devcontainer.json"
    """Path of the devcontainer descriptor to scan for references"""

    aws: AwsConfig = field(default_factory=AwsConfig)
    """AWS connection settings"""

    max_workers: int = 8
    """Concurrent backend calls per configuration source (default: 8)"""

    devcontainer_policy: ExtractionPolicy = ExtractionPolicy.ARN_STRIPPING
    """Identifier extraction for devcontainer references (default: arn_stripping)"""

    env_template_policy: ExtractionPolicy = ExtractionPolicy.ARN_STRIPPING
    """Identifier extraction for .env template references (default: arn_stripping)"""

    export_bundle: bool = False
    """Merge the primary bundle's fields into the output set (default: False)"""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if not self.env_file_path:
            raise ValueError("env_file_path must not be empty")

    def with_environment_overrides(self, environ: Mapping[str, str] | None = None) -> "SecretsManagerConfig":
        """Return a copy with ``SECRETS_BOOTSTRAP_*`` variables applied.

        AWS fields fall back to the standard ``AWS_*`` variables only
        where they are still unset.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for suffix, attr in _ENV_OVERRIDES.items():
            value = env.get(ENV_PREFIX + suffix)
            if not value:
                continue
            if attr == "output_mode":
                try:
                    overrides[attr] = OutputMode(value)
                except ValueError as exc:
                    raise ValueError(f"Invalid {ENV_PREFIX}{suffix}: {value!r}") from exc
            else:
                overrides[attr] = value
        updated = replace(self, **overrides)  # type: ignore[arg-type]
        updated.aws = updated.aws.with_environment_fallback(env)
        return updated

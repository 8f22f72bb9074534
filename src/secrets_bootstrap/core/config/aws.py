"""AWS connection settings."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

DEFAULT_REGION = "us-east-1"
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass
class AwsConfig:
    """Connection settings for AWS Secrets Manager.

    Credentials resolve in layers: explicit ``access_key``/``secret_key``,
    then ``AWS_ACCESS_KEY_ID``/``AWS_SECRET_ACCESS_KEY``, then the boto3
    default credential chain (profiles, IAM roles, ...).
    """

    region: str = ""
    """AWS region (falls back to AWS_DEFAULT_REGION, AWS_REGION, then us-east-1)"""

    endpoint_url: str | None = None
    """Custom endpoint, e.g. http://localhost:4566 for LocalStack (optional)"""

    access_key: str | None = None
    """Explicit access key ID (optional, requires secret_key)"""

    secret_key: str | None = None
    """Explicit secret access key (optional, requires access_key)"""

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    """Connect and read timeout per backend call in seconds (default: 10)"""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

    def has_explicit_credentials(self) -> bool:
        """Return ``True`` when both an access key and a secret key are set."""
        return bool(self.access_key) and bool(self.secret_key)

    def validate(self) -> None:
        """Check that a region is set and credentials come in pairs.

        Raises:
            ValueError: If the region is empty or only one credential is set.
        """
        if not self.region:
            raise ValueError("AWS Region is required")
        if bool(self.access_key) != bool(self.secret_key):
            raise ValueError(
                "Both AccessKey and SecretKey must be provided together, or neither should be provided"
            )

    def with_environment_fallback(self, environ: Mapping[str, str] | None = None) -> "AwsConfig":
        """Return a copy with unset fields filled from standard AWS variables."""
        env = os.environ if environ is None else environ
        return replace(
            self,
            access_key=self.access_key or env.get("AWS_ACCESS_KEY_ID") or None,
            secret_key=self.secret_key or env.get("AWS_SECRET_ACCESS_KEY") or None,
            region=self.region or env.get("AWS_DEFAULT_REGION") or env.get("AWS_REGION") or DEFAULT_REGION,
            endpoint_url=self.endpoint_url or env.get("AWS_ENDPOINT_URL") or None,
        )

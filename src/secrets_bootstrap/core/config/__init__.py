"""Configuration models for secrets-bootstrap.

Dataclass models loaded from HOCON with dataconf, then layered with
environment variables and command-line flags.
"""

from secrets_bootstrap.core.config.aws import AwsConfig
from secrets_bootstrap.core.config.base import LogLevel, OutputMode
from secrets_bootstrap.core.config.loader import load_from_file, load_from_string
from secrets_bootstrap.core.config.secrets import SecretsManagerConfig

__all__ = [
    "AwsConfig",
    "LogLevel",
    "OutputMode",
    "SecretsManagerConfig",
    "load_from_file",
    "load_from_string",
]

"""Output destinations for merged secrets."""

from secrets_bootstrap.core.output.env_file import EnvFileWriter, format_value, render_env_file
from secrets_bootstrap.core.output.environment import (
    Environment,
    InMemoryEnvironment,
    ProcessEnvironment,
)

__all__ = [
    "EnvFileWriter",
    "Environment",
    "InMemoryEnvironment",
    "ProcessEnvironment",
    "format_value",
    "render_env_file",
]

"""Readers for the configuration files scanned for secret references."""

from secrets_bootstrap.core.sources.base import ConfigSource
from secrets_bootstrap.core.sources.devcontainer import DevContainerSource, parse_jsonc
from secrets_bootstrap.core.sources.env_template import EnvTemplateSource

__all__ = [
    "ConfigSource",
    "DevContainerSource",
    "EnvTemplateSource",
    "parse_jsonc",
]

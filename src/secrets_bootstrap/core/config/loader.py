"""HOCON configuration loader using dataconf.

This module provides functions for loading configuration from HOCON files
and strings using dataconf.
"""

from typing import TypeVar, cast

import dataconf

T = TypeVar("T")


def load_from_file(path: str, config_class: type[T]) -> T:
    """Load configuration from a HOCON file.

    Args:
        path: Path to the HOCON configuration file
        config_class: The configuration dataclass type to load into

    Returns:
        Instance of config_class populated with configuration from the file

    Example:
        >>> config = load_from_file("secrets-bootstrap.conf", SecretsManagerConfig)
    """
    return cast(T, dataconf.file(path, config_class))


def load_from_string(hocon_str: str, config_class: type[T]) -> T:
    """Load configuration from a HOCON string.

    Args:
        hocon_str: HOCON configuration as a string
        config_class: The configuration dataclass type to load into

    Returns:
        Instance of config_class populated with configuration from the string

    Example:
        >>> hocon = '''
        ... {
        ...   secret_name: "my-app-secrets"
        ...   output_mode: file
        ... }
        ... '''
        >>> config = load_from_string(hocon, SecretsManagerConfig)
    """
    return cast(T, dataconf.string(hocon_str, config_class))

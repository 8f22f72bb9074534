"""Process environment abstraction."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Mapping


class Environment(ABC):
    """Destination for environment variables set by a run."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Set *key* to *value*, replacing any existing value."""
        ...

    @abstractmethod
    def get(self, key: str) -> str | None:
        ...


class ProcessEnvironment(Environment):
    """Writes to ``os.environ`` of the current process."""

    def set(self, key: str, value: str) -> None:
        os.environ[key] = value

    def get(self, key: str) -> str | None:
        return os.environ.get(key)


class InMemoryEnvironment(Environment):
    """Dict-backed environment for tests and dry runs.

    Args:
        initial: Optional starting variables.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self.variables: dict[str, str] = dict(initial or {})

    def set(self, key: str, value: str) -> None:
        self.variables[key] = value

    def get(self, key: str) -> str | None:
        return self.variables.get(key)

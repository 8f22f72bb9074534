"""Configuration source abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class ConfigSource(ABC):
    """A file that supplies a flat key/value mapping to scan for references.

    Args:
        path: Location of the source file.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Short label used in logs and audit events."""
        ...

    @abstractmethod
    def load(self) -> dict[str, str] | None:
        """Read the source.

        Returns:
            The flattened mapping, or ``None`` if the file does not exist.

        Raises:
            ConfigSourceUnreadableError: The file exists but cannot be
                read or parsed.
        """
        ...

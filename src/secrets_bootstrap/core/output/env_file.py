"""Rendering of merged secrets to a ``.env`` file."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

HEADER = "# Generated by secrets-bootstrap"


def format_value(value: str) -> str:
    """Quote *value* if it contains a space.

    No escaping is applied; a value that itself contains a double quote
    is written as-is.
    """
    if " " in value:
        return f'"{value}"'
    return value


def render_env_file(values: Mapping[str, str], generated_at: datetime | None = None) -> str:
    """Render *values* as ``.env`` text.

    Keys are uppercased and sorted. The output starts with a generator
    comment and a timestamp comment and ends with a newline.
    """
    stamp = (generated_at or datetime.now(timezone.utc)).isoformat()
    lines = [HEADER, f"# Generated at: {stamp}"]
    normalized = {key.upper(): value for key, value in values.items()}
    lines.extend(f"{key}={format_value(normalized[key])}" for key in sorted(normalized))
    return "\n".join(lines) + "\n"


class EnvFileWriter:
    """Write merged secrets to a ``.env`` file, overwriting it.

    The parent directory must already exist.

    Args:
        path: Target file path.
    """

    def __init__(self, path: str | Path = ".env") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def write(self, values: Mapping[str, str]) -> Path:
        """Render *values* and write them to :attr:`path`.

        Raises:
            OSError: The file cannot be written.
        """
        self._path.write_text(render_env_file(values), encoding="utf-8")
        logger.info("Wrote %d variables to %s", len(values), self._path)
        return self._path

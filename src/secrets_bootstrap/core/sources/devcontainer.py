"""Reader for ``devcontainer.json`` descriptors.

The descriptor is JSON with comments (``//`` and ``/* */``) and trailing
commas allowed. Three sections are scanned, in this order, and flattened
into one mapping (a later section wins on a duplicate key):

- ``build.args``
- ``containerEnv``
- ``remoteEnv``

Section names are matched case-insensitively.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from secrets_bootstrap.core.errors import ConfigSourceUnreadableError
from secrets_bootstrap.core.sources.base import ConfigSource

logger = logging.getLogger(__name__)

DEFAULT_DEVCONTAINER_PATH = ".devcontainer/devcontainer.json"

SECTIONS: tuple[str, ...] = ("build.args", "containerEnv", "remoteEnv")


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments outside of string literals.

    Raises:
        ValueError: On an unterminated block comment.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                raise ValueError("unterminated block comment")
            i = end + 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def strip_trailing_commas(text: str) -> str:
    """Remove commas directly followed by ``}`` or ``]`` outside of strings."""
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
        elif ch == ",":
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in "}]":
                i += 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def parse_jsonc(text: str) -> Any:
    """Parse JSON that may contain comments and trailing commas."""
    return json.loads(strip_trailing_commas(strip_json_comments(text)))


def _lookup(data: dict[str, Any], name: str) -> Any:
    """Case-insensitive key lookup."""
    wanted = name.lower()
    for key, value in data.items():
        if isinstance(key, str) and key.lower() == wanted:
            return value
    return None


def _string_map(section: str, raw: Any) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring devcontainer section %s: expected an object", section)
        return {}
    values: dict[str, str] = {}
    for key, value in raw.items():
        if value is None:
            continue
        if isinstance(value, bool):
            values[key] = "true" if value else "false"
        elif isinstance(value, (str, int, float)):
            values[key] = str(value)
        else:
            logger.debug("Skipping non-scalar value for %s in %s", key, section)
    return values


class DevContainerSource(ConfigSource):
    """Flatten the environment sections of a devcontainer descriptor."""

    def __init__(self, path: str = DEFAULT_DEVCONTAINER_PATH) -> None:
        super().__init__(path)

    @property
    def source_name(self) -> str:
        return "devcontainer"

    def load_sections(self) -> dict[str, dict[str, str]] | None:
        """Read the descriptor and return each scanned section separately.

        Returns:
            Mapping of section name (see :data:`SECTIONS`) to its string
            map, or ``None`` if the file does not exist.

        Raises:
            ConfigSourceUnreadableError: The file cannot be read or parsed.
        """
        if not self._path.exists():
            logger.warning("DevContainer config file not found at: %s", self._path)
            return None

        try:
            data = parse_jsonc(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise ConfigSourceUnreadableError(str(self._path), str(exc)) from exc

        if not isinstance(data, dict):
            raise ConfigSourceUnreadableError(str(self._path), "top-level value is not an object")

        build = _lookup(data, "build")
        sections = {
            "build.args": _string_map("build.args", _lookup(build, "args") if isinstance(build, dict) else None),
            "containerEnv": _string_map("containerEnv", _lookup(data, "containerEnv")),
            "remoteEnv": _string_map("remoteEnv", _lookup(data, "remoteEnv")),
        }
        logger.info("Successfully loaded DevContainer config from: %s", self._path)
        return sections

    def load(self) -> dict[str, str] | None:
        sections = self.load_sections()
        if sections is None:
            return None
        merged: dict[str, str] = {}
        for name in SECTIONS:
            merged.update(sections[name])
        return merged

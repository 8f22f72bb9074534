"""Reader for ``.env.example``-style templates."""

from __future__ import annotations

import logging

from dotenv import dotenv_values

from secrets_bootstrap.core.errors import ConfigSourceUnreadableError
from secrets_bootstrap.core.sources.base import ConfigSource

logger = logging.getLogger(__name__)


class EnvTemplateSource(ConfigSource):
    """Read ``KEY=VALUE`` lines from an env template.

    Comments and blank lines are ignored, surrounding quotes are
    stripped, and ``KEY=`` yields an empty string. Variable
    interpolation is disabled so ``${arn:...}`` placeholders survive
    untouched. Lines without ``=`` are dropped.
    """

    @property
    def source_name(self) -> str:
        return "env_template"

    def load(self) -> dict[str, str] | None:
        if not self._path.exists():
            logger.info(".env template not found at %s", self._path)
            return None
        if not self._path.is_file():
            raise ConfigSourceUnreadableError(str(self._path), "not a file")

        try:
            raw = dotenv_values(self._path, interpolate=False, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigSourceUnreadableError(str(self._path), str(exc)) from exc

        values = {key: value for key, value in raw.items() if value is not None}
        logger.info("Loaded %d variables from %s", len(values), self._path)
        return values

"""Base enums for configuration models."""

from enum import Enum


class OutputMode(str, Enum):
    """Where merged secrets are delivered."""

    ENVIRONMENT_VARIABLES = "env"
    ENV_FILE = "file"
    BOTH = "both"

    @classmethod
    def _missing_(cls, value: object) -> "OutputMode | None":
        if isinstance(value, str):
            return _OUTPUT_MODE_ALIASES.get(value.strip().lower().replace("_", ""))
        return None

    @property
    def sets_environment(self) -> bool:
        return self in (OutputMode.ENVIRONMENT_VARIABLES, OutputMode.BOTH)

    @property
    def writes_file(self) -> bool:
        return self in (OutputMode.ENV_FILE, OutputMode.BOTH)


_OUTPUT_MODE_ALIASES: dict[str, OutputMode] = {
    "env": OutputMode.ENVIRONMENT_VARIABLES,
    "environmentvariables": OutputMode.ENVIRONMENT_VARIABLES,
    "file": OutputMode.ENV_FILE,
    "envfile": OutputMode.ENV_FILE,
    "both": OutputMode.BOTH,
}


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

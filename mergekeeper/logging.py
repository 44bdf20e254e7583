"""Logging setup for a merge run.

Failed attempts are logged at DEBUG, merge progress at INFO. urllib3 (under
requests) logs every polled request at DEBUG, so it is held at INFO or above
unless the configured level is already higher.

Configure via config.yaml (logging.level, logging.format) or env (LOGGING_LEVEL, LOGGING_FORMAT).
"""

import logging

from mergekeeper.config import LoggingConfig

LOGGER_NAME = "mergekeeper"

# Supported levels only (DEBUG, INFO, WARNING, ERROR)
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Loggers that would print one line per HTTP request while polling
HTTP_LOGGERS = ("urllib3",)


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


class MergeKeeperLogging:
    """Configures the root logger for one run.

    Without a LoggingConfig (e.g. when config.yaml failed to load) the
    defaults and LOGGING_* env are used.
    """

    def __init__(self, config: LoggingConfig | None = None) -> None:
        config = config or LoggingConfig()
        self._level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT

    def setup(self) -> logging.Logger:
        """Apply level and format, quiet HTTP loggers, return the ``mergekeeper`` logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )
        for name in HTTP_LOGGERS:
            logging.getLogger(name).setLevel(max(self._level, logging.INFO))
        return logging.getLogger(LOGGER_NAME)

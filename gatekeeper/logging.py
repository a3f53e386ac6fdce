"""Logging setup for the gatekeeper CLI.

The configured level (logging.level in gatekeeper.yaml or LOGGING_LEVEL)
applies to the "gatekeeper" logger hierarchy only. Everything else,
requests and urllib3 included, stays at WARNING, so DEBUG shows
pagination and correlation without connection-pool chatter.

- INFO: each validation tick and the final verdict
- DEBUG: workflows found, pages fetched, skipped and failed jobs
"""

import logging

from gatekeeper.config import LoggingConfig

LOGGER_NAME = "gatekeeper"

# Supported levels only (DEBUG, INFO, WARNING, ERROR)
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

OTHER_LOGGERS_LEVEL = logging.WARNING
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant; unknown names give INFO."""
    return LEVELS.get(level.upper().strip(), logging.INFO)


class GatekeeperLogging:
    """Installs the root handler and sets the gatekeeper logger level."""

    def __init__(self, config: LoggingConfig) -> None:
        self._level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT

    @property
    def level(self) -> int:
        return self._level

    def setup(self) -> logging.Logger:
        """Configure logging and return the top-level "gatekeeper" logger.

        The root logger keeps OTHER_LOGGERS_LEVEL unless the configured
        level is stricter, in which case it is raised to match.
        """
        logging.basicConfig(
            level=max(self._level, OTHER_LOGGERS_LEVEL),
            format=self._format,
            force=True,
        )
        log = logging.getLogger(LOGGER_NAME)
        log.setLevel(self._level)
        return log

"""Logging from config and env.

Levels (inclusive):
- ERROR: critical errors only
- WARNING: non-critical issues (failed per-issue actions) and ERROR
- INFO: run progress and summaries, WARNING, and ERROR
- DEBUG: per-issue decisions and API calls, and all levels above

Configure via config.yaml (logging.level, logging.format), env (LOGGING_LEVEL,
LOGGING_FORMAT) or the --debug CLI flag.
"""

import logging

from qa_retention.config import LoggingConfig

# Supported levels only (DEBUG, INFO, WARNING, ERROR)
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

SECTION_WIDTH = 80


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to DEFAULT_LEVEL if unknown.
    """
    return LEVELS.get(level.upper().strip(), LEVELS[DEFAULT_LEVEL])


class RetentionLogging:
    """Configures root logger from LoggingConfig (YAML + env LOGGING_*)."""

    def __init__(self, config: LoggingConfig, debug: bool = False) -> None:
        """Store logging config; debug forces DEBUG regardless of config."""
        self._level = logging.DEBUG if debug else _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT

    def setup(self) -> None:
        """Apply level and format to the root logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )


def log_section(log: logging.Logger, title: str) -> None:
    """Log a banner line framing the start or end of a run."""
    log.info("=" * SECTION_WIDTH)
    log.info(title)
    log.info("=" * SECTION_WIDTH)

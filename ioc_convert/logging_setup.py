"""Console logging configuration."""

import logging
import sys


class ConsoleFormatter(logging.Formatter):
    """Prefixes warnings and errors so they stand out from progress output."""

    LEVEL_MAP = {
        logging.DEBUG: "[debug] ",
        logging.INFO: "",
        logging.WARNING: "WARNING: ",
        logging.ERROR: "ERROR: ",
        logging.CRITICAL: "ERROR: ",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with its level prefix."""
        prefix = self.LEVEL_MAP.get(record.levelno, "")
        message = super().format(record)
        if prefix:
            return f"{prefix}{message}"
        return message


def setup_logging(debug: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Set up logging for the converter.

    Args:
        debug: Enable debug-level logging
        quiet: Only show errors (overrides debug)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("ioc_convert")
    if quiet:
        logger.setLevel(logging.ERROR)
    else:
        logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ConsoleFormatter(fmt="%(message)s"))
        logger.addHandler(handler)

    return logger

"""
Pretty logging utilities for the session connection store.
Console handler with level colors and key=value context on every message.
"""

import logging
import sys
from typing import Any, Dict, Optional, TextIO


class ColorFormatter(logging.Formatter):
    """
    Colored log formatter for console output.
    Prefixes the level name with an ANSI color when writing to a terminal.
    """

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[95m",  # Magenta
        "INFO": "\033[94m",  # Blue
        "WARNING": "\033[93m",  # Yellow
        "ERROR": "\033[91m",  # Red
        "CRITICAL": "\033[95m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def __init__(self, use_colors: bool = True, include_timestamp: bool = True):
        """
        Initialize the color formatter.

        :param use_colors: Whether to use colors in the output.
        :param include_timestamp: Whether to include timestamps in log messages.
        """
        self.use_colors = use_colors and sys.stdout.isatty()
        self.include_timestamp = include_timestamp

        if include_timestamp:
            fmt = "%(asctime)s %(levelname)s: %(message)s"
        else:
            fmt = "%(levelname)s: %(message)s"

        super().__init__(fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors and record.levelname in self.COLORS:
            level_part, sep, message_part = formatted.partition(": ")
            if sep:
                color = self.COLORS[record.levelname]
                reset = self.COLORS["RESET"]
                formatted = f"{color}{level_part}: {reset}{message_part}"

        return formatted


class SessionLogger:
    """
    Logger for session connection operations.
    Every message is suffixed with the logger's bound context followed by
    the keyword context of the call, e.g. ``created | table=session_connection public_id=sc_1``.
    """

    def __init__(
        self,
        name: str = "sessionconn",
        level: int = logging.INFO,
        use_colors: bool = True,
        stream: Optional[TextIO] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the session logger.

        :param name: Logger name.
        :param level: Logging level.
        :param use_colors: Whether to use colored output.
        :param stream: Output stream (defaults to sys.stdout).
        :param context: Context rendered on every message of this logger.
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.context: Dict[str, Any] = dict(context or {})

        # Replace handlers so a name configured twice does not log twice
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(ColorFormatter(use_colors=use_colors))

        self.logger.addHandler(handler)
        self.logger.propagate = False

    def bind(self, **context: Any) -> "SessionLogger":
        """
        Return a logger writing to the same handler with extra bound context.

        :param context: Context added to every message of the returned logger.
        :returns: A SessionLogger sharing this logger's output.
        """
        bound = SessionLogger.__new__(SessionLogger)
        bound.logger = self.logger
        bound.context = {**self.context, **context}
        return bound

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_with_context(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_with_context(logging.WARNING, message, **kwargs)

    def error(
        self, message: str, error: Optional[Exception] = None, **kwargs: Any
    ) -> None:
        """
        Log error message with optional exception and context.

        :param message: The log message.
        :param error: Optional exception to include in the log.
        :param kwargs: Additional context to include in the log.
        """
        if error:
            message = f"{message}: {error}"
        self.log_with_context(logging.ERROR, message, **kwargs)

    def critical(
        self, message: str, error: Optional[Exception] = None, **kwargs: Any
    ) -> None:
        if error:
            message = f"{message}: {error}"
        self.log_with_context(logging.CRITICAL, message, **kwargs)

    def log_with_context(self, level: int, message: str, **kwargs: Any) -> None:
        """
        Log message with bound and call context.

        :param level: Logging level.
        :param message: The log message.
        :param kwargs: Additional context to include in the log.
        """
        context = {**self.context, **kwargs}
        if context:
            context_parts = [f"{k}={v}" for k, v in context.items()]
            message += " | " + " ".join(context_parts)

        self.logger.log(level, message)

    def set_level(self, level: int) -> None:
        """Set the logging level."""
        self.logger.setLevel(level)


# Configured loggers by name
_loggers: Dict[str, SessionLogger] = {}


def get_logger(name: str = "sessionconn") -> SessionLogger:
    """
    Get or create a logger instance.

    :param name: Logger name.
    :returns: SessionLogger instance, the same one for repeated names.
    """
    if name not in _loggers:
        _loggers[name] = SessionLogger(name)
    return _loggers[name]


def setup_logging(
    level: int = logging.INFO, use_colors: bool = True, name: str = "sessionconn"
) -> SessionLogger:
    """
    Setup logging for the session connection store.

    :param level: Logging level.
    :param use_colors: Whether to use colors in logs.
    :param name: Logger name.
    :returns: Configured SessionLogger instance, also returned by get_logger(name).
    """
    logger = SessionLogger(name, level, use_colors)
    _loggers[name] = logger
    return logger

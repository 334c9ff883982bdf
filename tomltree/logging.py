"""
Logging configuration for tomltree.

Library modules only emit records under the "tomltree" logger hierarchy
(tomltree.parser, tomltree.loader, ...). Handlers are installed by the
command-line tool through setup_logging:
- console output on stderr, colored when stderr is a terminal
- optional file output with rotation
"""

import logging
import logging.handlers
import sys
from dataclasses import dataclass
from pathlib import Path


PACKAGE_LOGGER = "tomltree"


# ANSI color codes for console output
class Colors:
    """ANSI color codes."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"

    BRIGHT_RED = "\033[91m"


LEVEL_COLORS = {
    logging.DEBUG: Colors.DIM + Colors.CYAN,
    logging.INFO: Colors.GREEN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.BOLD + Colors.BRIGHT_RED,
}

# One entry per get_logger() component in the package
COMPONENT_COLORS = {
    "main": Colors.BOLD,
    "parser": Colors.MAGENTA,
    "loader": Colors.BLUE,
    "schema": Colors.GREEN,
    "testsuite": Colors.CYAN,
}


def component_of(logger_name: str) -> str | None:
    """Return the component part of a package logger name, e.g. "parser"."""
    prefix = PACKAGE_LOGGER + "."
    if not logger_name.startswith(prefix):
        return None
    return logger_name[len(prefix):].split(".", 1)[0]


class ColoredFormatter(logging.Formatter):
    """
    Formatter that adds ANSI colors to console output.

    The level name is colored by severity, the logger name by component,
    and warning or error messages are highlighted. The record is restored
    after formatting so other handlers see it unchanged.
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        use_colors: bool = True,
    ):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        saved = (record.levelname, record.name, record.msg)

        record.levelname = f"{LEVEL_COLORS.get(record.levelno, '')}{record.levelname:8}{Colors.RESET}"

        component_color = COMPONENT_COLORS.get(component_of(record.name) or "")
        if component_color:
            record.name = f"{component_color}{record.name}{Colors.RESET}"

        if record.levelno >= logging.ERROR:
            record.msg = f"{Colors.RED}{record.msg}{Colors.RESET}"
        elif record.levelno >= logging.WARNING:
            record.msg = f"{Colors.YELLOW}{record.msg}{Colors.RESET}"

        try:
            return super().format(record)
        finally:
            record.levelname, record.name, record.msg = saved


class PlainFormatter(logging.Formatter):
    """Plain formatter without colors for file output."""

    def format(self, record: logging.LogRecord) -> str:
        original_levelname = record.levelname
        record.levelname = f"{record.levelname:8}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


@dataclass
class LogConfig:
    """Logging configuration for the command-line tool."""

    console_level: str = "WARNING"
    console_colors: bool = True

    file_enabled: bool = False
    file_path: str = "tomltree.log"
    file_level: str = "DEBUG"
    file_max_bytes: int = 10 * 1024 * 1024  # 10 MB
    file_backup_count: int = 5

    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"


def get_log_level(level_str: str) -> int:
    """Convert string log level to logging constant, INFO when unknown."""
    levels = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "warn": logging.WARNING,
        "error": logging.ERROR,
        "critical": logging.CRITICAL,
    }
    return levels.get(level_str.lower(), logging.INFO)


def _console_handler(config: LogConfig) -> logging.Handler:
    # stdout is reserved for JSON output
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(get_log_level(config.console_level))

    use_colors = config.console_colors and hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
    handler.setFormatter(
        ColoredFormatter(fmt=config.format, datefmt=config.date_format, use_colors=use_colors)
    )
    return handler


def _file_handler(config: LogConfig) -> logging.Handler:
    Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        config.file_path,
        maxBytes=config.file_max_bytes,
        backupCount=config.file_backup_count,
        encoding="utf-8",
    )
    handler.setLevel(get_log_level(config.file_level))
    handler.setFormatter(PlainFormatter(fmt=config.format, datefmt=config.date_format))
    return handler


def setup_logging(config: LogConfig | None = None) -> None:
    """
    Install handlers on the package logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        config: Logging configuration (uses defaults if None)
    """
    if config is None:
        config = LogConfig()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG)  # Capture all, filter at handlers
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.addHandler(_console_handler(config))
    if config.file_enabled:
        package_logger.addHandler(_file_handler(config))


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a component.

    Args:
        name: Component name (will be prefixed with tomltree)

    Returns:
        Logger instance
    """
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")

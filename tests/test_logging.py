"""
Tests for logging helpers.
"""

import logging
from pathlib import Path

import pytest

from tomltree.logging import (
    COMPONENT_COLORS,
    ColoredFormatter,
    LogConfig,
    PlainFormatter,
    component_of,
    get_log_level,
    get_logger,
    setup_logging,
)


def make_record(level: int, name: str = "tomltree.parser") -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "message", None, None)


def test_get_logger_prefixes_package_name():
    assert get_logger("parser").name == "tomltree.parser"
    assert get_logger("tomltree.loader").name == "tomltree.loader"


def test_get_log_level():
    assert get_log_level("debug") == logging.DEBUG
    assert get_log_level("WARN") == logging.WARNING
    assert get_log_level("bogus") == logging.INFO


def test_colored_formatter_restores_record():
    record = make_record(logging.ERROR)
    formatter = ColoredFormatter(fmt="%(levelname)s %(name)s %(message)s", use_colors=True)

    output = formatter.format(record)

    assert "\033[" in output
    assert record.levelname == "ERROR"
    assert record.name == "tomltree.parser"
    assert record.msg == "message"


def test_formatters_without_colors():
    record = make_record(logging.WARNING)

    colored = ColoredFormatter(fmt="%(levelname)s|%(message)s", use_colors=False).format(record)
    plain = PlainFormatter(fmt="%(levelname)s|%(message)s").format(record)

    assert colored == "WARNING|message"
    assert plain == "WARNING |message"


@pytest.fixture
def package_logger():
    """The package logger, with its handlers and level restored afterwards."""
    logger = logging.getLogger("tomltree")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.handlers.extend(handlers)
    logger.setLevel(level)


def test_component_of():
    assert component_of("tomltree.parser") == "parser"
    assert component_of("tomltree.parser.inner") == "parser"
    assert component_of("tomltree") is None
    assert component_of("other.parser") is None


def test_every_package_component_has_a_color():
    import tomltree.__main__
    import tomltree.loader
    import tomltree.parser
    import tomltree.schema
    import tomltree.testsuite

    modules = [tomltree.__main__, tomltree.loader, tomltree.parser, tomltree.schema, tomltree.testsuite]
    for module in modules:
        assert component_of(module.logger.name) in COMPONENT_COLORS


def test_colored_formatter_colors_main_component():
    record = make_record(logging.INFO, "tomltree.main")
    output = ColoredFormatter(fmt="%(name)s", use_colors=True).format(record)

    assert output == f"{COMPONENT_COLORS['main']}tomltree.main\033[0m"


def test_setup_logging_replaces_handlers(package_logger, tmp_path: Path):
    log_path = tmp_path / "logs" / "run.log"
    config = LogConfig(console_level="error", file_enabled=True, file_path=str(log_path))

    setup_logging(config)
    setup_logging(config)

    assert len(package_logger.handlers) == 2
    console, file_handler = package_logger.handlers
    assert console.level == logging.ERROR
    assert file_handler.level == logging.DEBUG

    get_logger("parser").debug("written to file")
    file_handler.flush()
    assert "written to file" in log_path.read_text(encoding="utf-8")

"""Logging configuration for the arxiv-search client."""

import logging
import logging.handlers
import sys
from pathlib import Path

import colorlog

BASE_LOG_FORMAT = (
    "%(asctime)s %(levelname)8s %(message)s (%(name)s@%(filename)s:%(lineno)d)"
)
DATE_FORMAT = "%m-%d %H:%M:%S"
LOG_FILE_NAME = "arxiv_search.log"
TEST_LOG_FILE_NAME = "test.log"

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
    use_colors: bool = True,
    enable_file_logging: bool = False,
    log_dir: Path | None = None,
    is_test_env: bool = False,
) -> None:
    """Configure logging for the arxiv-search client.

    Args:
        level: Logging level, either numeric or a name such as "DEBUG"
        format_string: Custom format string for console messages
        use_colors: Whether to use colored console output
        enable_file_logging: Whether to also write to a log file
        log_dir: Directory for log files (defaults to ./logs or ./logs/test)
        is_test_env: Whether this is a test environment
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if log_dir is None:
        log_dir = Path("logs")
        if is_test_env:
            log_dir = log_dir / "test"

    console_format = format_string or _get_console_format(use_colors)
    handlers = [_create_console_handler(console_format, use_colors)]

    if enable_file_logging:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_create_file_handler(log_dir, is_test_env))

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def _get_console_format(use_colors: bool) -> str:
    """Get console format string based on color preference."""
    if use_colors:
        return (
            "%(asctime)s %(log_color)s%(levelname)8s%(reset)s %(message)s "
            "\033[90m(%(name)s@%(filename)s:%(lineno)d)\033[0m"
        )
    return BASE_LOG_FORMAT


def _create_console_handler(format_string: str, use_colors: bool) -> logging.Handler:
    """Create a stdout handler, colored if requested."""
    console_handler = logging.StreamHandler(sys.stdout)

    if use_colors:
        formatter: logging.Formatter = colorlog.ColoredFormatter(
            format_string,
            datefmt=DATE_FORMAT,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
            style="%",
        )
    else:
        formatter = logging.Formatter(format_string, datefmt=DATE_FORMAT)

    console_handler.setFormatter(formatter)
    return console_handler


def _create_file_handler(log_dir: Path, is_test_env: bool) -> logging.Handler:
    """Create a file handler; test runs overwrite, others rotate."""
    if is_test_env:
        file_handler: logging.Handler = logging.FileHandler(
            log_dir / TEST_LOG_FILE_NAME, mode="w", encoding="utf-8"
        )
    else:
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=5 * 1024 * 1024,
            backupCount=4,
            encoding="utf-8",
        )

    file_handler.setFormatter(logging.Formatter(BASE_LOG_FORMAT, datefmt=DATE_FORMAT))
    return file_handler


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def setup_test_logging(level: int | str = logging.DEBUG) -> None:
    """Log to the console and an overwritten test log file."""
    setup_logging(level=level, enable_file_logging=True, is_test_env=True)

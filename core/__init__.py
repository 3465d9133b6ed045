"""Core functionality for the arxiv-search system."""

from .config import Settings, load_settings, settings
from .log import get_logger, setup_logging, setup_test_logging

__all__ = [
    "Settings",
    "load_settings",
    "settings",
    "get_logger",
    "setup_logging",
    "setup_test_logging",
]

"""Client for the arXiv search API."""

from .client import ArxivClient, search
from .exceptions import (
    ArxivCancelledError,
    ArxivDecodeError,
    ArxivError,
    ArxivSearchError,
    ArxivTransportError,
)
from .models import Author, Paper, Query
from .parser import ArxivParser
from .query import build_params
from .scanner import TokenScanner

__all__ = [
    "ArxivError",
    "ArxivTransportError",
    "ArxivDecodeError",
    "ArxivSearchError",
    "ArxivCancelledError",
    "ArxivClient",
    "ArxivParser",
    "Author",
    "Paper",
    "Query",
    "TokenScanner",
    "build_params",
    "search",
]

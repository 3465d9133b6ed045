"""Constants for the arXiv search client."""

from typing import Final

# arXiv API constants
ABS_MARKER: Final[str] = "/abs/"
NEW_STYLE_ID_PREFIX: Final[str] = "arXiv:"
ALL_FIELDS_PREFIX: Final[str] = "all:"

# XML namespaces
ATOM_NAMESPACE: Final[str] = "http://www.w3.org/2005/Atom"
ARXIV_NAMESPACE: Final[str] = "http://arxiv.org/schemas/atom"

# Title of the pseudo-entry arXiv returns for a malformed query
ERROR_ENTRY_TITLE: Final[str] = "error"

# Error messages
ERROR_EXECUTE_SEARCH = "failed to execute search: {}"
ERROR_PARSE_RESULTS = "failed to parse search results: {}"
ERROR_EXPECTED_END_TAG = "expected end tag"
ERROR_UNEXPECTED_EOF = "unexpected end of stream"
ERROR_SEARCH_CANCELLED = "search cancelled"

# Log messages
LOG_SEARCHING = "Searching arXiv with params: {}"
LOG_PARSED_PAPER = "Parsed paper: {} - {}"
LOG_SEARCH_DONE = "Search returned {} papers"
LOG_INVALID_TIMESTAMP = "Could not parse timestamp: {!r}"

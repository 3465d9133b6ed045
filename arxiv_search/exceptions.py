"""Custom exceptions for the arXiv search client."""


class ArxivError(Exception):
    """Base exception for arXiv-related errors."""

    pass


class ArxivTransportError(ArxivError):
    """Raised when the search request could not be executed."""

    pass


class ArxivDecodeError(ArxivError):
    """Raised when the response is not a well-formed arXiv feed."""

    pass


class ArxivSearchError(ArxivError):
    """Raised when arXiv reports an error for the query.

    arXiv answers a malformed query with a regular feed holding a single
    entry titled "Error"; the message is that entry's summary.
    """

    pass


class ArxivCancelledError(ArxivError):
    """Raised when a search is cancelled by the caller."""

    pass

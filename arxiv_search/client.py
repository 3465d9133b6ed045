"""ArXiv API client for searching papers.

Please note that arXiv does not allow more than one request every 3 seconds
(see https://arxiv.org/help/api/tou). This client does not throttle; callers
issuing several searches must space them out themselves.
"""

import threading
from collections.abc import Iterable
from typing import Any

import httpx

from core import get_logger, settings

from .constants import (
    ERROR_ENTRY_TITLE,
    ERROR_EXECUTE_SEARCH,
    LOG_SEARCH_DONE,
    LOG_SEARCHING,
)
from .exceptions import ArxivSearchError, ArxivTransportError
from .models import Paper, Query
from .parser import ArxivParser
from .query import build_params

logger = get_logger(__name__)


class ArxivClient:
    """Synchronous arXiv API search client."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize ArXiv client.

        Args:
            base_url: Full URL of the query endpoint, defaults to settings
            timeout: Request timeout in seconds, defaults to settings
            client: Existing HTTP client to use instead of creating one
        """
        self.base_url = base_url or settings.arxiv_api_base_url
        self.timeout = timeout if timeout is not None else settings.arxiv_timeout
        self.parser = ArxivParser()
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.Client:
        """HTTP client, created on first use."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                headers={"User-Agent": settings.arxiv_user_agent},
                follow_redirects=True,
            )
        return self._client

    def __enter__(self) -> "ArxivClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def search(
        self, query: Query, cancel: threading.Event | None = None
    ) -> list[Paper]:
        """Run a search and return the matching papers.

        Args:
            query: Search request
            cancel: Event that aborts the search once set

        Returns:
            Papers in the order arXiv returned them

        Raises:
            ArxivTransportError: If the request could not be executed
            ArxivDecodeError: If the response is not a valid feed
            ArxivSearchError: If arXiv rejected the query
            ArxivCancelledError: If ``cancel`` was set during the search
        """
        params = build_params(query)
        logger.info(LOG_SEARCHING.format(params))

        try:
            with self.client.stream("GET", self.base_url, params=params) as response:
                if response.is_error:
                    # arXiv also reports bad queries as an error entry in the body
                    logger.warning(
                        f"arXiv responded with HTTP {response.status_code}, "
                        "decoding body anyway"
                    )
                papers = self._collect(response.iter_bytes(), cancel)
        except httpx.RequestError as e:
            logger.error(f"Request error searching arXiv: {e}")
            raise ArxivTransportError(ERROR_EXECUTE_SEARCH.format(e)) from e

        logger.info(LOG_SEARCH_DONE.format(len(papers)))
        return papers

    def parse(
        self, chunks: Iterable[bytes], cancel: threading.Event | None = None
    ) -> list[Paper]:
        """Decode an already fetched response body.

        Raises:
            ArxivDecodeError: If the body is not a valid feed
            ArxivSearchError: If the body carries an arXiv error entry
        """
        return self._collect(chunks, cancel)

    def _collect(
        self, chunks: Iterable[bytes], cancel: threading.Event | None
    ) -> list[Paper]:
        papers: list[Paper] = []
        for paper in self.parser.parse(chunks, cancel=cancel):
            if paper.title.lower() == ERROR_ENTRY_TITLE:
                logger.warning(f"arXiv rejected the query: {paper.summary}")
                raise ArxivSearchError(paper.summary)
            papers.append(paper)
        return papers


def search(query: Query, cancel: threading.Event | None = None) -> list[Paper]:
    """Run a single search with a short-lived client."""
    with ArxivClient() as client:
        return client.search(query, cancel=cancel)

"""Global pytest configuration and fixtures."""

from collections.abc import Generator
from logging import Logger

import pytest
from pytest_httpserver import HTTPServer
from werkzeug.wrappers import Request, Response

from arxiv_search import ArxivClient
from core import setup_test_logging

from tests.shared_test_data import (
    EMPTY_FEED_XML,
    ERROR_FEED_XML,
    MALFORMED_XML,
    SAMPLE_FEED_XML,
)


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Setup test logging for all tests."""
    setup_test_logging()


@pytest.fixture(scope="function")
def logger() -> Logger:
    """Provide a logger instance for tests."""
    from core import get_logger

    return get_logger("test")


@pytest.fixture
def mock_arxiv_server(httpserver: HTTPServer) -> HTTPServer:
    """Set up a mock arXiv query endpoint.

    The response depends on the search_query parameter:
    ``all:error`` returns an error entry, ``all:nothing`` an empty feed,
    ``all:broken`` malformed XML and ``all:unavailable`` an HTTP 503 page.
    Anything else returns the sample feed.
    """

    def arxiv_query_handler(request: Request) -> Response:
        search_query = request.args.get("search_query", "")

        if search_query == "all:error":
            return Response(
                ERROR_FEED_XML, status=400, headers={"Content-Type": "application/xml"}
            )
        if search_query == "all:nothing":
            body = EMPTY_FEED_XML
        elif search_query == "all:broken":
            body = MALFORMED_XML
        elif search_query == "all:unavailable":
            return Response(
                "<html><body>Service Unavailable",
                status=503,
                headers={"Content-Type": "text/html"},
            )
        else:
            body = SAMPLE_FEED_XML

        return Response(body, status=200, headers={"Content-Type": "application/xml"})

    httpserver.expect_request("/api/query", method="GET").respond_with_handler(
        arxiv_query_handler
    )
    return httpserver


@pytest.fixture
def mock_arxiv_client(
    mock_arxiv_server: HTTPServer,
) -> Generator[ArxivClient, None, None]:
    """Provide an ArxivClient pointed at the mock server."""
    base_url = mock_arxiv_server.url_for("/api/query")
    with ArxivClient(base_url=base_url) as client:
        yield client

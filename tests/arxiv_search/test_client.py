"""Tests for ArxivClient."""

import threading

import httpx
import pytest
from pytest_httpserver import HTTPServer

from arxiv_search import client as client_module
from arxiv_search.client import ArxivClient, search
from arxiv_search.exceptions import (
    ArxivCancelledError,
    ArxivDecodeError,
    ArxivSearchError,
    ArxivTransportError,
)
from arxiv_search.models import Author, Query
from core import settings

from tests.shared_test_data import ERROR_FEED_XML, SAMPLE_FEED_XML


def mock_transport_client(handler) -> ArxivClient:
    return ArxivClient(
        base_url="http://arxiv.test/api/query",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


class TestArxivClient:
    """Test ArxivClient against a mock arXiv server."""

    def test_initialization_defaults(self):
        """Test client initialization."""
        client = ArxivClient()
        assert client.base_url == settings.arxiv_api_base_url
        assert client.timeout == settings.arxiv_timeout
        assert client._client is None

    def test_initialization_custom_url(self):
        """Test client initialization with a custom URL."""
        custom_url = "http://custom.arxiv.org/api/query"
        client = ArxivClient(base_url=custom_url, timeout=5.0)
        assert client.base_url == custom_url
        assert client.client.timeout.read == 5.0
        client.close()
        assert client._client is None

    def test_search_success(self, mock_arxiv_client):
        """Test successful search."""
        papers = mock_arxiv_client.search(Query.for_terms("attention", 0, 2))

        assert len(papers) == 2
        assert papers[0].arxiv_id == "arXiv:1706.03762v7"
        assert papers[0].title == "Attention Is All You Need"
        assert papers[0].authors[0] == Author(
            name="Ashish Vaswani", affiliation="Google Brain"
        )
        assert papers[1].arxiv_id == "math/0309136v1"

    def test_search_by_id_list(self, mock_arxiv_client):
        """Test searching by identifier list."""
        papers = mock_arxiv_client.search(
            Query(id_list=["1706.03762", "math/0309136"], max_results=2)
        )
        assert [paper.arxiv_id for paper in papers] == [
            "arXiv:1706.03762v7",
            "math/0309136v1",
        ]

    def test_search_empty_results(self, mock_arxiv_client):
        """Test search without results."""
        assert mock_arxiv_client.search(Query(query="all:nothing")) == []

    def test_search_error_entry(self, mock_arxiv_client):
        """Test an error entry raises ArxivSearchError."""
        with pytest.raises(ArxivSearchError) as exc_info:
            mock_arxiv_client.search(Query(query="all:error"))
        assert str(exc_info.value) == "malformed query"

    def test_search_malformed_response(self, mock_arxiv_client):
        """Test a malformed body raises ArxivDecodeError."""
        with pytest.raises(ArxivDecodeError, match="failed to parse search results"):
            mock_arxiv_client.search(Query(query="all:broken"))

    def test_search_unavailable(self, mock_arxiv_client):
        """Test a non-XML error page raises ArxivDecodeError."""
        with pytest.raises(ArxivDecodeError):
            mock_arxiv_client.search(Query(query="all:unavailable"))

    def test_search_sends_query_parameters(self, mock_arxiv_server: HTTPServer):
        """Test query parameters sent to the server."""
        with ArxivClient(base_url=mock_arxiv_server.url_for("/api/query")) as client:
            client.search(Query(query="ti:graph", id_list=[], start=4, max_results=8))

        request, _ = mock_arxiv_server.log[-1]
        assert request.args.get("search_query") == "ti:graph"
        assert request.args.get("id_list") == ""
        assert request.args.get("start") == "4"
        assert request.args.get("max_results") == "8"

    def test_search_sends_user_agent(self, mock_arxiv_server: HTTPServer):
        """Test the configured User-Agent header is sent."""
        with ArxivClient(base_url=mock_arxiv_server.url_for("/api/query")) as client:
            client.search(Query(query="all:nothing"))

        request, _ = mock_arxiv_server.log[-1]
        assert request.headers.get("User-Agent") == settings.arxiv_user_agent

    def test_search_error_entry_case_insensitive(self):
        """Test the error title is matched case-insensitively."""
        xml = ERROR_FEED_XML.replace("<title>Error</title>", "<title>ERROR</title>")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=xml.encode())

        with mock_transport_client(handler) as client:
            with pytest.raises(ArxivSearchError, match="malformed query"):
                client.search(Query(query="all:x"))

    def test_search_connection_error(self):
        """Test connection failures raise ArxivTransportError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with mock_transport_client(handler) as client:
            with pytest.raises(ArxivTransportError, match="failed to execute search"):
                client.search(Query(query="all:x"))

    def test_search_timeout(self):
        """Test timeouts raise ArxivTransportError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with mock_transport_client(handler) as client:
            with pytest.raises(ArxivTransportError):
                client.search(Query(query="all:x"))

    def test_search_cancelled(self):
        """Test a cancelled search raises ArxivCancelledError."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=SAMPLE_FEED_XML.encode())

        cancel = threading.Event()
        cancel.set()
        with mock_transport_client(handler) as client:
            with pytest.raises(ArxivCancelledError):
                client.search(Query(query="all:x"), cancel=cancel)

    def test_injected_client_is_not_closed(self):
        """Test an injected HTTP client is left open."""
        http_client = httpx.Client(
            transport=httpx.MockTransport(lambda request: httpx.Response(200))
        )
        with ArxivClient(client=http_client):
            pass
        assert not http_client.is_closed
        http_client.close()

    def test_parse_body(self):
        """Test decoding an already fetched body."""
        papers = ArxivClient().parse([SAMPLE_FEED_XML.encode()])
        assert len(papers) == 2

    def test_parse_body_with_error_entry(self):
        """Test decoding a body that carries an error entry."""
        with pytest.raises(ArxivSearchError, match="malformed query"):
            ArxivClient().parse([ERROR_FEED_XML.encode()])


def test_module_search(mock_arxiv_server: HTTPServer, monkeypatch):
    """Test the module-level search helper."""
    monkeypatch.setattr(
        client_module.settings,
        "arxiv_api_base_url",
        mock_arxiv_server.url_for("/api/query"),
    )

    papers = search(Query.for_terms("attention", 0, 2))
    assert len(papers) == 2

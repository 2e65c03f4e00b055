"""Tests for HTTP Marketplace access."""

from __future__ import annotations

import json
import socket
from http.client import BadStatusLine, IncompleteRead, LineTooLong
from unittest.mock import MagicMock, patch
from urllib.error import HTTPError, URLError

import pytest

from epexplorer.config.models import MarketplaceConfig
from epexplorer.core.models import SortKey
from epexplorer.marketplace.base import MarketplaceError
from epexplorer.marketplace.client import HttpMarketplaceSource
from epexplorer.mcp.tools import ExplorerToolExecutor


def _response(body: bytes, status: int = 200) -> MagicMock:
    response = MagicMock()
    response.status = status
    response.read.side_effect = [body, b""] if body else [b""]
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


class TestHttpMarketplaceSource:
    """Tests for HttpMarketplaceSource."""

    @pytest.fixture
    def source(self) -> HttpMarketplaceSource:
        return HttpMarketplaceSource(MarketplaceConfig(timeout=7))

    def test_default_config(self) -> None:
        source = HttpMarketplaceSource()
        assert source.config.index_url == "https://plugins.jetbrains.com/api/extension-points"
        assert source.config.timeout == 10.0

    def test_fetch_index(self, source) -> None:
        payload = [{"implementationName": "com.intellij.a"}]
        with patch(
            "epexplorer.marketplace.client.urlopen",
            return_value=_response(json.dumps(payload).encode()),
        ) as mock_urlopen:
            assert source.fetch_index() == payload

        request = mock_urlopen.call_args.args[0]
        assert request.full_url == source.config.index_url
        assert request.get_method() == "GET"
        assert mock_urlopen.call_args.kwargs["timeout"] == 7

    def test_fetch_usages_posts_graphql(self, source) -> None:
        with patch(
            "epexplorer.marketplace.client.urlopen",
            return_value=_response(b'{"data": {}}'),
        ) as mock_urlopen:
            assert source.fetch_usages("com.intellij.a", SortKey.UPDATE_DATE) == {"data": {}}

        request = mock_urlopen.call_args.args[0]
        assert request.full_url == source.config.search_url
        assert request.get_method() == "POST"
        assert request.get_header("Content-type") == "application/json"
        body = json.loads(request.data.decode("utf-8"))
        assert "com.intellij.a" in body["query"]
        assert "sortBy: UPDATE_DATE" in body["query"]

    def test_http_error(self, source) -> None:
        error = HTTPError(source.config.index_url, 503, "Service Unavailable", {}, None)
        with patch("epexplorer.marketplace.client.urlopen", side_effect=error):
            with pytest.raises(MarketplaceError, match="HTTP 503"):
                source.fetch_index()

    def test_url_error(self, source) -> None:
        with patch(
            "epexplorer.marketplace.client.urlopen",
            side_effect=URLError("Name or service not known"),
        ):
            with pytest.raises(MarketplaceError, match="Name or service not known"):
                source.fetch_index()

    def test_timeout(self, source) -> None:
        with patch("epexplorer.marketplace.client.urlopen", side_effect=socket.timeout()):
            with pytest.raises(MarketplaceError, match="timed out"):
                source.fetch_usages("x", SortKey.DOWNLOADS)

    def test_non_200_status(self, source) -> None:
        with patch(
            "epexplorer.marketplace.client.urlopen",
            return_value=_response(b"", status=204),
        ):
            with pytest.raises(MarketplaceError, match="204"):
                source.fetch_index()

    def test_invalid_json(self, source) -> None:
        with patch(
            "epexplorer.marketplace.client.urlopen",
            return_value=_response(b"<html>"),
        ):
            with pytest.raises(MarketplaceError, match="invalid JSON"):
                source.fetch_index()

    def test_reads_body_in_chunks(self, source) -> None:
        response = _response(b"")
        response.read.side_effect = [b'[{"implementationName": ', b'"a"}]', b""]
        with patch("epexplorer.marketplace.client.urlopen", return_value=response):
            assert source.fetch_index() == [{"implementationName": "a"}]

    def test_truncated_body(self, source) -> None:
        response = _response(b"")
        response.read.side_effect = IncompleteRead(b"[{", 100)
        with patch("epexplorer.marketplace.client.urlopen", return_value=response):
            with pytest.raises(MarketplaceError, match="malformed HTTP response"):
                source.fetch_index()

    @pytest.mark.parametrize("error", [BadStatusLine("garbage"), LineTooLong("header line")])
    def test_malformed_http_response(self, source, error) -> None:
        with patch("epexplorer.marketplace.client.urlopen", side_effect=error):
            with pytest.raises(MarketplaceError, match="malformed HTTP response"):
                source.fetch_usages("x", SortKey.DOWNLOADS)

    def test_slow_body_hits_overall_deadline(self, source) -> None:
        response = _response(b"")
        response.read.side_effect = [b"[", b"]", b""]
        with patch("epexplorer.marketplace.client.urlopen", return_value=response), patch(
            "epexplorer.marketplace.client.time.monotonic", side_effect=[0.0, 5.0, 8.0]
        ):
            with pytest.raises(MarketplaceError, match="timed out after 7"):
                source.fetch_index()


class TestHttpFailuresAreContained:
    """Malformed HTTP traffic reaches the explorer only as empty data."""

    def test_truncated_index_lists_nothing(self) -> None:
        response = _response(b"")
        response.read.side_effect = IncompleteRead(b"[{", 100)
        with patch("epexplorer.marketplace.client.urlopen", return_value=response):
            assert ExplorerToolExecutor().list_extensions() == ""

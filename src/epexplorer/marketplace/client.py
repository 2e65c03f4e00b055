"""HTTP access to the JetBrains Marketplace.

Requests are plain blocking urllib calls. The configured timeout bounds each
socket operation and the whole response read. Every failure is reported as
MarketplaceError; there is no retry.
"""

from __future__ import annotations

import json
import socket
import time
from http.client import HTTPException
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from epexplorer import __version__ as EPEXPLORER_VERSION
from epexplorer.config.models import MarketplaceConfig
from epexplorer.core.logging import get_logger
from epexplorer.core.models import SortKey
from epexplorer.marketplace.base import MarketplaceError, MarketplaceSource
from epexplorer.marketplace.query import build_request_body

LOGGER = get_logger(__name__)

READ_CHUNK_SIZE = 64 * 1024


class HttpMarketplaceSource(MarketplaceSource):
    """MarketplaceSource backed by the public Marketplace HTTP endpoints."""

    def __init__(self, config: Optional[MarketplaceConfig] = None):
        """Initialize HttpMarketplaceSource.

        Args:
            config: Endpoint and request settings. Defaults target
                plugins.jetbrains.com.
        """
        self.config = config or MarketplaceConfig()

    def fetch_index(self) -> Any:
        request = Request(
            self.config.index_url,
            headers=self._headers(),
            method="GET",
        )
        return self._send(request)

    def fetch_usages(self, extension_point: str, sort_key: SortKey) -> Any:
        body = build_request_body(
            extension_point,
            sort_key,
            page_size=self.config.page_size,
            family=self.config.family,
        )
        headers = self._headers()
        headers["Content-Type"] = "application/json"
        request = Request(
            self.config.search_url,
            data=body,
            headers=headers,
            method="POST",
        )
        return self._send(request)

    def _headers(self) -> dict:
        return {
            "Accept": "application/json",
            "User-Agent": f"{self.config.user_agent}/{EPEXPLORER_VERSION}",
        }

    def _send(self, request: Request) -> Any:
        """Send a request and decode its JSON body.

        Raises:
            MarketplaceError: On HTTP errors, non-200 responses, network
                failures, timeouts or undecodable bodies.
        """
        url = request.full_url
        LOGGER.debug(f"{request.get_method()} {url}")

        deadline = time.monotonic() + self.config.timeout
        try:
            with urlopen(request, timeout=self.config.timeout) as response:  # nosec B310
                status = response.status
                raw = self._read_body(response, url, deadline)
        except HTTPError as e:
            raise MarketplaceError(f"{url}: HTTP {e.code} - {e.reason}") from e
        except URLError as e:
            raise MarketplaceError(f"{url}: {e.reason}") from e
        except (socket.timeout, TimeoutError) as e:
            raise MarketplaceError(f"{url}: timed out after {self.config.timeout}s") from e
        except OSError as e:
            raise MarketplaceError(f"{url}: {e}") from e
        except HTTPException as e:
            raise MarketplaceError(f"{url}: malformed HTTP response: {e!r}") from e

        if status != 200:
            raise MarketplaceError(f"{url}: unexpected HTTP status {status}")

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MarketplaceError(f"{url}: invalid JSON response: {e}") from e

    def _read_body(self, response: Any, url: str, deadline: float) -> bytes:
        """Read the response body in chunks, failing once deadline has passed."""
        chunks = []
        while True:
            chunk = response.read(READ_CHUNK_SIZE)
            if not chunk:
                return b"".join(chunks)
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise MarketplaceError(f"{url}: timed out after {self.config.timeout}s")

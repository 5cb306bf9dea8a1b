from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol

from webfetcher.domain.fetch_result import FetchResult

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Return the DOM source of a page after its JavaScript has run."""

    def rendered_source(self, url: str) -> str: ...

    def close(self) -> None: ...


class Transport(Protocol):
    """Everything a crawl run needs from the network, released by `close()`."""

    def fetch(self, url: str, root_url: str) -> FetchResult: ...

    def rendered_source(self, url: str) -> str: ...

    def close(self) -> None: ...


class HttpTransport:
    """Transport made of an HTTP fetcher and an optional JavaScript renderer."""

    def __init__(self, http_service, renderer: Optional[Renderer] = None):
        self._http_service = http_service
        self._renderer = renderer
        self._closed = False
        self._lock = threading.Lock()

    def fetch(self, url: str, root_url: str) -> FetchResult:
        return self._http_service.fetch(url, root_url)

    def rendered_source(self, url: str) -> str:
        if self._renderer is None:
            raise RuntimeError("JavaScript rendering requested but no renderer is configured")
        return self._renderer.rendered_source(url)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        try:
            self._http_service.close()
        finally:
            if self._renderer is not None:
                self._renderer.close()
        logger.debug("Transport closed")

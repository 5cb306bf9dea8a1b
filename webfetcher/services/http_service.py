import logging
from typing import Optional

import requests

from webfetcher.domain.config import ProxySettings
from webfetcher.domain.fetch_result import FetchResult

logger = logging.getLogger(__name__)


def _header_lists(resp) -> dict[str, list[str]]:
    """Response headers as name -> values, keeping repeated headers apart.

    requests folds repeated headers into one comma-joined value; the urllib3
    headers under `resp.raw` still hold each value separately.
    """
    raw_headers = getattr(resp.raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "getlist"):
        return {name: list(raw_headers.getlist(name)) for name in raw_headers.keys()}
    return {name: [value] for name, value in resp.headers.items()}


class HttpService:
    """
    HTTP client wrapper for fetching web pages.

    Requires a `requests.Session`-like object for dependency injection, which
    enables testing without patching. The session is shared by every worker of
    a run (requests sessions pool connections per host) and closed at run end.

    Transport errors and non-2xx responses are returned as a `FetchResult`
    without content rather than raised.
    """

    def __init__(
        self,
        user_agent: str,
        session: Optional[requests.Session] = None,
        timeout: int = 10,
        referer: Optional[str] = None,
        proxy: Optional[ProxySettings] = None,
        verify_ssl: bool = True,
    ):
        self.user_agent = user_agent
        self.timeout = timeout
        self.referer = referer
        self.session = session if session is not None else requests.Session()
        self.session.headers["User-Agent"] = user_agent
        self.session.verify = verify_ssl
        if proxy is not None:
            proxy_url = proxy.as_url()
            self.session.proxies.update({"http": proxy_url, "https": proxy_url})

    def fetch(self, url: str, root_url: str) -> FetchResult:
        """Fetch `url`, sending the configured referer or else `root_url`."""
        headers = {"Referer": self.referer or root_url}
        try:
            resp = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.debug("Request to %s failed: %s", url, e)
            return FetchResult(None, {}, 0, url, root_url, str(e))

        response_headers = _header_lists(resp)
        status = resp.status_code
        if status < 200 or status >= 300:
            return FetchResult(None, response_headers, status, url, root_url, resp.reason or "")

        return FetchResult(resp.content, response_headers, status, url, root_url, resp.reason or "")

    def close(self) -> None:
        self.session.close()

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import requests

from webfetcher.domain.config import FetcherJobConfig
from webfetcher.services.fetcher import HttpTransport
from webfetcher.services.headless_browser_fetcher import PlaywrightHeadlessOptions, PlaywrightRenderer
from webfetcher.services.http_service import HttpService


@dataclass(frozen=True)
class FetcherFactory:
    """Builds the transport of a crawl run from its job config.

    A fresh transport is created per run, so connection pools and browser
    handles live exactly as long as the run that uses them.
    """

    session_factory: Callable[[], requests.Session] = requests.Session
    wait_until: str = "networkidle"

    def create(self, config: FetcherJobConfig) -> HttpTransport:
        if config is None:
            raise ValueError("config is required")

        http_service = HttpService(
            user_agent=config.crawler_user_agent,
            session=self.session_factory(),
            timeout=int(config.timeout),
            referer=config.crawler_referer,
            proxy=config.proxy,
            verify_ssl=not config.disable_ssl_check,
        )

        renderer = None
        if config.wait_javascript:
            renderer = PlaywrightRenderer(
                user_agent=config.crawler_user_agent,
                options=PlaywrightHeadlessOptions(
                    timeout_ms=int(config.timeout) * 1000,
                    wait_until=self.wait_until,
                ),
                proxy_server=config.proxy.as_url() if config.proxy is not None else None,
                ignore_https_errors=config.disable_ssl_check,
            )

        return HttpTransport(http_service, renderer)

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ProxySettings:
    """Outbound proxy used by the HTTP transport."""

    host: str
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None

    def as_url(self) -> str:
        auth = ""
        if self.user:
            auth = self.user if self.password is None else f"{self.user}:{self.password}"
            auth += "@"
        port = f":{self.port}" if self.port else ""
        return f"http://{auth}{self.host}{port}"


@dataclass(frozen=True)
class FetcherJobConfig:
    """Settings of a single crawl run, seeded from one URL.

    `max_depth` and `max_pages` use 0 for "unlimited". `data_folder` may be
    None, in which case the run is not reconciled against a previous one.
    """

    url: str
    data_folder: Optional[str] = None
    read_robots: bool = True
    threads: int = 1
    max_depth: int = 0
    max_pages: int = 0
    excluded_data: list[str] = field(default_factory=list)
    excluded_link: list[str] = field(default_factory=list)
    crawler_user_agent: str = "webfetcher/0.1"
    crawler_referer: Optional[str] = None
    wait_javascript: bool = False
    thread_id: Optional[str] = None
    timeout: int = 10
    disable_ssl_check: bool = False
    proxy: Optional[ProxySettings] = None

    def __post_init__(self):
        if self.url is None or (isinstance(self.url, str) and self.url.strip() == ""):
            raise ValueError("url is required")
        if int(self.threads) < 1:
            raise ValueError("threads must be >= 1")
        if int(self.max_depth) < 0:
            raise ValueError("max_depth must be >= 0")
        if int(self.max_pages) < 0:
            raise ValueError("max_pages must be >= 0")
        for pattern in list(self.excluded_data) + list(self.excluded_link):
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid exclusion pattern {pattern!r}: {e}") from e

    @property
    def job_name(self) -> str:
        return self.thread_id or self.url

import os
from typing import Any, Optional

from webfetcher.domain.config import FetcherJobConfig, ProxySettings


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


class CrawlerConfigParser:
    """Parse a YAML job dict into one FetcherJobConfig per seed URL.

    Responsibility: schema/validation for YAML job files.
    It does NOT perform filesystem IO.

    Keys missing from the file fall back to the defaults given at
    construction (usually read from the environment).
    """

    def __init__(
        self,
        *,
        default_user_agent: str = "webfetcher/0.1",
        default_threads: int = 1,
        default_timeout: int = 10,
        default_data_folder: Optional[str] = None,
    ):
        self.default_user_agent = default_user_agent
        self.default_threads = int(default_threads)
        self.default_timeout = int(default_timeout)
        self.default_data_folder = default_data_folder

    def _parse_proxy(self, data: dict) -> Optional[ProxySettings]:
        proxy = data.get("proxy")
        if not proxy or not proxy.get("host"):
            return None
        port = proxy.get("port")
        return ProxySettings(
            host=proxy["host"],
            port=int(port) if port else None,
            user=proxy.get("user"),
            password=proxy.get("password"),
        )

    def parse(self, *, config_path: str, data: dict) -> list[FetcherJobConfig]:
        """Return the runs described by `data`; empty when it names no URL.

        Raises ValueError for invalid settings (negative limits, bad regexes).
        """
        urls = _as_list(data.get("urls") or data.get("url"))
        if not urls:
            return []

        base_id = data.get("thread_id") or os.path.splitext(os.path.basename(config_path))[0]
        proxy = self._parse_proxy(data)

        configs = []
        for index, url in enumerate(urls):
            configs.append(
                FetcherJobConfig(
                    url=url,
                    data_folder=data.get("data_folder", self.default_data_folder),
                    read_robots=bool(data.get("read_robots", True)),
                    threads=int(data.get("threads", self.default_threads)),
                    max_depth=int(data.get("max_depth", 0)),
                    max_pages=int(data.get("max_pages", 0)),
                    excluded_data=_as_list(data.get("exclude_data")),
                    excluded_link=_as_list(data.get("exclude_link")),
                    crawler_user_agent=data.get("crawler_user_agent") or self.default_user_agent,
                    crawler_referer=data.get("crawler_referer"),
                    wait_javascript=bool(data.get("javascript", False)),
                    thread_id=base_id if len(urls) == 1 else f"{base_id}-{index}",
                    timeout=int(data.get("timeout", self.default_timeout)),
                    disable_ssl_check=bool(data.get("disable_ssl_check", False)),
                    proxy=proxy,
                )
            )
        return configs

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from webfetcher.exceptions import RenderError


@dataclass(frozen=True)
class PlaywrightHeadlessOptions:
    timeout_ms: int = 10_000
    wait_until: str = "networkidle"  # domcontentloaded | load | networkidle


class PlaywrightRenderer:
    """JavaScript renderer backed by Playwright.

    Renders a page in headless Chromium and returns the final DOM HTML via
    page.content().

    Notes:
    - A browser is launched per render. Playwright's sync API is bound to the
      thread that started it, and renders happen on arbitrary pool workers.
    - Playwright is imported lazily so non-headless installs still work.
    """

    def __init__(
        self,
        *,
        user_agent: str,
        options: Optional[PlaywrightHeadlessOptions] = None,
        proxy_server: Optional[str] = None,
        ignore_https_errors: bool = False,
    ):
        self._user_agent = user_agent
        self._options = options or PlaywrightHeadlessOptions()
        self._proxy_server = proxy_server
        self._ignore_https_errors = ignore_https_errors
        self._closed = False

    def _sync_playwright(self):
        try:
            from playwright.sync_api import sync_playwright  # type: ignore
        except Exception as e:
            raise RuntimeError(
                "JavaScript rendering requested but Playwright is not installed. "
                "Install 'playwright' and run 'python -m playwright install chromium'."
            ) from e
        return sync_playwright

    def rendered_source(self, url: str) -> str:
        if self._closed:
            raise RuntimeError("Renderer is closed")

        sync_playwright = self._sync_playwright()

        launch_args = {"headless": True}
        if self._proxy_server:
            launch_args["proxy"] = {"server": self._proxy_server}

        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(**launch_args)
                try:
                    context = browser.new_context(
                        user_agent=self._user_agent,
                        ignore_https_errors=self._ignore_https_errors,
                    )
                    page = context.new_page()
                    page.goto(url, wait_until=self._options.wait_until, timeout=self._options.timeout_ms)
                    return page.content()
                finally:
                    browser.close()
        except Exception as e:
            raise RenderError(url, e) from e

    def close(self) -> None:
        self._closed = True

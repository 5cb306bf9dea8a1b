"""Custom exceptions for webfetcher services."""


class ConfigNotFoundError(Exception):
    """Raised when a requested job file cannot be found or is not a mapping."""

    def __init__(self, config_path: str, reason: str = "not found"):
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Config '{config_path}' {reason}")


class UrlResolveError(ValueError):
    """Raised when a link cannot be resolved because its root URL is not absolute."""

    def __init__(self, url: str, root_url: str):
        self.url = url
        self.root_url = root_url
        super().__init__(f"Cannot resolve {url!r} against malformed root {root_url!r}")


class RunStateError(Exception):
    """Raised when the persisted visited-URL list of a run cannot be read or written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Run state '{path}': {reason}")


class RenderError(Exception):
    """Raised when the JavaScript renderer fails to produce a page source."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"Rendering failed for {url}: {original}")

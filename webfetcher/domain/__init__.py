"""Domain objects for webfetcher - explicit re-exports to satisfy linters."""
from .config import FetcherJobConfig as FetcherJobConfig
from .config import ProxySettings as ProxySettings
from .crawl_context import CrawlContext as CrawlContext
from .crawl_result import CrawlPhase as CrawlPhase
from .crawl_result import CrawlRunResult as CrawlRunResult
from .fetch_result import FetchResult as FetchResult
from .records import CrawlRecord as CrawlRecord
from .records import DeleteRecord as DeleteRecord

__all__ = [
    "FetcherJobConfig",
    "ProxySettings",
    "CrawlContext",
    "CrawlPhase",
    "CrawlRunResult",
    "FetchResult",
    "CrawlRecord",
    "DeleteRecord",
]

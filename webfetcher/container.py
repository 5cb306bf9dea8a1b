"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from webfetcher.services.config_file_store import ConfigFileStore
from webfetcher.services.content_extractor import ContentExtractor
from webfetcher.services.crawl_executor import CrawlExecutor
from webfetcher.services.crawler_config_parser import CrawlerConfigParser
from webfetcher.services.fetcher_factory import FetcherFactory
from webfetcher.services.robots_service import RobotsService
from webfetcher import config as env


# Environment variables used by the container (read via `webfetcher.config` helpers).
#
# USER_AGENT (str, default: "webfetcher/0.1")
#   User-Agent of jobs that do not set `crawler_user_agent`; also the agent
#   whose robots.txt rules are enforced.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout of jobs that do not set `timeout`. Also used for JavaScript rendering.
#
# WEBFETCHER_THREADS (int, default: 10)
#   Worker pool size of jobs that do not set `threads`.
#
# WEBFETCHER_DATA_FOLDER (str | optional)
#   Folder holding the visited-URL list of each seed between runs. Jobs
#   without a data folder are not reconciled.
#
# WEBFETCHER_CONFIGS_DIR (str, default: "./configs")
#   Directory used to resolve relative job file paths.
#
# WEBFETCHER_DRAIN_POLL_SECONDS (float seconds, default: 5.0)
#   How often the orchestrator logs while waiting for in-flight tasks.
#
# WEBFETCHER_RENDER_WAIT_UNTIL (str, default: "networkidle")
#   Playwright load state awaited before reading the rendered DOM.
ENV = {
    "USER_AGENT": env.get_str_env("USER_AGENT", "webfetcher/0.1"),
    "HTTP_TIMEOUT": env.get_int_env("HTTP_TIMEOUT", 10),
    "WEBFETCHER_THREADS": env.get_int_env("WEBFETCHER_THREADS", 10),
    "WEBFETCHER_DATA_FOLDER": env.get_optional_str_env("WEBFETCHER_DATA_FOLDER"),
    "WEBFETCHER_CONFIGS_DIR": env.get_str_env("WEBFETCHER_CONFIGS_DIR", "configs"),
    "WEBFETCHER_DRAIN_POLL_SECONDS": env.get_float_env("WEBFETCHER_DRAIN_POLL_SECONDS", 5.0),
    "WEBFETCHER_RENDER_WAIT_UNTIL": env.get_str_env("WEBFETCHER_RENDER_WAIT_UNTIL", "networkidle"),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for webfetcher."""

    # Configuration
    config = providers.Configuration(default=ENV)

    config_file_store = providers.Singleton(
        ConfigFileStore,
        configs_dir=config.WEBFETCHER_CONFIGS_DIR.as_(str),
    )

    crawler_config_parser = providers.Singleton(
        CrawlerConfigParser,
        default_user_agent=config.USER_AGENT.as_(str),
        default_threads=config.WEBFETCHER_THREADS.as_(int),
        default_timeout=config.HTTP_TIMEOUT.as_(int),
        default_data_folder=config.WEBFETCHER_DATA_FOLDER,
    )

    # One transport per run is built by the factory; the factory itself is shared.
    fetcher_factory = providers.Singleton(
        FetcherFactory,
        session_factory=providers.Object(requests.Session),
        wait_until=config.WEBFETCHER_RENDER_WAIT_UNTIL.as_(str),
    )

    robots_service = providers.Singleton(
        RobotsService
    )

    content_extractor = providers.Singleton(
        ContentExtractor
    )

    crawl_executor = providers.Factory(
        CrawlExecutor,
        fetcher_factory=fetcher_factory,
        robots_service=robots_service,
        content_extractor=content_extractor,
        drain_poll_seconds=config.WEBFETCHER_DRAIN_POLL_SECONDS.as_(float),
    )

import logging
import re
from urllib.parse import SplitResult, urlsplit

from webfetcher.exceptions import UrlResolveError

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def has_scheme(link: str) -> bool:
    return bool(_SCHEME_RE.match(link))


def _parse_root(link: str, root_url: str) -> SplitResult:
    try:
        root = urlsplit(root_url)
    except ValueError as e:
        raise UrlResolveError(link, root_url) from e
    if not root.scheme or not root.netloc:
        raise UrlResolveError(link, root_url)
    return root


def resolve(link: str, root_url: str) -> str:
    """Resolve `link` found while crawling `root_url` into an absolute URL.

    Absolute links are kept as they are, root-relative links are attached to
    the root's scheme and host, and bare relative links replace the last path
    segment of the root. A single trailing slash is trimmed so that
    `http://host/page/` and `http://host/page` are the same URL, except when
    the result is the root itself.

    Raises UrlResolveError when `root_url` is needed and is not absolute.
    """
    link = link.strip()

    if has_scheme(link):
        resolved = link
    elif link.startswith("/"):
        root = _parse_root(link, root_url)
        resolved = f"{root.scheme}://{root.netloc}{link}"
    else:
        root = _parse_root(link, root_url)
        if root.path in ("", "/"):
            resolved = f"{root.scheme}://{root.netloc}/{link}"
        else:
            base = f"{root.scheme}://{root.netloc}{root.path}"
            resolved = base[: base.rfind("/") + 1] + link

    if not has_scheme(resolved):
        resolved = root_url + resolved

    if resolved.endswith("/") and resolved != root_url:
        resolved = resolved[:-1]

    return resolved


def simplified_host(url: str) -> str:
    """Host (and port) of `url`, plus its first path segment for nested paths.

    `http://example.com:8080/docs/page` gives `example.com:8080/docs`, while
    `http://example.com/page` gives `example.com`. Malformed URLs are
    returned unchanged.
    """
    try:
        parsed = urlsplit(url)
        host = parsed.hostname
        port = parsed.port
    except ValueError:
        logger.error("Malformed URL %s", url, exc_info=True)
        return url

    if not host:
        logger.error("Malformed URL %s: no host", url)
        return url

    simple = f"{host}:{port}" if port else host

    path = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
    segments = path.split("/")
    while segments and segments[-1] == "":
        segments.pop()
    if len(segments) > 1:
        simple += "/" + segments[0]

    return simple

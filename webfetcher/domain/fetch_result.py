from typing import Mapping, NamedTuple, Optional, Sequence


class FetchResult(NamedTuple):
    """Response from a transport fetch.

    `content` is None when the fetch failed (network error or non-2xx status);
    `message` then carries the reason.
    """
    content: Optional[bytes]
    headers: Mapping[str, Sequence[str]]
    status_code: int
    url: str
    root_url: str
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.content is not None

    def header(self, name: str) -> Optional[str]:
        """First value of header `name`, matched case-insensitively."""
        wanted = name.lower()
        for key, values in self.headers.items():
            if key is not None and key.lower() == wanted and values:
                return values[0]
        return None

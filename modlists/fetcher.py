"""HTTP retrieval of source pages."""

import urllib.error
import urllib.request
from typing import Protocol

from modlists import __version__
from modlists.errors import FetchError
from modlists.utils.constants import DEFAULT_HTTP_TIMEOUT

DEFAULT_USER_AGENT = f"Mozilla/5.0 (compatible; modlists/{__version__})"


class Fetcher(Protocol):
    """Anything that can turn a URL into page text or raise FetchError."""

    def get(self, url: str) -> str: ...


class UrllibFetcher:
    """Single GET per call, no retries."""

    def __init__(self, user_agent: str | None = None, timeout: int = DEFAULT_HTTP_TIMEOUT):
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.timeout = timeout

    def get(self, url: str) -> str:
        try:
            req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                charset = response.headers.get_content_charset() or "utf-8"
                return response.read().decode(charset, errors="replace")
        except urllib.error.HTTPError as e:
            raise FetchError(url, f"{e.code} {e.reason}") from e
        except urllib.error.URLError as e:
            raise FetchError(url, f"500 {e.reason}") from e
        except OSError as e:
            raise FetchError(url, f"500 {e}") from e
        except (ValueError, LookupError) as e:
            # Malformed URL or unknown charset
            raise FetchError(url, f"500 {e}") from e

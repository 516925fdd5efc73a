"""Filesystem cache for fetched pages.

One plain-text file per URL under ``<output_dir>/devdata/``. The file name
is the sanitized URL and the file's modification time is the retrieval
timestamp; there is no separate metadata file.
"""

import hashlib
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from modlists.utils.constants import CACHE_MAX_AGE_DAYS

_UNSAFE_RUN = re.compile(r"[^A-Za-z0-9_.-]+")

# Most filesystems cap a file name at 255 bytes
MAX_KEY_LENGTH = 255
_KEY_PREFIX_LENGTH = 200


def url_to_filename(url: str) -> str:
    """Map a URL to a cache file name.

    Each run of characters outside ``[A-Za-z0-9_.-]`` becomes a single ``_``.
    Names longer than ``MAX_KEY_LENGTH`` keep a prefix and end with a hash of
    the full sanitized name. Applying it to an already sanitized name returns
    the name unchanged.
    """
    key = _UNSAFE_RUN.sub("_", url)
    if len(key) <= MAX_KEY_LENGTH:
        return key
    digest = hashlib.sha256(key.encode("ascii")).hexdigest()[:16]
    return f"{key[:_KEY_PREFIX_LENGTH]}_{digest}"


@dataclass
class CachedPage:
    """A fresh cache hit."""

    path: Path
    content: str
    mtime: float


class PageCache:
    """Read and write cached page content keyed by sanitized URL."""

    def __init__(
        self,
        cache_dir: Path,
        max_age_days: int = CACHE_MAX_AGE_DAYS,
        clock: Callable[[], float] = time.time,
    ):
        self.cache_dir = Path(cache_dir)
        self.max_age = max_age_days * 86400
        self.clock = clock

    def path_for(self, url: str) -> Path:
        return self.cache_dir / url_to_filename(url)

    def lookup(self, url: str) -> CachedPage | None:
        """Return the cached page if it exists and is younger than the retention window."""
        path = self.path_for(url)
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return None

        if mtime < self.clock() - self.max_age:
            return None

        return CachedPage(path=path, content=path.read_text(encoding="utf-8"), mtime=mtime)

    def store(self, url: str, content: str) -> Path:
        """Write content for a URL, overwriting any previous entry."""
        path = self.path_for(url)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

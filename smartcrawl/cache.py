"""Result cache: completed extractions keyed by locator fingerprint and domain.

Each stored artifact is one JSON file in ``settings.cache_dir``::

    text_<domain>_<hash8>_<epoch-ms>.json

A lookup returns the newest artifact for the key.  Writes never lock; when two
writers race, the later file wins.
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Optional

from smartcrawl.config import settings
from smartcrawl.errors import ParseError
from smartcrawl.models import CrawlResult
from smartcrawl.urls import domain_slug, extract_domain, url_hash

_PREFIX = "text_"
_SUFFIX = ".json"


def cache_key(url: str) -> str:
    """``<domain>_<first 8 hex chars of md5(url)>`` for a normalised *url*."""
    return f"{domain_slug(extract_domain(url))}_{url_hash(url)[:8]}"


def _timestamp(path: Path, key: str) -> int:
    stamp = path.name[len(_PREFIX) + len(key) + 1 : -len(_SUFFIX)]
    return int(stamp) if stamp.isdigit() else -1


def load_result(path: Path) -> CrawlResult:
    """Read one stored artifact.

    Raises:
        ParseError: If the file is not a valid stored result.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return CrawlResult.from_dict(raw)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
        raise ParseError(f"Corrupt cache entry {path.name}: {exc}") from exc


class ResultCache:
    """File-backed store of successful :class:`CrawlResult` objects."""

    def __init__(self, directory: Optional[Path] = None) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory or settings.cache_dir

    def find(self, url: str) -> Optional[Path]:
        """Path of the newest artifact stored for *url*, if any."""
        if not self.directory.exists():
            return None
        key = cache_key(url)
        candidates = [
            p for p in self.directory.glob(f"{_PREFIX}{key}_*{_SUFFIX}")
            if _timestamp(p, key) >= 0
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda p: _timestamp(p, key))

    def lookup(self, url: str) -> Optional[CrawlResult]:
        """Return the most recent stored result for *url*, or ``None``.

        A corrupt artifact is reported and treated as a miss.
        """
        path = self.find(url)
        if path is None:
            return None
        try:
            result = load_result(path)
        except ParseError as exc:
            print(f"[CACHE] {exc.message}; ignoring it")
            return None
        result.from_cache = True
        print(f"[CACHE] hit for {url}: {path.name}")
        return result

    def store(self, url: str, result: CrawlResult) -> Path:
        """Persist *result* under *url*'s key and return the file path."""
        self.directory.mkdir(parents=True, exist_ok=True)
        stamp = int(time.time() * 1000)
        path = self.directory / f"{_PREFIX}{cache_key(url)}_{stamp}{_SUFFIX}"
        path.write_text(json.dumps(result.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"[CACHE] stored {url} → {path.name}")
        return path

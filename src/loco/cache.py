"""
Caching system for loco.

Uses diskcache for SQLite-based persistent caching of FileMetrics keyed by
content hash, so unchanged files are not re-classified across runs.
"""

import dataclasses
import hashlib
import threading
from typing import Optional

from diskcache import Cache

from . import __version__
from .logging_config import get_logger
from .scanning.languages import LanguageRule
from .scanning.models import FileMetric

logger = get_logger(__name__)


def content_key(content: str, rule: LanguageRule) -> str:
    """
    Cache key for a piece of content under a rule.

    The key covers the content, the full rule and the package version, so
    editing a rule or upgrading invalidates old entries.
    """
    digest = hashlib.sha256()
    digest.update(__version__.encode())
    digest.update(repr(rule).encode())
    digest.update(b"\0")
    digest.update(content.encode("utf-8", errors="surrogatepass"))
    return digest.hexdigest()


class AnalysisCache:
    """
    SQLite-based cache of (content hash, FileMetric) pairs.

    Features:
    - Content-addressed keys: renamed or copied files still hit
    - TTL-based expiration
    - Thread-safe operations (diskcache handles its own locking)
    """

    def __init__(self, cache_dir: str = ".loco-cache", ttl_hours: int = 24, enabled: bool = True):
        """
        Initialize cache.

        Args:
            cache_dir: Directory for cache storage
            ttl_hours: Time-to-live in hours
            enabled: Whether caching is enabled
        """
        self.enabled = enabled
        self.ttl_seconds = ttl_hours * 3600
        self.hits = 0
        self.misses = 0
        self._lock = threading.Lock()  # Thread-safe counter updates

        if self.enabled:
            self.cache = Cache(cache_dir)
            logger.debug(f"Cache initialized at {cache_dir} with TTL={ttl_hours}h")
        else:
            self.cache = None
            logger.debug("Cache disabled")

    def get(self, content: str, rule: LanguageRule, path: str) -> Optional[FileMetric]:
        """
        Cached metric for this content, re-labelled with ``path``.

        Returns:
            FileMetric or None if not found/expired
        """
        if not self.enabled or self.cache is None:
            return None

        key = content_key(content, rule)
        try:
            value = self.cache.get(key)
        except Exception as e:
            logger.warning(f"Cache get failed: {e}")
            return None

        if value is None:
            with self._lock:
                self.misses += 1
            return None

        with self._lock:
            self.hits += 1
        logger.debug(f"Cache hit: {key[:16]}... ({path})")
        return dataclasses.replace(value, path=path)

    def set(self, content: str, rule: LanguageRule, metric: FileMetric) -> None:
        """Store the metric computed for this content."""
        if not self.enabled or self.cache is None:
            return

        key = content_key(content, rule)
        try:
            self.cache.set(key, metric, expire=self.ttl_seconds or None)
        except Exception as e:
            logger.warning(f"Cache set failed: {e}")

    def clear(self) -> None:
        """Clear all cache entries."""
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.clear()
            logger.info("Cache cleared")
        except Exception as e:
            logger.warning(f"Cache clear failed: {e}")

    def stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        if not self.enabled or self.cache is None:
            return {"enabled": False}

        try:
            return {
                "enabled": True,
                "size": len(self.cache),
                "directory": self.cache.directory,
                "volume": self.cache.volume(),
                "hits": self.hits,
                "misses": self.misses,
            }
        except Exception as e:
            logger.warning(f"Cache stats failed: {e}")
            return {"enabled": True, "error": str(e)}

    def close(self) -> None:
        """Close cache (cleanup)."""
        if self.cache is not None:
            self.cache.close()

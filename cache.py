"""
On-disk JSON cache for geocoding results.

Keys are hashed into file names under CACHE_DIR (default: ./cache).
"""

import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger("cityviews")


class CacheError(Exception):
    """Raised when a cache operation fails."""
    pass


def cache_dir() -> Path:
    return Path(os.environ.get("CACHE_DIR", "cache"))


def _cache_path(key: str) -> Path:
    """Generate a safe cache file path from a cache key using a hash."""
    safe = hashlib.sha256(key.encode()).hexdigest()[:32]
    return cache_dir() / f"{safe}.json"


def cache_get(key: str) -> Any:
    """
    Retrieve a cached object by key.

    Returns:
        Cached object if found, None otherwise

    Raises:
        CacheError: If cache read operation fails
    """
    path = _cache_path(key)
    try:
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug("Dropping unreadable cache entry %s", path)
        try:
            path.unlink()
        except OSError:
            pass
        return None
    except OSError as e:
        raise CacheError(f"Cache read failed: {e}") from e


def cache_set(key: str, value: Any) -> None:
    """
    Store a JSON-serializable object in the cache.

    Raises:
        CacheError: If cache write operation fails
    """
    try:
        path = _cache_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(value, f)
    except (OSError, TypeError) as e:
        raise CacheError(f"Cache write failed: {e}") from e

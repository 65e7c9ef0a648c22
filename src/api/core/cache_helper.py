# src/api/core/cache_helper.py
"""
Cache-aside helpers shared by the catalog and settings reads.

Keys look like ``products:list:limit:12|page:1|sort:price``: a prefix
followed by the query parameters sorted by name, so the same query always
maps to the same key whatever order the parameters arrived in.
"""
import logging
from typing import Any, Callable, Mapping, Optional
from urllib.parse import quote

from src.lib.cache import get_cache

logger = logging.getLogger(__name__)

LIST_TTL = 3600
DETAIL_TTL = 600


def _encode(value: Any) -> str:
    # separators inside user values must not leak into the key
    return quote(str(value), safe="")


def _key_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set)):
        return ",".join(sorted(_encode(v) for v in value))
    return _encode(value)


def get_cache_key(prefix: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Example:
        get_cache_key("products:list", {"page": 1, "limit": 12})
        -> "products:list:limit:12|page:1"
    Parameters that are None or empty are left out.
    """
    if not params:
        return prefix
    parts = [
        f"{name}:{_key_value(params[name])}"
        for name in sorted(params)
        if params[name] is not None and params[name] != "" and params[name] != []
    ]
    if not parts:
        return prefix
    return f"{prefix}:{'|'.join(parts)}"


def cache_aside(key: str, ttl: int, loader: Callable[[], Any]) -> Any:
    """
    Return the cached value for key, or call loader and cache its result.
    None results are returned uncached so a missing row is looked up again.
    """
    cache = get_cache()
    cached = cache.get(key)
    if cached is not None:
        logger.debug("cache hit %s", key)
        return cached

    logger.debug("cache miss %s", key)
    value = loader()
    if value is not None:
        cache.set(key, value, ttl)
    return value


def invalidate(*patterns: str) -> None:
    """Delete exact keys or glob patterns (anything containing '*')"""
    cache = get_cache()
    for pattern in patterns:
        if "*" in pattern:
            cache.delete_pattern(pattern)
        else:
            cache.delete(pattern)

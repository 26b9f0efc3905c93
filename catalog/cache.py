# catalog/cache.py
"""
Cached storefront payloads keyed by URL path.

Views build their JSON payload through `cached_payload(path, builder)`; the
admin mutations call `invalidate(path, ...)` for every path whose data they
changed. Invalidation is fire-and-forget: a failing cache backend is logged
and otherwise ignored.
"""
import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

KEY_PREFIX = "catalog:view:"

INDEX_PATH = "/"
ADMIN_PATH = "/admin"


def detail_path(pk) -> str:
    return f"/{pk}"


def _key(path: str) -> str:
    return f"{KEY_PREFIX}{path}"


def cached_payload(path: str, builder):
    key = _key(path)
    payload = cache.get(key)
    if payload is None:
        payload = builder()
        if payload is not None:
            cache.set(key, payload, timeout=getattr(settings, "CATALOG_CACHE_TIMEOUT", 600))
    return payload


def invalidate(*paths: str) -> None:
    for path in paths:
        try:
            cache.delete(_key(path))
        except Exception:
            logger.warning("Cache invalidation failed for %s", path, exc_info=True)

"""In-process query cache keyed by hierarchical tuples.

Keys look like ``('joinery-items', quote_project_id)``.  Invalidating a
prefix such as ``('joinery-items',)`` evicts every key that starts with it.
"""

import logging
import threading
import time

from flask import current_app

logger = logging.getLogger(__name__)


def canonical_key(key):
    """Normalise ``key`` to a hashable tuple; nested lists become tuples."""
    if isinstance(key, str):
        return (key,)

    def norm(part):
        if isinstance(part, (list, tuple, set, frozenset)):
            items = sorted(part) if isinstance(part, (set, frozenset)) else part
            return tuple(norm(p) for p in items)
        return part

    return tuple(norm(p) for p in key)


class QueryCache:
    """Thread-safe map from canonical keys to query results."""

    def __init__(self, ttl=None):
        self.ttl = ttl
        self._entries = {}
        self._generation = 0
        self._lock = threading.Lock()

    def __contains__(self, key):
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def keys(self):
        with self._lock:
            return list(self._entries)

    def get(self, key, default=None):
        key = canonical_key(key)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            value, stored_at = entry
            if self.ttl is not None and time.monotonic() - stored_at > self.ttl:
                del self._entries[key]
                return default
            return value

    def set(self, key, value):
        key = canonical_key(key)
        with self._lock:
            self._entries[key] = (value, time.monotonic())

    def fetch(self, key, loader):
        """Return the cached value for ``key`` or load, store and return it.

        Loader failures propagate and nothing is cached.  If an invalidation
        lands while the loader runs, its result is returned but not stored.
        """
        key = canonical_key(key)
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            return value

        with self._lock:
            generation = self._generation
        value = loader()
        with self._lock:
            if generation == self._generation:
                self._entries[key] = (value, time.monotonic())
            else:
                logger.debug('Discarding stale read for %s', key)
        return value

    def invalidate(self, prefix):
        prefix = canonical_key(prefix)
        size = len(prefix)
        with self._lock:
            self._generation += 1
            stale = [k for k in self._entries if k[:size] == prefix]
            for k in stale:
                del self._entries[k]
        if stale:
            logger.debug('Invalidated %d cached queries under %s', len(stale), prefix)
        return len(stale)

    def clear(self):
        with self._lock:
            self._generation += 1
            self._entries.clear()


_MISSING = object()


def get_cache():
    return current_app.extensions['query_cache']


def cached_query(key, fetch, enabled=True, many=True):
    """Run ``fetch(store)`` through the app's cache.

    Returns an empty result without touching the store when the query is
    disabled (a required filter is missing) or the store is not configured.
    """
    empty = [] if many else None
    if not enabled:
        return empty
    store = current_app.extensions.get('store')
    if store is None:
        return empty
    return get_cache().fetch(key, lambda: fetch(store))


def invalidate(*keys):
    cache = get_cache()
    for key in keys:
        cache.invalidate(key)

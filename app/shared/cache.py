"""In-process query cache with time-based expiry and tag invalidation."""

import logging
import time
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Awaitable, Callable, Hashable, Iterable, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    expires_at: float
    tags: frozenset[str] = field(default_factory=frozenset)


class QueryCache:
    """
    Memoizes read results keyed by operation name and arguments.

    Each entry carries a TTL and a set of tags; ``invalidate`` drops every entry
    sharing a tag. ``None`` results are cached too, so a missing row does not
    hit the database again until the entry expires.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: dict[Hashable, CacheEntry] = {}
        self._clock = clock
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> tuple[bool, Any]:
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return False, None
        return True, entry.value

    def set(self, key: Hashable, value: Any, ttl: float, tags: Iterable[str] = ()) -> None:
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl, tags=frozenset(tags))

    async def get_or_load(
        self,
        key: Hashable,
        loader: Callable[[], Awaitable[Any]],
        ttl: float,
        tags: Iterable[str] = (),
    ) -> Any:
        found, value = self.get(key)
        if found:
            self.hits += 1
            return value
        self.misses += 1
        value = await loader()
        self.set(key, value, ttl, tags)
        return value

    def invalidate(self, *tags: str) -> int:
        """Drop every entry carrying any of ``tags``; returns how many were dropped."""
        wanted = set(tags)
        stale = [key for key, entry in self._entries.items() if entry.tags & wanted]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug(f"Invalidated {len(stale)} cache entries for tags {sorted(wanted)}")
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


query_cache = QueryCache()


def cached(
    name: str,
    ttl: Callable[[], float],
    tags: Callable[..., Iterable[str]],
    cache: Optional[QueryCache] = None,
):
    """Cache an async read ``fn(session, *args)`` under ``(name, *args)``.

    The session is not part of the key. ``ttl`` is read at call time so
    settings overrides in tests apply.
    """

    def decorator(fn):
        @wraps(fn)
        async def wrapper(db, *args):
            store = cache if cache is not None else query_cache
            return await store.get_or_load(
                (name, *args),
                lambda: fn(db, *args),
                ttl(),
                tags(*args),
            )

        return wrapper

    return decorator

"""Read-through cache for forge picklists."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from campaignforge.schemas.forge import ForgePicklists

logger = logging.getLogger(__name__)

PicklistFetcher = Callable[[], Awaitable[ForgePicklists]]


@dataclass
class CacheEntry:
    """A cached picklist snapshot."""
    value: ForgePicklists
    created_at: float
    ttl: int

    def is_expired(self) -> bool:
        # ttl of 0 keeps the entry until invalidated
        return self.ttl > 0 and time.monotonic() > self.created_at + self.ttl


class PicklistCache:
    """
    Holds at most one picklist snapshot.

    Concurrent callers on a cold cache share a single fetch. A failed fetch is
    not cached, so the next call retries.
    """

    def __init__(self, fetch: PicklistFetcher, ttl_seconds: int = 300):
        self._fetch = fetch
        self.ttl_seconds = ttl_seconds
        self._entry: CacheEntry | None = None
        self._lock = asyncio.Lock()

    def peek(self) -> ForgePicklists | None:
        """Return the cached value without fetching."""
        if self._entry is None or self._entry.is_expired():
            return None
        return self._entry.value

    async def get(self) -> ForgePicklists:
        cached = self.peek()
        if cached is not None:
            return cached

        async with self._lock:
            # Another caller may have filled the cache while we waited
            cached = self.peek()
            if cached is not None:
                return cached

            try:
                value = await self._fetch()
            except Exception as e:
                logger.warning(f"Picklist fetch failed: {e}")
                raise

            self._entry = CacheEntry(value=value, created_at=time.monotonic(), ttl=self.ttl_seconds)
            logger.info(
                f"Picklist cache filled: {len(value.damage_types)} damage types, "
                f"{len(value.costs)} cost rows"
            )
            return value

    def invalidate(self) -> None:
        if self._entry is not None:
            logger.info("Picklist cache invalidated")
        self._entry = None

"""Cache service — profile-aware in-memory catalog cache with single-flight fetching."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from streamview.errors import NetworkFailure, NotFound
from streamview.models.media import Category, MediaItem, MediaType

if TYPE_CHECKING:
    from streamview.services.config_service import ConfigService
    from streamview.services.xtream_service import XtreamService

logger = logging.getLogger(__name__)

CATEGORIES = "categories"
ITEMS = "items"


@dataclass
class CacheEntry:
    profile: str
    data: list
    fetched_at: float = field(default_factory=time.time)


class CacheService:
    """Caches category and item listings for the active profile.

    There is one entry per ``(kind, media_type)``, tagged with the profile it
    was fetched under, so at most one listing per profile and media type is
    ever held.  A lookup under a different profile evicts the entry and
    refetches.  Overlapping lookups for the same key share one upstream
    request, and a response that lands after the active profile changed is
    handed to its waiters but never committed to the cache.
    """

    def __init__(self, config_service: "ConfigService", xtream_service: "XtreamService"):
        self.config_service = config_service
        self.xtream_service = xtream_service
        self._entries: dict[tuple[str, MediaType], CacheEntry] = {}
        self._inflight: dict[tuple[str, MediaType, str], asyncio.Task] = {}
        self.fetch_count = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def retrieve_categories(self, media_type: MediaType) -> list[Category]:
        return await self._retrieve(CATEGORIES, MediaType(media_type), self.xtream_service.fetch_categories)

    async def retrieve_category_info(self, media_type: MediaType) -> list[MediaItem]:
        """Every item of *media_type* across all categories, in upstream order."""
        return await self._retrieve(ITEMS, MediaType(media_type), self.xtream_service.fetch_category_items)

    def invalidate(self, media_type: Optional[MediaType] = None) -> int:
        """Drop cached listings (all of them, or those of one media type)."""
        if media_type is None:
            keys = list(self._entries)
        else:
            keys = [k for k in self._entries if k[1] == MediaType(media_type)]
        for key in keys:
            del self._entries[key]
        if keys:
            logger.info(f"Invalidated {len(keys)} cached listing(s)")
        return len(keys)

    def stats(self) -> list[dict]:
        return [
            {
                "kind": kind,
                "media_type": media_type.value,
                "profile": entry.profile,
                "count": len(entry.data),
                "fetched_at": entry.fetched_at,
            }
            for (kind, media_type), entry in self._entries.items()
        ]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _retrieve(
        self,
        kind: str,
        media_type: MediaType,
        fetcher: Callable[[MediaType, str], Awaitable[list]],
    ) -> list:
        profile = self.config_service.current_profile()
        key = (kind, media_type)

        entry = self._entries.get(key)
        if entry is not None:
            if entry.profile == profile:
                logger.debug(f"{kind} for {media_type.value} already loaded")
                return list(entry.data)
            logger.info(
                f"Profile changed ({entry.profile!r} -> {profile!r}), dropping cached {media_type.value} {kind}"
            )
            del self._entries[key]

        flight_key = (kind, media_type, profile)
        task = self._inflight.get(flight_key)
        if task is None:
            task = asyncio.create_task(self._load(kind, media_type, profile, fetcher))
            self._inflight[flight_key] = task
            task.add_done_callback(lambda t, k=flight_key: self._forget_flight(k, t))
        else:
            logger.debug(f"Joining in-flight {media_type.value} {kind} fetch")
        # A cancelled waiter must not cancel the fetch other waiters share
        data = await asyncio.shield(task)
        return list(data)

    def _forget_flight(self, flight_key: tuple[str, MediaType, str], task: asyncio.Task) -> None:
        if self._inflight.get(flight_key) is task:
            del self._inflight[flight_key]

    async def _load(
        self,
        kind: str,
        media_type: MediaType,
        profile: str,
        fetcher: Callable[[MediaType, str], Awaitable[list]],
    ) -> list:
        self.fetch_count += 1
        try:
            data = await fetcher(media_type, profile)
        except (NetworkFailure, NotFound) as e:
            logger.warning(f"Could not fetch {media_type.value} {kind}: {e}")
            return []

        if self.config_service.current_profile() != profile:
            logger.info(f"Discarding {media_type.value} {kind} fetched for inactive profile {profile!r}")
            return data

        self._entries[(kind, media_type)] = CacheEntry(profile=profile, data=data)
        return data

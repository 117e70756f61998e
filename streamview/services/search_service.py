"""Search service — merge live, movie and series listings into one paged result list."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from streamview.models.media import MediaItem, MediaType

if TYPE_CHECKING:
    from streamview.services.cache_service import CacheService
    from streamview.services.config_service import ConfigService

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 10

SEARCH_FIELDS = {
    MediaType.LIVE: ("name",),
    MediaType.MOVIE: ("name",),
    MediaType.SERIES: ("name", "cast", "director", "genre", "tmdb_id", "plot"),
}


def normalize_query(query: str) -> str:
    return (query or "").strip().casefold()


def matches(item: MediaItem, needle: str) -> bool:
    """True when *needle* (already normalised) occurs in any searchable field of *item*."""
    if not needle:
        return True
    for field_name in SEARCH_FIELDS[item.type]:
        value = getattr(item, field_name, None)
        if value and needle in str(value).casefold():
            return True
    return False


def aggregate(
    live: Sequence[MediaItem],
    movies: Sequence[MediaItem],
    series: Sequence[MediaItem],
    query: str,
) -> list[MediaItem]:
    """Filtered live items, then movies, then series; each keeps its listing order."""
    needle = normalize_query(query)
    results: list[MediaItem] = []
    for collection in (live, movies, series):
        results.extend(item for item in collection if matches(item, needle))
    return results


class SearchSession:
    """Query plus the number of results revealed so far."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.query = ""
        self.revealed = chunk_size

    def set_query(self, query: str) -> bool:
        """Store *query*; a different normalised query resets paging. Returns whether it changed."""
        if normalize_query(query) == normalize_query(self.query):
            self.query = query
            return False
        self.query = query
        self.revealed = self.chunk_size
        return True

    def load_more(self, total: int) -> int:
        self.revealed = min(self.revealed + self.chunk_size, max(total, self.chunk_size))
        return self.visible_count(total)

    def visible_count(self, total: int) -> int:
        return min(self.revealed, total)

    def page(self, results: Sequence[MediaItem]) -> list[MediaItem]:
        return list(results[: self.visible_count(len(results))])


class SearchService:
    """Runs searches over the cached listings of the active profile.

    One :class:`SearchSession` is kept for the active profile; switching
    profile starts a fresh session.
    """

    def __init__(self, config_service: "ConfigService", cache_service: "CacheService"):
        self.config_service = config_service
        self.cache_service = cache_service
        self._session: Optional[SearchSession] = None
        self._session_profile: Optional[str] = None

    @property
    def session(self) -> SearchSession:
        profile = self.config_service.current_profile()
        if self._session is None or self._session_profile != profile:
            self._session = SearchSession(self.config_service.search_chunk_size)
            self._session_profile = profile
        return self._session

    async def results(self, query: str) -> list[MediaItem]:
        live = await self.cache_service.retrieve_category_info(MediaType.LIVE)
        movies = await self.cache_service.retrieve_category_info(MediaType.MOVIE)
        series = await self.cache_service.retrieve_category_info(MediaType.SERIES)
        return aggregate(live, movies, series, query)

    async def search(self, query: str) -> dict:
        session = self.session
        if session.set_query(query):
            logger.debug(f"Search query changed to {query!r}")
        results = await self.results(session.query)
        return self._payload(session, results)

    async def load_more(self) -> dict:
        session = self.session
        results = await self.results(session.query)
        session.load_more(len(results))
        return self._payload(session, results)

    @staticmethod
    def _payload(session: SearchSession, results: list[MediaItem]) -> dict:
        visible = session.page(results)
        return {
            "query": session.query,
            "total": len(results),
            "revealed": len(visible),
            "has_more": len(visible) < len(results),
            "items": visible,
        }

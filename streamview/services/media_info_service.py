"""Media info service — detailed movie/series metadata with a caller-provided fast path."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from streamview.errors import NetworkFailure, NotFound
from streamview.models.media import Episode, MediaInfo, MediaType, SeriesInfo

if TYPE_CHECKING:
    from streamview.services.xtream_service import XtreamService

logger = logging.getLogger(__name__)

TMDB_BASE = "https://www.themoviedb.org"


def season_numbers(info: SeriesInfo) -> list[int]:
    """Distinct season numbers in first-seen episode order (season 0 / missing skipped)."""
    seen: dict[int, None] = {}
    for episode in info.episodes:
        if episode.season:
            seen.setdefault(episode.season, None)
    return list(seen)


def episodes_for_season(info: SeriesInfo, season: int) -> list[Episode]:
    return [e for e in info.episodes if e.season == season]


def tmdb_url(media_type: MediaType, tmdb_id: Optional[str]) -> Optional[str]:
    if not tmdb_id:
        return None
    path = "tv" if MediaType(media_type) == MediaType.SERIES else "movie"
    return f"{TMDB_BASE}/{path}/{tmdb_id}"


class MediaInfoService:
    """Resolves detailed info for a movie or series.

    Info the caller already holds is used as-is and never stored.  Nothing is
    cached here: every other lookup goes upstream, and any upstream failure is
    reported as ``None`` so callers can always render an empty detail view.
    """

    def __init__(self, xtream_service: "XtreamService"):
        self.xtream_service = xtream_service

    async def retrieve_media_info(
        self,
        media_type: MediaType,
        item_id: str,
        provided: Optional[MediaInfo] = None,
    ) -> Optional[MediaInfo]:
        if provided is not None:
            return provided
        if not item_id:
            return None
        try:
            return await self.xtream_service.fetch_media_info(MediaType(media_type), item_id)
        except NotFound as e:
            logger.info(f"No {MediaType(media_type).value} info for {item_id}: {e}")
        except NetworkFailure as e:
            logger.warning(f"Could not fetch {MediaType(media_type).value} info for {item_id}: {e}")
        return None

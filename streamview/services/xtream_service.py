"""Xtream service — remote catalog source speaking the Xtream Codes player API."""
from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Optional

import httpx

from streamview.errors import NetworkFailure, NotFound
from streamview.models.media import (
    Category,
    Episode,
    LiveItem,
    MediaInfo,
    MediaItem,
    MediaType,
    MovieInfo,
    MovieItem,
    SeriesInfo,
    SeriesItem,
)

if TYPE_CHECKING:
    from streamview.models.config import Profile
    from streamview.services.config_service import ConfigService
    from streamview.services.http_client import HttpClientService

logger = logging.getLogger(__name__)

CATEGORY_ACTIONS = {
    MediaType.LIVE: "get_live_categories",
    MediaType.MOVIE: "get_vod_categories",
    MediaType.SERIES: "get_series_categories",
}

LISTING_ACTIONS = {
    MediaType.LIVE: "get_live_streams",
    MediaType.MOVIE: "get_vod_streams",
    MediaType.SERIES: "get_series",
}


# ---------------------------------------------------------------------------
# Upstream normalisation
# ---------------------------------------------------------------------------

def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _first(value: Any) -> str:
    """Upstream image fields are either a URL or a list of URLs."""
    if isinstance(value, list):
        return str(value[0]) if value else ""
    return str(value) if value else ""


def category_from_upstream(row: dict) -> Optional[Category]:
    category_id = _text(row.get("category_id"))
    if not category_id:
        return None
    extra = {k: v for k, v in row.items() if k not in ("category_id", "category_name", "id", "name")}
    return Category(id=category_id, name=_text(row.get("category_name")) or "", **extra)


def item_from_upstream(media_type: MediaType, row: dict) -> Optional[MediaItem]:
    """Build the typed listing item for *media_type* from one upstream row."""
    if media_type == MediaType.SERIES:
        item_id = _text(row.get("series_id"))
    else:
        item_id = _text(row.get("stream_id"))
    if not item_id:
        return None

    fields: dict[str, Any] = {
        "id": item_id,
        "name": _text(row.get("name")) or "",
        "stream_icon": _text(row.get("stream_icon") or row.get("cover")) or "",
        "category_id": _text(row.get("category_id")),
    }
    extra = {k: v for k, v in row.items() if k not in fields and k != "type"}

    if media_type == MediaType.LIVE:
        return LiveItem(**extra, **fields)
    if media_type == MediaType.MOVIE:
        fields["container_extension"] = _text(row.get("container_extension")) or ""
        extra.pop("container_extension", None)
        return MovieItem(**extra, **fields)

    for key in ("cast", "director", "genre", "plot"):
        fields[key] = _text(row.get(key))
        extra.pop(key, None)
    fields["tmdb_id"] = _text(row.get("tmdb") or row.get("tmdb_id"))
    extra.pop("tmdb_id", None)
    return SeriesItem(**extra, **fields)


def movie_info_from_upstream(stream_id: str, data: dict) -> MovieInfo:
    info = data.get("info") or {}
    movie_data = data.get("movie_data") or {}
    if not isinstance(movie_data, dict):
        movie_data = {}
    if not isinstance(info, dict) or not info:
        raise NotFound(f"No info for movie {stream_id}")
    return MovieInfo(
        id=_text(movie_data.get("stream_id")) or stream_id,
        name=_text(info.get("name") or movie_data.get("name")) or "",
        plot=_text(info.get("plot") or info.get("description")) or "",
        genre=_text(info.get("genre")) or "",
        cast=_text(info.get("cast") or info.get("actors")) or "",
        director=_text(info.get("director")) or "",
        rating=_text(info.get("rating")) or "",
        release_date=_text(info.get("releasedate") or info.get("release_date")) or "",
        duration=_text(info.get("duration")) or "",
        background=_first(info.get("backdrop_path")),
        cover=_text(info.get("cover_big") or info.get("movie_image")) or "",
        tmdb_id=_text(info.get("tmdb_id")) or "",
        extension=_text(movie_data.get("container_extension")) or "",
    )


def series_info_from_upstream(series_id: str, data: dict) -> SeriesInfo:
    info = data.get("info") or {}
    if not isinstance(info, dict) or not info:
        raise NotFound(f"No info for series {series_id}")

    episodes: list[Episode] = []
    raw_episodes = data.get("episodes") or {}
    if isinstance(raw_episodes, dict):
        season_groups = list(raw_episodes.items())
    elif isinstance(raw_episodes, list):
        # Some panels return a bare list of season lists
        season_groups = [(str(i + 1), group) for i, group in enumerate(raw_episodes)]
    else:
        season_groups = []

    for season_key, season_episodes in season_groups:
        if not isinstance(season_episodes, list):
            continue
        for ep in season_episodes:
            if not isinstance(ep, dict):
                continue
            ep_id = _text(ep.get("id"))
            if not ep_id:
                continue
            ep_info = ep.get("info") or {}
            if not isinstance(ep_info, dict):
                ep_info = {}
            episodes.append(
                Episode(
                    id=ep_id,
                    season=_int(ep.get("season"), _int(season_key)),
                    episode=_int(ep.get("episode_num")),
                    title=_text(ep.get("title")) or "",
                    extension=_text(ep.get("container_extension")) or "",
                    duration=_text(ep_info.get("duration")) or "",
                    background=_text(ep_info.get("movie_image") or ep_info.get("cover_big")) or "",
                )
            )

    return SeriesInfo(
        id=series_id,
        name=_text(info.get("name") or info.get("title")) or "",
        plot=_text(info.get("plot")) or "",
        genre=_text(info.get("genre")) or "",
        cast=_text(info.get("cast")) or "",
        director=_text(info.get("director")) or "",
        rating=_text(info.get("rating")) or "",
        release_date=_text(info.get("releaseDate") or info.get("release_date")) or "",
        duration=_text(info.get("episode_run_time")) or "",
        background=_first(info.get("backdrop_path")),
        cover=_text(info.get("cover")) or "",
        tmdb_id=_text(info.get("tmdb") or info.get("tmdb_id")) or "",
        episodes=episodes,
    )


def _normalise_rows(rows: list, build: Callable[[dict], Any], what: str) -> list:
    """Normalise upstream rows, dropping any that cannot be turned into a model."""
    result = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            built = build(row)
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed {what} row: {e}")
            continue
        if built is not None:
            result.append(built)
    return result


def _normalise_info(build: Callable[[str, dict], MediaInfo], item_id: str, data: dict) -> MediaInfo:
    try:
        return build(item_id, data)
    except (TypeError, ValueError, AttributeError) as e:
        raise NotFound(f"Malformed info for {item_id}: {e}") from e


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class XtreamService:
    """Remote catalog source: categories, listings and detailed info per profile.

    Every failure is raised as :class:`NetworkFailure` or :class:`NotFound`;
    recovering from them is the caller's job.
    """

    def __init__(self, config_service: "ConfigService", http_client: "HttpClientService"):
        self.config_service = config_service
        self.http_client = http_client

    def _credentials(self, profile: Optional[str]) -> "Profile":
        name = profile if profile is not None else self.config_service.current_profile()
        creds = self.config_service.get_profile(name)
        if creds is None or not creds.host:
            raise NetworkFailure(f"No provider configured for profile {name!r}")
        return creds

    async def _api(self, creds: "Profile", action: str, **extra: str) -> Any:
        host = creds.host.rstrip("/")
        params = {"username": creds.username, "password": creds.password, "action": action, **extra}
        try:
            client = await self.http_client.get_client()
            response = await client.get(f"{host}/player_api.php", params=params)
        except httpx.HTTPError as e:
            raise NetworkFailure(f"{action} failed: {e}") from e
        if response.status_code != 200:
            raise NetworkFailure(f"{action} returned HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise NetworkFailure(f"{action} returned invalid JSON: {e}") from e

    async def fetch_categories(self, media_type: MediaType, profile: Optional[str] = None) -> list[Category]:
        media_type = MediaType(media_type)
        data = await self._api(self._credentials(profile), CATEGORY_ACTIONS[media_type])
        if not isinstance(data, list):
            return []
        categories = _normalise_rows(data, category_from_upstream, f"{media_type.value} category")
        logger.info(f"Fetched {len(categories)} {media_type.value} categories")
        return categories

    async def fetch_category_items(self, media_type: MediaType, profile: Optional[str] = None) -> list[MediaItem]:
        media_type = MediaType(media_type)
        data = await self._api(self._credentials(profile), LISTING_ACTIONS[media_type])
        if not isinstance(data, list):
            return []
        items = _normalise_rows(data, partial(item_from_upstream, media_type), f"{media_type.value} item")
        logger.info(f"Fetched {len(items)} {media_type.value} items")
        return items

    async def fetch_media_info(self, media_type: MediaType, item_id: str, profile: Optional[str] = None) -> MediaInfo:
        media_type = MediaType(media_type)
        creds = self._credentials(profile)
        if media_type == MediaType.MOVIE:
            data = await self._api(creds, "get_vod_info", vod_id=str(item_id))
            if not isinstance(data, dict):
                raise NotFound(f"No info for movie {item_id}")
            return _normalise_info(movie_info_from_upstream, str(item_id), data)
        if media_type == MediaType.SERIES:
            data = await self._api(creds, "get_series_info", series_id=str(item_id))
            if not isinstance(data, dict):
                raise NotFound(f"No info for series {item_id}")
            return _normalise_info(series_info_from_upstream, str(item_id), data)
        raise NotFound(f"Detailed info is not available for {media_type.value} items")

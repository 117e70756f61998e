"""Stream URLs — deterministic Xtream Codes playback URL construction."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from streamview.models.media import MediaType

if TYPE_CHECKING:
    from streamview.models.config import Profile

STREAM_PATHS = {
    MediaType.LIVE: "live",
    MediaType.MOVIE: "movie",
    MediaType.SERIES: "series",
}


def build_url(
    media_type: MediaType,
    stream_id,
    extension: Optional[str] = None,
    *,
    credentials: Optional["Profile"],
) -> Optional[str]:
    """Return the playback URL for a stream, or ``None`` when inputs are incomplete.

    Live channels take an optional extension; movies and series episodes
    need one.  For series, *stream_id* is the episode id.
    """
    if credentials is None or not (credentials.host and credentials.username and credentials.password):
        return None
    stream_id = str(stream_id).strip() if stream_id is not None else ""
    if not stream_id:
        return None
    try:
        media_type = MediaType(media_type)
    except ValueError:
        return None

    extension = (extension or "").strip().lstrip(".")
    if media_type != MediaType.LIVE and not extension:
        return None

    host = credentials.host.rstrip("/")
    url = f"{host}/{STREAM_PATHS[media_type]}/{credentials.username}/{credentials.password}/{stream_id}"
    if extension:
        url = f"{url}.{extension}"
    return url

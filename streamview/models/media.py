"""Pydantic models for catalog categories, media items and detailed media info."""
from __future__ import annotations

import enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class MediaType(str, enum.Enum):
    LIVE = "live"
    MOVIE = "movie"
    SERIES = "series"


class Category(BaseModel):
    """An upstream category. ``name`` starts with a country-flag token."""
    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""


class CategoryView(Category):
    """A category as presented to clients, with the flag split from the label."""
    flag: str = ""
    label: str = ""


class MediaItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    stream_icon: str = ""
    category_id: Optional[str] = None
    type: MediaType


class LiveItem(MediaItem):
    type: Literal[MediaType.LIVE] = MediaType.LIVE


class MovieItem(MediaItem):
    type: Literal[MediaType.MOVIE] = MediaType.MOVIE
    container_extension: str = ""


class SeriesItem(MediaItem):
    type: Literal[MediaType.SERIES] = MediaType.SERIES
    cast: Optional[str] = None
    director: Optional[str] = None
    genre: Optional[str] = None
    plot: Optional[str] = None
    tmdb_id: Optional[str] = None


class Episode(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    season: int = 0
    episode: int = 0
    title: str = ""
    extension: str = ""
    duration: str = ""
    background: str = ""


class MediaInfo(BaseModel):
    """Extended metadata shared by movies and series."""
    model_config = ConfigDict(extra="allow")

    id: str
    type: MediaType
    name: str = ""
    plot: str = ""
    genre: str = ""
    cast: str = ""
    director: str = ""
    rating: str = ""
    release_date: str = ""
    duration: str = ""
    background: str = ""
    cover: str = ""
    tmdb_id: str = ""


class MovieInfo(MediaInfo):
    type: Literal[MediaType.MOVIE] = MediaType.MOVIE
    extension: str = ""


class SeriesInfo(MediaInfo):
    type: Literal[MediaType.SERIES] = MediaType.SERIES
    episodes: list[Episode] = Field(default_factory=list)


AnyMediaInfo = Annotated[Union[MovieInfo, SeriesInfo], Field(discriminator="type")]


class PlaybackRequest(BaseModel):
    """Everything a player needs, handed over explicitly instead of via shared state."""
    url: str
    name: str = ""

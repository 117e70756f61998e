"""Pydantic models for application configuration."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Profile(BaseModel):
    """A viewer identity together with the Xtream Codes account it browses."""
    model_config = ConfigDict(extra="allow")

    name: str
    host: str = ""
    username: str = ""
    password: str = ""


class Options(BaseModel):
    """Application options."""
    model_config = ConfigDict(extra="allow")

    search_chunk_size: int = 10
    request_timeout: float = 60.0


class AppConfig(BaseModel):
    """Root application configuration."""
    model_config = ConfigDict(extra="allow")

    profiles: list[Profile] = Field(default_factory=list)
    active_profile: Optional[str] = None
    options: Options = Field(default_factory=Options)

"""Configuration service — loads, saves and provides access to AppConfig and the active profile."""
from __future__ import annotations

import json
import logging
import os
from typing import Optional

from pydantic import ValidationError

from streamview.errors import InvalidInput
from streamview.models.config import AppConfig, Profile

logger = logging.getLogger(__name__)


class ConfigService:
    """Manages application configuration with file persistence.

    The config is kept in-memory after first load and re-read on explicit
    ``load()`` or ``reload()`` calls.  It is also the active profile provider:
    every cache and store lookup asks ``current_profile()`` which viewer
    identity is in use.
    """

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self.config_file = os.path.join(data_dir, "config.json")
        self._config: AppConfig = AppConfig()

    # ------------------------------------------------------------------
    # Load / Save
    # ------------------------------------------------------------------

    def load(self) -> AppConfig:
        """Load configuration from disk, applying defaults."""
        if os.path.exists(self.config_file):
            try:
                with open(self.config_file) as f:
                    raw = json.load(f)
                self._config = AppConfig.model_validate(raw)

                # Drop a dangling active profile rather than failing every lookup
                if self._config.active_profile and self.get_profile(self._config.active_profile) is None:
                    logger.warning(f"Active profile {self._config.active_profile!r} not configured, clearing")
                    self._config.active_profile = None
                return self._config

            except (OSError, json.JSONDecodeError, ValidationError) as e:
                logger.error(f"Error loading config: {e}")

        self._config = AppConfig()
        return self._config

    def reload(self) -> AppConfig:
        """Alias for ``load()``."""
        return self.load()

    def save(self) -> None:
        """Persist the config to disk."""
        os.makedirs(self.data_dir, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self._config.model_dump(mode="json"), f, indent=2)

    @property
    def config(self) -> AppConfig:
        return self._config

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def get_profiles(self) -> list[Profile]:
        return self._config.profiles

    def get_profile(self, name: str) -> Optional[Profile]:
        for profile in self._config.profiles:
            if profile.name == name:
                return profile
        return None

    def upsert_profile(self, profile: Profile) -> Profile:
        if not profile.name.strip():
            raise InvalidInput("Profile name must not be empty")
        profiles = [p for p in self._config.profiles if p.name != profile.name]
        profiles.append(profile)
        self._config.profiles = profiles
        if self._config.active_profile is None:
            self._config.active_profile = profile.name
        self.save()
        logger.info(f"Saved profile {profile.name!r}")
        return profile

    def set_active_profile(self, name: str) -> Profile:
        profile = self.get_profile(name)
        if profile is None:
            raise InvalidInput(f"Unknown profile: {name!r}")
        if self._config.active_profile != name:
            logger.info(f"Switching active profile {self._config.active_profile!r} -> {name!r}")
        self._config.active_profile = name
        self.save()
        return profile

    def current_profile(self) -> str:
        """Name of the active profile, or an empty string when none is configured."""
        return self._config.active_profile or ""

    def current_credentials(self) -> Optional[Profile]:
        return self.get_profile(self.current_profile())

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def get_search_chunk_size(self) -> int:
        return max(self._config.options.search_chunk_size, 1)

    search_chunk_size = property(get_search_chunk_size)

    def get_request_timeout(self) -> float:
        return self._config.options.request_timeout

    request_timeout = property(get_request_timeout)

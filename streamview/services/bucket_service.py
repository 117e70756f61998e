"""Bucket service — per-profile favourites list persisted on every toggle."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from streamview.errors import StorageError
from streamview.models.media import MediaType
from streamview.services.store_service import BUCKET_KEY

if TYPE_CHECKING:
    from streamview.services.store_service import StoreService

logger = logging.getLogger(__name__)


def bucket_key(media_type: MediaType, item_id) -> str:
    return f"{MediaType(media_type).value}-{item_id}"


def parse_bucket_key(key: str) -> tuple[MediaType, str]:
    type_part, _, item_id = key.partition("-")
    return MediaType(type_part), item_id


class BucketService:
    """Favourites ("bucket list") stored as ``"<type>-<id>"`` keys per profile."""

    def __init__(self, store: "StoreService"):
        self.store = store

    def _read(self, profile: str) -> list[str]:
        try:
            value = self.store.get(profile, BUCKET_KEY, [])
        except StorageError as e:
            logger.warning(f"Could not read bucket list for {profile!r}, starting empty: {e}")
            return []
        if not isinstance(value, list):
            logger.warning(f"Ignoring malformed bucket list for {profile!r}")
            return []
        return [str(v) for v in value]

    def toggle_bucket_item(self, profile: str, media_type: MediaType, item_id) -> bool:
        """Add or remove the item and persist. Returns True when the item is now in the bucket.

        Raises :class:`StorageError` when the write fails.
        """
        key = bucket_key(media_type, item_id)
        bucket = self._read(profile)
        if key in bucket:
            bucket.remove(key)
            in_bucket = False
        else:
            bucket.append(key)
            in_bucket = True
        self.store.set(profile, BUCKET_KEY, bucket)
        logger.info(f"{'Added' if in_bucket else 'Removed'} {key} {'to' if in_bucket else 'from'} bucket of {profile!r}")
        return in_bucket

    def is_in_bucket(self, profile: str, media_type: MediaType, item_id) -> bool:
        return bucket_key(media_type, item_id) in self._read(profile)

    def get_bucket(self, profile: str) -> list[tuple[MediaType, str]]:
        entries = []
        for key in self._read(profile):
            try:
                entries.append(parse_bucket_key(key))
            except ValueError:
                logger.debug(f"Skipping unknown bucket entry {key!r}")
        return entries

"""Catalog API routes — categories, item listings and detailed info per media type."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError

from streamview.dependencies import (
    get_bucket_service,
    get_cache_service,
    get_config_service,
    get_media_info_service,
    get_visibility_service,
)
from streamview.models.media import AnyMediaInfo, Category, CategoryView, MediaInfo, MediaType, SeriesInfo
from streamview.services.bucket_service import BucketService
from streamview.services.cache_service import CacheService
from streamview.services.config_service import ConfigService
from streamview.services.media_info_service import MediaInfoService, season_numbers, tmdb_url
from streamview.services.naming import flag_emoji, split_flag_label
from streamview.services.visibility_service import VisibilityService

router = APIRouter(prefix="/api/{media_type}", tags=["catalog"])

_info_adapter = TypeAdapter(AnyMediaInfo)


def _category_view(category: Category) -> CategoryView:
    flag, label = split_flag_label(category.name)
    return CategoryView.model_validate({**category.model_dump(), "flag": flag_emoji(flag), "label": label})


@router.get("/categories")
async def get_categories(
    media_type: MediaType,
    cfg: ConfigService = Depends(get_config_service),
    cache: CacheService = Depends(get_cache_service),
    visibility: VisibilityService = Depends(get_visibility_service),
):
    profile = cfg.current_profile()
    categories = await cache.retrieve_categories(media_type)
    editing = visibility.is_editing(profile, media_type)
    return {
        "editing": editing,
        "categories": [_category_view(c) for c in visibility.visible(profile, media_type, categories)],
        # Only shown while editing, so hidden categories can be restored
        "hidden": [_category_view(c) for c in visibility.hidden(profile, media_type, categories)] if editing else [],
    }


@router.get("/items")
async def get_items(
    media_type: MediaType,
    category_id: Optional[str] = None,
    cache: CacheService = Depends(get_cache_service),
):
    items = await cache.retrieve_category_info(media_type)
    if category_id is not None:
        items = [i for i in items if i.category_id == category_id]
    return {"count": len(items), "items": items}


def _info_payload(
    media_type: MediaType,
    info: MediaInfo,
    profile: str,
    bucket: BucketService,
) -> dict:
    payload: dict = {
        "info": info,
        "tmdb_url": tmdb_url(media_type, info.tmdb_id),
        "in_bucket": bucket.is_in_bucket(profile, media_type, info.id),
    }
    if isinstance(info, SeriesInfo):
        payload["seasons"] = season_numbers(info)
    return payload


@router.get("/info/{item_id}")
async def get_info(
    media_type: MediaType,
    item_id: str,
    cfg: ConfigService = Depends(get_config_service),
    resolver: MediaInfoService = Depends(get_media_info_service),
    bucket: BucketService = Depends(get_bucket_service),
):
    info = await resolver.retrieve_media_info(media_type, item_id)
    if info is None:
        return JSONResponse({"error": "Not found", "info": None}, status_code=404)
    return _info_payload(media_type, info, cfg.current_profile(), bucket)


@router.post("/info/{item_id}")
async def resolve_info(
    media_type: MediaType,
    item_id: str,
    request: Request,
    cfg: ConfigService = Depends(get_config_service),
    resolver: MediaInfoService = Depends(get_media_info_service),
    bucket: BucketService = Depends(get_bucket_service),
):
    """Like GET, but the client may send info it already holds to skip the upstream call."""
    provided = None
    body = await request.body()
    if body:
        try:
            data = await request.json()
            if data.get("info"):
                provided = _info_adapter.validate_python({**data["info"], "type": media_type})
        except (ValueError, TypeError, ValidationError, AttributeError) as e:
            return JSONResponse({"error": f"Invalid info: {e}"}, status_code=400)

    info = await resolver.retrieve_media_info(media_type, item_id, provided=provided)
    if info is None:
        return JSONResponse({"error": "Not found", "info": None}, status_code=404)
    return _info_payload(media_type, info, cfg.current_profile(), bucket)

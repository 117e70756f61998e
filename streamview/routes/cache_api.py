"""Cache management API routes."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from streamview.dependencies import get_cache_service
from streamview.models.media import MediaType
from streamview.services.cache_service import CacheService

router = APIRouter(prefix="/api/cache", tags=["cache"])


@router.get("/stats")
async def cache_stats(cache: CacheService = Depends(get_cache_service)):
    return {"entries": cache.stats(), "fetch_count": cache.fetch_count}


@router.post("/invalidate")
async def invalidate(media_type: Optional[MediaType] = None, cache: CacheService = Depends(get_cache_service)):
    return {"status": "ok", "invalidated": cache.invalidate(media_type)}

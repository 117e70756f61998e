"""Bucket list API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from streamview.dependencies import get_bucket_service, get_config_service
from streamview.models.media import MediaType
from streamview.services.bucket_service import BucketService, bucket_key
from streamview.services.config_service import ConfigService

router = APIRouter(prefix="/api/bucket", tags=["bucket"])


@router.get("")
async def get_bucket(
    cfg: ConfigService = Depends(get_config_service),
    bucket: BucketService = Depends(get_bucket_service),
):
    entries = bucket.get_bucket(cfg.current_profile())
    return {"items": [{"type": t.value, "id": i, "key": bucket_key(t, i)} for t, i in entries]}


@router.post("/toggle")
async def toggle_bucket(
    request: Request,
    cfg: ConfigService = Depends(get_config_service),
    bucket: BucketService = Depends(get_bucket_service),
):
    try:
        body = await request.json()
        media_type = MediaType(body.get("type", ""))
        raw_id = body.get("id")
        item_id = "" if raw_id is None else str(raw_id).strip()
    except (ValueError, AttributeError) as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    if not item_id:
        return JSONResponse({"error": "id is required"}, status_code=400)

    in_bucket = bucket.toggle_bucket_item(cfg.current_profile(), media_type, item_id)
    return {
        "key": bucket_key(media_type, item_id),
        "in_bucket": in_bucket,
        "message": "Added to Bucket List" if in_bucket else "Removed from Bucket List",
    }

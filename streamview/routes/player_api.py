"""Player API route — resolve a stream to the URL and title a player opens."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from streamview.dependencies import get_config_service
from streamview.models.media import MediaType, PlaybackRequest
from streamview.services.config_service import ConfigService
from streamview.services.stream_url import build_url

router = APIRouter(tags=["player"])


@router.post("/api/play")
async def play(request: Request, cfg: ConfigService = Depends(get_config_service)):
    try:
        body = await request.json()
        media_type = MediaType(body.get("type", ""))
    except (ValueError, AttributeError) as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    url = build_url(
        media_type,
        body.get("id"),
        body.get("extension"),
        credentials=cfg.current_credentials(),
    )
    if url is None:
        return JSONResponse({"error": "Cannot build a stream URL for this item"}, status_code=400)
    return PlaybackRequest(url=url, name=str(body.get("name") or ""))

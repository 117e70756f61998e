"""Profile API routes — list, save and switch viewer profiles."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from streamview.dependencies import get_config_service, get_visibility_service
from streamview.errors import InvalidInput
from streamview.models.config import Profile
from streamview.services.config_service import ConfigService
from streamview.services.visibility_service import VisibilityService

router = APIRouter(prefix="/api/profiles", tags=["profiles"])


@router.get("")
async def list_profiles(cfg: ConfigService = Depends(get_config_service)):
    return {
        "active": cfg.current_profile(),
        "profiles": [{"name": p.name, "host": p.host, "username": p.username} for p in cfg.get_profiles()],
    }


@router.post("")
async def save_profile(request: Request, cfg: ConfigService = Depends(get_config_service)):
    try:
        body = await request.json()
        profile = Profile.model_validate(body)
        cfg.upsert_profile(profile)
    except (ValueError, ValidationError, InvalidInput) as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    return {"status": "saved", "name": profile.name, "active": cfg.current_profile()}


@router.post("/active")
async def switch_profile(
    request: Request,
    cfg: ConfigService = Depends(get_config_service),
    visibility: VisibilityService = Depends(get_visibility_service),
):
    try:
        body = await request.json()
        name = str(body.get("name", ""))
    except (ValueError, AttributeError):
        return JSONResponse({"error": "Invalid JSON"}, status_code=400)

    previous = cfg.current_profile()
    try:
        cfg.set_active_profile(name)
    except InvalidInput as e:
        return JSONResponse({"error": str(e)}, status_code=404)

    if previous and previous != cfg.current_profile():
        visibility.discard_profile(previous)
    return {"active": cfg.current_profile()}

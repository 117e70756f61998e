"""Category visibility API routes — edit mode with staged hide/show."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from streamview.dependencies import get_config_service, get_visibility_service
from streamview.errors import InvalidStateError
from streamview.models.media import MediaType
from streamview.services.config_service import ConfigService
from streamview.services.visibility_service import VisibilityService

router = APIRouter(prefix="/api/{media_type}/categories", tags=["categories"])


async def _category_id(request: Request) -> str:
    body = await request.json()
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    raw_id = body.get("category_id")
    category_id = "" if raw_id is None else str(raw_id).strip()
    if not category_id:
        raise ValueError("category_id is required")
    return category_id


@router.post("/edit")
async def enter_edit(
    media_type: MediaType,
    cfg: ConfigService = Depends(get_config_service),
    visibility: VisibilityService = Depends(get_visibility_service),
):
    state = visibility.enter_edit(cfg.current_profile(), media_type)
    return {"mode": state.mode.value, "hidden": state.staged}


@router.post("/hide")
async def hide_category(
    media_type: MediaType,
    request: Request,
    cfg: ConfigService = Depends(get_config_service),
    visibility: VisibilityService = Depends(get_visibility_service),
):
    try:
        category_id = await _category_id(request)
        hidden = visibility.hide(cfg.current_profile(), media_type, category_id)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except InvalidStateError as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    return {"mode": "editing", "hidden": hidden}


@router.post("/show")
async def show_category(
    media_type: MediaType,
    request: Request,
    cfg: ConfigService = Depends(get_config_service),
    visibility: VisibilityService = Depends(get_visibility_service),
):
    try:
        category_id = await _category_id(request)
        hidden = visibility.show(cfg.current_profile(), media_type, category_id)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except InvalidStateError as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    return {"mode": "editing", "hidden": hidden}


@router.post("/commit")
async def commit_edit(
    media_type: MediaType,
    cfg: ConfigService = Depends(get_config_service),
    visibility: VisibilityService = Depends(get_visibility_service),
):
    try:
        hidden = visibility.commit_and_exit(cfg.current_profile(), media_type)
    except InvalidStateError as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    return {"mode": "viewing", "hidden": hidden}


@router.post("/discard")
async def discard_edit(
    media_type: MediaType,
    cfg: ConfigService = Depends(get_config_service),
    visibility: VisibilityService = Depends(get_visibility_service),
):
    profile = cfg.current_profile()
    visibility.discard(profile, media_type)
    return {"mode": "viewing", "hidden": visibility.committed(profile, media_type)}

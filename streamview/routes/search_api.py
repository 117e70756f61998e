"""Search API routes — query the merged catalog and reveal results chunk by chunk."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from streamview.dependencies import get_search_service
from streamview.services.search_service import SearchService

router = APIRouter(prefix="/api/search", tags=["search"])


@router.get("")
async def search(q: str = "", svc: SearchService = Depends(get_search_service)):
    return await svc.search(q)


@router.post("/more")
async def load_more(svc: SearchService = Depends(get_search_service)):
    return await svc.load_more()

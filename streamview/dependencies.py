"""FastAPI dependency injection — provides services via Depends()."""
from __future__ import annotations

from fastapi import Request

from streamview.services.bucket_service import BucketService
from streamview.services.cache_service import CacheService
from streamview.services.config_service import ConfigService
from streamview.services.http_client import HttpClientService
from streamview.services.media_info_service import MediaInfoService
from streamview.services.search_service import SearchService
from streamview.services.store_service import StoreService
from streamview.services.visibility_service import VisibilityService
from streamview.services.xtream_service import XtreamService


def get_config_service(request: Request) -> ConfigService:
    return request.app.state.config_service


def get_http_client(request: Request) -> HttpClientService:
    return request.app.state.http_client


def get_store_service(request: Request) -> StoreService:
    return request.app.state.store_service


def get_xtream_service(request: Request) -> XtreamService:
    return request.app.state.xtream_service


def get_cache_service(request: Request) -> CacheService:
    return request.app.state.cache_service


def get_media_info_service(request: Request) -> MediaInfoService:
    return request.app.state.media_info_service


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def get_bucket_service(request: Request) -> BucketService:
    return request.app.state.bucket_service


def get_visibility_service(request: Request) -> VisibilityService:
    return request.app.state.visibility_service

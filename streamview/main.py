"""Streamview — catalog cache, favourites and search API for an Xtream Codes viewer."""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from streamview.database import init_db
from streamview.errors import StorageError
from streamview.routes import (
    bucket_api,
    cache_api,
    catalog_api,
    category_api,
    health,
    player_api,
    profile_api,
    search_api,
)
from streamview.services.bucket_service import BucketService
from streamview.services.cache_service import CacheService
from streamview.services.config_service import ConfigService
from streamview.services.http_client import HttpClientService
from streamview.services.media_info_service import MediaInfoService
from streamview.services.search_service import SearchService
from streamview.services.store_service import StoreService
from streamview.services.visibility_service import VisibilityService
from streamview.services.xtream_service import XtreamService

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
logger = logging.getLogger(__name__)

DATA_DIR = os.environ.get("DATA_DIR", "/data" if os.path.exists("/data") else "./data")


def create_app(data_dir: str = DATA_DIR, transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """Build a fully-wired app whose state lives in *data_dir*.

    *transport* replaces the network layer of the upstream HTTP client.
    """
    cfg = ConfigService(data_dir)
    cfg.load()
    http = HttpClientService(timeout=cfg.request_timeout, transport=transport)
    store = StoreService(data_dir)
    xtream = XtreamService(cfg, http)
    cache = CacheService(cfg, xtream)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        os.makedirs(data_dir, exist_ok=True)
        init_db(store.db_path)
        logger.info(f"Active profile: {cfg.current_profile() or '(none)'}")
        yield
        await http.close()
        logger.info("Application shutdown complete")

    app = FastAPI(title="Streamview", lifespan=lifespan)

    # Attach state for DI
    app.state.config_service = cfg
    app.state.http_client = http
    app.state.store_service = store
    app.state.xtream_service = xtream
    app.state.cache_service = cache
    app.state.media_info_service = MediaInfoService(xtream)
    app.state.search_service = SearchService(cfg, cache)
    app.state.bucket_service = BucketService(store)
    app.state.visibility_service = VisibilityService(store)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage failure on {request.url.path}: {exc}")
        return JSONResponse({"error": f"Could not save: {exc}"}, status_code=500)

    # UTF-8 charset middleware
    @app.middleware("http")
    async def add_utf8_charset(request: Request, call_next):
        response = await call_next(request)
        ct = response.headers.get("content-type", "")
        if "application/json" in ct and "charset" not in ct:
            response.headers["content-type"] = "application/json; charset=utf-8"
        return response

    for r in (
        health, profile_api, bucket_api, search_api, player_api,
        cache_api, category_api, catalog_api,
    ):
        app.include_router(r.router)

    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "5000")))


if __name__ == "__main__":
    run()

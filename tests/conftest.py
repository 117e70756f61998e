"""Shared fixtures: a fake Xtream panel and wired services on a temporary data dir."""

import asyncio
import json
from urllib.parse import urlsplit

import httpx
import pytest

from streamview.database import DB_NAME, init_db
from streamview.models.config import Profile
from streamview.services.config_service import ConfigService
from streamview.services.http_client import HttpClientService
from streamview.services.store_service import StoreService
from streamview.services.xtream_service import XtreamService

ALPHA = Profile(name="alice", host="http://alpha.example", username="al", password="pw1")
BETA = Profile(name="bob", host="http://beta.example:8080/", username="bo", password="pw2")


def _panel(prefix: str) -> dict:
    """Upstream responses of one panel, keyed by player_api action."""
    return {
        "get_live_categories": [
            {"category_id": "1", "category_name": "US News", "parent_id": 0},
            {"category_id": "2", "category_name": "FR Sports", "parent_id": 0},
        ],
        "get_vod_categories": [
            {"category_id": "10", "category_name": f"{prefix} Movies"},
        ],
        "get_series_categories": [
            {"category_id": "20", "category_name": "DE Drama"},
        ],
        "get_live_streams": [
            {"stream_id": 101, "name": "US News", "stream_icon": "http://img/1.png", "category_id": "1"},
            {"stream_id": 102, "name": "FR Canal", "stream_icon": "", "category_id": "2"},
        ],
        "get_vod_streams": [
            {
                "stream_id": 201,
                "name": f"{prefix} The Matrix",
                "stream_icon": "http://img/m.png",
                "category_id": "10",
                "container_extension": "mkv",
                "rating": 8.7,
            },
        ],
        "get_series": [
            {
                "series_id": 301,
                "name": "Dark",
                "cover": "http://img/dark.png",
                "category_id": "20",
                "cast": "Louis Hofmann",
                "director": "Baran bo Odar",
                "genre": "Mystery",
                "plot": "Time travel in Winden",
                "tmdb": 70523,
            },
        ],
    }


VOD_INFO = {
    "info": {
        "name": "The Matrix",
        "plot": "A hacker learns the truth.",
        "genre": "Sci-Fi",
        "cast": "Keanu Reeves",
        "director": "Wachowski",
        "rating": "8.7",
        "releasedate": "1999-03-31",
        "duration": "02:16:00",
        "backdrop_path": ["http://img/matrix-bg.jpg"],
        "cover_big": "http://img/matrix.jpg",
        "tmdb_id": "603",
    },
    "movie_data": {"stream_id": 201, "name": "The Matrix", "container_extension": "mkv"},
}

SERIES_INFO = {
    "info": {
        "name": "Dark",
        "cover": "http://img/dark.png",
        "plot": "Time travel in Winden",
        "cast": "Louis Hofmann",
        "director": "Baran bo Odar",
        "genre": "Mystery",
        "releaseDate": "2017-12-01",
        "rating": "8.8",
        "backdrop_path": [],
        "tmdb": "70523",
    },
    "episodes": {
        "1": [
            {"id": "9001", "episode_num": 1, "title": "Secrets", "container_extension": "mp4", "season": 1,
             "info": {"duration": "00:51:00", "movie_image": "http://img/e1.jpg"}},
            {"id": "9002", "episode_num": 2, "title": "Lies", "container_extension": "mp4", "season": 1,
             "info": {"duration": "00:44:00"}},
        ],
        "2": [
            {"id": "9101", "episode_num": 1, "title": "Beginnings and Endings", "container_extension": "mkv",
             "season": 2, "info": []},
        ],
    },
}


class FakeXtreamPanel:
    """httpx.MockTransport handler emulating ``player_api.php`` for two panels."""

    def __init__(self):
        self.panels = {"alpha.example": _panel("EN"), "beta.example": _panel("ES")}
        self.requests: list[tuple[str, str]] = []
        self.fail = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        host = urlsplit(str(request.url)).hostname
        action = request.url.params.get("action", "")
        self.requests.append((host, action))
        if self.fail:
            return httpx.Response(503, text="busy")
        if action == "get_vod_info":
            if request.url.params.get("vod_id") == "201":
                return httpx.Response(200, json=VOD_INFO)
            return httpx.Response(200, json={"info": [], "movie_data": {}})
        if action == "get_series_info":
            if request.url.params.get("series_id") == "301":
                return httpx.Response(200, json=SERIES_INFO)
            return httpx.Response(200, json=[])
        return httpx.Response(200, json=self.panels.get(host, {}).get(action, []))

    def count(self, action: str) -> int:
        return sum(1 for _, a in self.requests if a == action)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def write_config(data_dir, active="alice", profiles=(ALPHA, BETA), **options):
    config = {
        "profiles": [p.model_dump() for p in profiles],
        "active_profile": active,
        "options": options,
    }
    (data_dir / "config.json").write_text(json.dumps(config))


def run(coro):
    return asyncio.run(coro)


@pytest.fixture()
def data_dir(tmp_path):
    write_config(tmp_path)
    return tmp_path


@pytest.fixture()
def config_service(data_dir):
    cfg = ConfigService(str(data_dir))
    cfg.load()
    return cfg


@pytest.fixture()
def store(data_dir):
    init_db(str(data_dir / DB_NAME))
    return StoreService(str(data_dir))


@pytest.fixture()
def panel():
    return FakeXtreamPanel()


@pytest.fixture()
def xtream(config_service, panel):
    return XtreamService(config_service, HttpClientService(transport=panel.transport))

"""Pytest configuration and fixtures."""

import copy
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from platify.config import Settings
from platify.main import create_app

API_BASE_URL = "https://api.test"

SAMPLE_RECIPE = {
    "id": "r-42",
    "name": "Shakshuka",
    "description": "A one-pan dish from North Africa.",
    "image": "https://cdn.test/shakshuka.jpg",
    "boards": ["Dinner", "Brunch"],
    "tags": [
        {"name": "Vegetarian", "lightColor": "#e3f4e8", "darkColor": "#2f7d4f"},
        {"name": "One pan", "lightColor": "#fff1d6", "darkColor": "#9a6400"},
    ],
    "sections": [
        {
            "title": "Sauce",
            "ingredients": [
                {"name": "Crushed tomatoes", "quantity": "400", "unit": "g"},
                {"name": "Cumin", "quantity": "1", "unit": "tsp"},
                {"name": "Salt", "quantity": "", "unit": ""},
            ],
        },
        {
            "title": "Method",
            "directions": [
                {"heading": "Simmer", "text": "Simmer the tomatoes with the cumin."},
                {"heading": "", "text": "Crack in the eggs and cover."},
            ],
            "videoLink": "https://video.test/shakshuka",
        },
        {
            "title": "Per serving",
            "items": [
                {
                    "name": "Egg",
                    "thumbnail": "",
                    "quantity": 2.0,
                    "unit": "pcs",
                    "nutrients": {"energy": 143.0, "carbs": 0.7, "proteins": 12.6, "fats": 9.5},
                }
            ],
            "list": [{"name": "Eggs"}, {"name": "Tomatoes"}],
        },
    ],
}

SAMPLE_PRODUCT = {
    "id": "p-7",
    "name": "Greek Yogurt",
    "thumbnail": "https://cdn.test/yogurt.png",
    "unit": "100 g",
    "nutrients": {"energy": 97.0, "carbs": 3.5, "proteins": 9.0, "fats": 5.0},
}


class FakeUpstream:
    """Programmable upstream API for httpx.MockTransport."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, path, status_code=200, payload=None, content=None):
        if content is None and payload is not None:
            content = json.dumps(payload).encode()
        self.routes[path] = (status_code, content or b"")

    def fail(self, path, exc):
        self.routes[path] = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.raw_path.decode())
        if route is None:
            return httpx.Response(404)
        if isinstance(route, Exception):
            raise route
        status_code, content = route
        return httpx.Response(status_code, content=content, headers={"Content-Type": "application/json"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def sample_recipe():
    return copy.deepcopy(SAMPLE_RECIPE)


@pytest.fixture
def sample_product():
    return copy.deepcopy(SAMPLE_PRODUCT)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def settings(tmp_path):
    """Settings pointing uploads at a temporary directory."""
    return Settings(
        api_base_url=API_BASE_URL,
        upload_dir=tmp_path / "uploads",
        app_mode="debug",
    )


@pytest.fixture
def client(settings, upstream):
    """Create test client wired to the fake upstream."""
    app = create_app(settings, upstream_transport=upstream.transport)
    with TestClient(app) as test_client:
        yield test_client

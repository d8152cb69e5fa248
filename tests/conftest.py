"""
Root Test Fixtures.

Provides an in-memory stand-in for the restful-api.dev objects endpoints,
served through httpx.MockTransport, and a client wired to it.
"""

import json
import logging
import time
from collections.abc import AsyncGenerator
from typing import Any
from uuid import uuid4

import httpx
import pytest

from objects_api.client.client import ObjectsClient

TEST_BASE_URL = "https://api.test"

SEED_OBJECTS: list[dict[str, Any]] = [
    {"id": "1", "name": "Google Pixel 6 Pro", "data": {"color": "Cloudy White", "capacity": "128 GB"}},
    {"id": "2", "name": "Apple iPhone 12 Mini, 256GB, Blue", "data": None},
    {"id": "3", "name": "Apple iPhone 12 Pro Max", "data": {"color": "Cloudy White", "capacity GB": 512}},
    {
        "id": "7",
        "name": "Apple MacBook Pro 16",
        "data": {"year": 2019, "price": 1849.99, "CPU model": "Intel Core i9", "Hard disk size": "1 TB"},
    },
    {"id": "10", "name": "Apple iPad Mini 5th Gen", "data": {"Capacity": "64 GB", "Screen size": 7.9}},
]


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run integration scenarios against the API configured in application.yaml",
    )


class FakeObjectsAPI:
    """
    In-memory objects API with the status conventions of restful-api.dev.

    - Seed records are read-only; writes to them answer 405
    - DELETE answers 200 with a confirmation message
    - Unknown ids answer 404
    """

    def __init__(self, seed: list[dict[str, Any]] | None = None):
        self._records: dict[str, dict[str, Any]] = {
            item["id"]: dict(item) for item in (SEED_OBJECTS if seed is None else seed)
        }
        self._reserved = set(self._records)
        self.requests: list[httpx.Request] = []

    @staticmethod
    def _now_millis() -> int:
        return int(time.time() * 1000)

    @staticmethod
    def _error(status_code: int, message: str, **headers: str) -> httpx.Response:
        return httpx.Response(status_code, json={"error": message}, headers=headers)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = [p for p in request.url.path.split("/") if p]
        if not parts or parts[0] != "objects" or len(parts) > 2:
            return self._error(404, "Not found")

        if len(parts) == 1:
            if request.method == "GET":
                return self._list(request)
            if request.method == "POST":
                return self._create(request)
            return self._error(405, "Method not allowed", allow="GET, POST")

        object_id = parts[1]
        handlers = {
            "GET": self._get,
            "PUT": self._replace,
            "PATCH": self._patch,
            "DELETE": self._delete,
        }
        handler = handlers.get(request.method)
        if handler is None:
            return self._error(405, "Method not allowed", allow="GET, PUT, PATCH, DELETE")
        if object_id not in self._records:
            return self._error(404, f"Oject with id={object_id} was not found.")
        if request.method != "GET" and object_id in self._reserved:
            return self._error(405, f"{object_id} is a reserved id and the data object of it cannot be changed.")
        return handler(request, object_id)

    def _list(self, request: httpx.Request) -> httpx.Response:
        ids = request.url.params.get_list("id")
        if ids:
            items = [self._records[i] for i in ids if i in self._records]
        else:
            items = list(self._records.values())
        return httpx.Response(200, json=items)

    def _create(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        record = {
            "id": uuid4().hex,
            "name": body.get("name"),
            "data": body.get("data"),
            "createdAt": self._now_millis(),
        }
        self._records[record["id"]] = record
        return httpx.Response(200, json=record)

    def _get(self, request: httpx.Request, object_id: str) -> httpx.Response:
        return httpx.Response(200, json=self._records[object_id])

    def _replace(self, request: httpx.Request, object_id: str) -> httpx.Response:
        body = json.loads(request.content)
        record = self._records[object_id]
        record["name"] = body.get("name")
        record["data"] = body.get("data")
        record["updatedAt"] = self._now_millis()
        return httpx.Response(
            200,
            json={k: record[k] for k in ("id", "name", "data", "updatedAt")},
        )

    def _patch(self, request: httpx.Request, object_id: str) -> httpx.Response:
        body = json.loads(request.content)
        record = self._records[object_id]
        if "name" in body:
            record["name"] = body["name"]
        if "data" in body:
            record["data"] = {**(record.get("data") or {}), **body["data"]}
        record["updatedAt"] = self._now_millis()
        return httpx.Response(
            200,
            json={k: record[k] for k in ("id", "name", "data", "updatedAt")},
        )

    def _delete(self, request: httpx.Request, object_id: str) -> httpx.Response:
        del self._records[object_id]
        return httpx.Response(200, json={"message": f"Object with id = {object_id} has been deleted."})

    def contains(self, object_id: str) -> bool:
        return object_id in self._records


@pytest.fixture
def isolated_logging():
    """Remove root handlers and level changes a test installs via setup_logging."""
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in saved_handlers:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(saved_level)


@pytest.fixture
def fake_api() -> FakeObjectsAPI:
    """Fresh fake server per test."""
    return FakeObjectsAPI()


@pytest.fixture
async def objects_client(fake_api: FakeObjectsAPI) -> AsyncGenerator[ObjectsClient, None]:
    """
    Client talking to the fake server.

    Usage:
        async def test_list(objects_client: ObjectsClient):
            records = await objects_client.list_all()
    """
    client = ObjectsClient(
        base_url=TEST_BASE_URL,
        timeout=5.0,
        headers={"Accept": "application/json"},
        transport=httpx.MockTransport(fake_api.handle),
    )
    yield client
    await client.close()

"""
Integration Test Fixtures.

CRUD scenarios run against the in-memory fake by default. Pass --live to
run them against the API configured in config/settings/application.yaml.
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest

from objects_api.client.client import ObjectsClient
from objects_api.models.objects import CreateOrReplaceRequest, DataPayload, ObjectRecord
from objects_api.models.responses import RawResponse


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def live(request: pytest.FixtureRequest) -> bool:
    return bool(request.config.getoption("--live"))


@pytest.fixture
async def client(live: bool, fake_api: Any) -> AsyncGenerator[ObjectsClient, None]:
    """
    Client for scenario tests.

    Usage:
        async def test_list(client: ObjectsClient):
            records = await client.list_all()
    """
    if live:
        api_client = ObjectsClient()
    else:
        api_client = ObjectsClient(
            base_url="https://api.test",
            timeout=5.0,
            headers={"Accept": "application/json"},
            transport=httpx.MockTransport(fake_api.handle),
        )
    yield api_client
    await api_client.close()


# =============================================================================
# Request Builders
# =============================================================================


def build_sample_request(name_suffix: str = "") -> CreateOrReplaceRequest:
    """The MacBook Pro payload used across scenarios."""
    return CreateOrReplaceRequest(
        name=f"Apple MacBook Pro 16{name_suffix}",
        data=DataPayload(
            year="2023",
            price="2399.99",
            cpu_model="Apple M3 Pro",
            hard_disk_size="512 GB",
            color="Space Gray",
        ),
    )


def build_update_request() -> CreateOrReplaceRequest:
    """The full-replace payload used by the update scenario."""
    return CreateOrReplaceRequest(
        name="Apple MacBook Air M2 – Updated",
        data=DataPayload(
            year="2024",
            price="1299.00",
            cpu_model="Apple M2",
            hard_disk_size="256 GB",
            color="Midnight",
        ),
    )


@pytest.fixture
def sample_request() -> Callable[[str], CreateOrReplaceRequest]:
    """Factory for create payloads with a distinguishing name suffix."""
    return build_sample_request


@pytest.fixture
def update_request() -> CreateOrReplaceRequest:
    return build_update_request()


# =============================================================================
# Record Assertion Helpers
# =============================================================================


class RecordAssertions:
    """Helper class for record assertions."""

    @staticmethod
    def assert_matches(record: ObjectRecord, request: CreateOrReplaceRequest) -> None:
        """
        Assert a record carries exactly the submitted name and data.

        Raises:
            AssertionError: If name or any data attribute differs
        """
        assert record.name == request.name, f"Expected name {request.name!r}, got {record.name!r}"
        expected = request.data.to_wire() if request.data else None
        actual = record.data.to_wire() if record.data else None
        assert actual == expected, f"Expected data {expected}, got {actual}"

    @staticmethod
    def assert_not_found(raw: RawResponse) -> None:
        """Assert a raw response is 404 and nothing else."""
        assert raw.status_code == 404, (
            f"Expected status 404, got {raw.status_code}: {raw.text}"
        )


@pytest.fixture
def records() -> RecordAssertions:
    """Provide record assertion helpers."""
    return RecordAssertions()
